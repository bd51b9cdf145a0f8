import unittest
from decimal import Decimal
from unittest import TestCase

import numpy as np

from src.ndstorage.domain._dtype import DEFAULT_DTYPE, DType


class TestDTypeResolution(TestCase):
    def test_of_numpy_kinds(self):
        self.assertIs(DType.of(np.int32), DType.INT32)
        self.assertIs(DType.of(np.int64), DType.INT64)
        self.assertIs(DType.of(np.dtype("float32")), DType.FLOAT32)
        self.assertIs(DType.of(np.float64), DType.FLOAT64)
        self.assertIs(DType.of(np.complex64), DType.COMPLEX64)
        self.assertIs(DType.of(np.complex128), DType.COMPLEX64)

    def test_of_python_kinds(self):
        self.assertIs(DType.of(int), DType.INT64)
        self.assertIs(DType.of(float), DType.FLOAT64)
        self.assertIs(DType.of(complex), DType.COMPLEX64)
        self.assertIs(DType.of(Decimal), DType.DECIMAL128)

    def test_of_tag_names(self):
        self.assertIs(DType.of("decimal128"), DType.DECIMAL128)
        self.assertIs(DType.of("opaque"), DType.OPAQUE)
        self.assertIs(DType.of("float32"), DType.FLOAT32)

    def test_of_dtype_is_identity(self):
        for d in DType:
            with self.subTest(dtype=d):
                self.assertIs(DType.of(d), d)

    def test_of_unsupported_kinds_is_opaque(self):
        self.assertIs(DType.of(str), DType.OPAQUE)
        self.assertIs(DType.of(np.bool_), DType.OPAQUE)
        self.assertIs(DType.of(np.int16), DType.OPAQUE)
        self.assertIs(DType.of(object), DType.OPAQUE)
        self.assertIs(DType.of(None), DType.OPAQUE)


class TestDTypeInference(TestCase):
    def test_numeric_buffers(self):
        self.assertIs(DType.infer(np.zeros(2, dtype=np.int32)), DType.INT32)
        self.assertIs(DType.infer(np.zeros(2, dtype=np.float32)), DType.FLOAT32)
        self.assertIs(DType.infer(np.zeros(2, dtype=np.complex128)), DType.COMPLEX64)

    def test_decimal_buffer(self):
        buf = np.empty(2, dtype=object)
        buf[0] = Decimal("1.5")
        buf[1] = Decimal(2)
        self.assertIs(DType.infer(buf), DType.DECIMAL128)

    def test_mixed_object_buffer_is_opaque(self):
        buf = np.empty(2, dtype=object)
        buf[0] = Decimal("1.5")
        buf[1] = "text"
        self.assertIs(DType.infer(buf), DType.OPAQUE)

    def test_empty_object_buffer_is_opaque(self):
        self.assertIs(DType.infer(np.empty(0, dtype=object)), DType.OPAQUE)

    def test_unsupported_numpy_kind_is_opaque(self):
        self.assertIs(DType.infer(np.array([True, False])), DType.OPAQUE)
        self.assertIs(DType.infer(np.array(["a", "b"])), DType.OPAQUE)


class TestDTypeMetadata(TestCase):
    def test_itemsize(self):
        self.assertEqual(DType.INT32.itemsize, 4)
        self.assertEqual(DType.INT64.itemsize, 8)
        self.assertEqual(DType.FLOAT32.itemsize, 4)
        self.assertEqual(DType.FLOAT64.itemsize, 8)
        self.assertEqual(DType.DECIMAL128.itemsize, 16)
        self.assertEqual(DType.COMPLEX64.itemsize, 16)
        self.assertEqual(DType.OPAQUE.itemsize, 0)

    def test_defaults(self):
        self.assertEqual(DType.INT32.default, 0)
        self.assertIsInstance(DType.INT32.default, np.int32)
        self.assertEqual(DType.COMPLEX64.default, 0j)
        self.assertEqual(DType.DECIMAL128.default, Decimal(0))
        self.assertIsNone(DType.OPAQUE.default)

    def test_numpy_representation(self):
        self.assertEqual(DType.COMPLEX64.numpy_dtype, np.dtype(np.complex128))
        self.assertEqual(DType.DECIMAL128.numpy_dtype, np.dtype(object))
        self.assertEqual(DType.OPAQUE.numpy_dtype, np.dtype(object))

    def test_kind_predicates(self):
        self.assertTrue(DType.INT64.is_integer)
        self.assertFalse(DType.FLOAT64.is_integer)
        self.assertTrue(DType.FLOAT32.is_real)
        self.assertFalse(DType.COMPLEX64.is_real)
        self.assertFalse(DType.DECIMAL128.is_real)

    def test_default_dtype(self):
        self.assertIs(DEFAULT_DTYPE, DType.FLOAT64)
        self.assertEqual(str(DType.INT32), "int32")


if __name__ == "__main__":
    unittest.main()
