import unittest
from decimal import Decimal
from unittest import TestCase

import numpy as np

from src.ndstorage.domain._dtype import DType
from src.ndstorage.domain._errors import (
    ShapeMismatchError,
    TypeMismatchError,
    UnsupportedConversionError,
)
from src.ndstorage.domain._shape import Layout
from src.ndstorage.infrastructure.shape._shape import Shape
from src.ndstorage.infrastructure.storage._storage import Storage


def _int32_storage(*dims):
    s = Storage(DType.INT32)
    s.allocate(Shape(*dims))
    return s


class TestGetTypedView(TestCase):
    def test_matching_kind_returns_live_buffer(self):
        s = _int32_storage(3)
        view = s.get_typed_view(DType.INT32)
        view[1] = 42
        self.assertEqual(s.read(1), 42)
        self.assertIs(s.get_typed_view(np.int32), view)

    def test_every_mismatched_pair_raises(self):
        for held in DType:
            s = Storage(held)
            for requested in DType:
                if requested is held:
                    continue
                with self.subTest(held=held, requested=requested):
                    with self.assertRaises(TypeMismatchError) as cm:
                        s.get_typed_view(requested)
                    self.assertIs(cm.exception.expected, held)
                    self.assertIs(cm.exception.actual, requested)

    def test_never_converts(self):
        s = _int32_storage(2)
        with self.assertRaises(TypeMismatchError):
            s.get_typed_view(DType.INT64)
        self.assertIs(s.dtype, DType.INT32)


class TestGetConverted(TestCase):
    def test_same_dtype_is_borrow(self):
        s = _int32_storage(4)
        self.assertIs(s.get_converted(DType.INT32), s.get_typed_view(DType.INT32))

    def test_int32_to_complex(self):
        s = _int32_storage(3)
        s.set_buffer([1, 2, 3])
        out = s.get_converted(DType.COMPLEX64)
        np.testing.assert_array_equal(out, np.array([1 + 0j, 2 + 0j, 3 + 0j]))
        self.assertIs(s.dtype, DType.INT32)
        self.assertEqual(s.get_typed_view(DType.INT32).dtype, np.int32)

    def test_unsupported_pair(self):
        s = Storage.wrap(np.array([1 + 1j, 2 + 0j]))
        with self.assertRaises(UnsupportedConversionError):
            s.get_converted(DType.FLOAT64)

    def test_opaque_storage_holding_decimals_stays_opaque(self):
        s = Storage(DType.OPAQUE)
        s.set_buffer([Decimal("1.5")])
        self.assertIs(s.dtype, DType.OPAQUE)
        with self.assertRaises(UnsupportedConversionError):
            s.get_converted(DType.FLOAT64)


class TestCloneConverted(TestCase):
    def test_same_dtype_is_independent(self):
        s = _int32_storage(3)
        out = s.clone_converted(DType.INT32)
        self.assertFalse(np.shares_memory(out, s.get_typed_view(DType.INT32)))
        out[0] = 9
        self.assertEqual(s.read(0), 0)

    def test_other_dtype(self):
        s = Storage.from_array(np.array([1.25, -2.75]))
        out = s.clone_converted(DType.DECIMAL128)
        self.assertEqual(list(out), [Decimal("1.25"), Decimal("-2.75")])
        self.assertIs(s.dtype, DType.FLOAT64)


class TestSetBuffer(TestCase):
    def test_int32_storage_keeps_kind(self):
        s = _int32_storage(2, 3)
        s.set_buffer([1, 2, 3, 4, 5, 6])
        self.assertIs(s.dtype, DType.INT32)
        buf = s.get_typed_view(DType.INT32)
        self.assertEqual(buf.dtype, np.int32)
        np.testing.assert_array_equal(buf, np.arange(1, 7, dtype=np.int32))

    def test_default_target_converts_to_current_dtype(self):
        s = _int32_storage(3)
        s.set_buffer(np.array([1.9, -1.9, 3.0]))
        self.assertIs(s.dtype, DType.INT32)
        np.testing.assert_array_equal(
            s.get_typed_view(DType.INT32), np.array([1, -1, 3], dtype=np.int32)
        )

    def test_explicit_dtype_changes_kind(self):
        s = _int32_storage(3)
        s.set_buffer([1, 2, 3], DType.FLOAT32)
        self.assertIs(s.dtype, DType.FLOAT32)
        self.assertEqual(s.get_typed_view(DType.FLOAT32).dtype, np.float32)
        with self.assertRaises(TypeMismatchError):
            s.get_typed_view(DType.INT32)

    def test_takes_ownership_without_conversion(self):
        s = Storage(DType.FLOAT64)
        s.allocate(Shape(3))
        buf = np.array([1.5, 2.5, 3.5])
        s.set_buffer(buf)
        self.assertIs(s.get_typed_view(DType.FLOAT64), buf)

    def test_previous_borrow_keeps_old_values(self):
        s = _int32_storage(2)
        old = s.get_typed_view(DType.INT32)
        s.set_buffer([7, 8])
        np.testing.assert_array_equal(old, [0, 0])
        np.testing.assert_array_equal(s.get_typed_view(DType.INT32), [7, 8])

    def test_length_mismatch(self):
        s = _int32_storage(2, 3)
        with self.assertRaises(ShapeMismatchError) as cm:
            s.set_buffer([1, 2, 3])
        self.assertEqual(cm.exception.expected, 6)
        self.assertEqual(cm.exception.actual, 3)
        self.assertEqual(s.read(0, 0), 0)

    def test_unconvertible_buffer(self):
        s = Storage(DType.FLOAT64)
        s.allocate(Shape(2))
        with self.assertRaises(UnsupportedConversionError):
            s.set_buffer(["a", "b"])
        self.assertIs(s.dtype, DType.FLOAT64)

    def test_decimal_buffer(self):
        s = Storage(DType.DECIMAL128)
        s.allocate(Shape(2))
        s.set_buffer([Decimal("0.1"), Decimal("0.2")])
        self.assertEqual(s.read(0) + s.read(1), Decimal("0.3"))

    def test_multi_dimensional_input_follows_layout(self):
        s = Storage(DType.INT64)
        s.allocate(Shape(2, 3, layout=Layout.COLUMN_MAJOR))
        s.set_buffer(np.array([[1, 2, 3], [4, 5, 6]], dtype=np.int64))
        self.assertEqual(s.read(0, 2), 3)
        self.assertEqual(s.read(1, 0), 4)


if __name__ == "__main__":
    unittest.main()
