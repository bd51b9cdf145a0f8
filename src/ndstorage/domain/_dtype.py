"""
Element-kind enumeration for ndstorage.

This module defines `DType`, the closed set of element kinds a storage can
hold, together with the helpers that resolve a caller-supplied kind (a numpy
dtype, a numpy scalar type or a Python type) or an existing buffer to one of
those tags.

Notes
-----
- `COMPLEX64` denotes a complex number with 64-bit real and imaginary parts
  and is backed by ``numpy.complex128`` buffers.
- `DECIMAL128` and `OPAQUE` are backed by ``object`` buffers. Decimal buffers
  hold `decimal.Decimal` instances; opaque buffers hold arbitrary references
  and support no arithmetic conversion.
"""

from __future__ import annotations

from decimal import Decimal
from enum import Enum
from typing import Any

import numpy as np


class DType(Enum):
    """
    Enumeration of supported element kinds.

    Attributes
    ----------
    INT32, INT64 : DType
        Signed two's complement integers.
    FLOAT32, FLOAT64 : DType
        IEEE-754 binary floating point.
    DECIMAL128 : DType
        High-precision decimal (`decimal.Decimal`).
    COMPLEX64 : DType
        Complex number with float64 components.
    OPAQUE : DType
        Boxed fallback for element types outside the numeric set.
    """

    INT32 = "int32"
    INT64 = "int64"
    FLOAT32 = "float32"
    FLOAT64 = "float64"
    DECIMAL128 = "decimal128"
    COMPLEX64 = "complex64"
    OPAQUE = "opaque"

    def __str__(self) -> str:
        return self.value

    @property
    def numpy_dtype(self) -> np.dtype:
        """Numpy dtype of buffers holding this kind."""
        return _NUMPY_DTYPES[self]

    @property
    def itemsize(self) -> int:
        """Bytes per element; 0 for `OPAQUE`."""
        return _ITEMSIZES[self]

    @property
    def default(self) -> Any:
        """Value a freshly allocated element of this kind holds."""
        if self is DType.DECIMAL128:
            return Decimal(0)
        if self is DType.OPAQUE:
            return None
        return self.numpy_dtype.type(0)

    @property
    def is_integer(self) -> bool:
        return self in (DType.INT32, DType.INT64)

    @property
    def is_real(self) -> bool:
        """True for the four binary real kinds (integers and floats)."""
        return self in _REAL_KINDS

    @classmethod
    def of(cls, kind: Any) -> "DType":
        """
        Resolve a caller-supplied kind to a `DType`.

        Parameters
        ----------
        kind : Any
            A `DType`, a numpy dtype or scalar type (e.g. ``np.int32``), or one
            of the Python types ``int``, ``float``, ``complex``, ``Decimal``.

        Returns
        -------
        DType
            The matching tag; `OPAQUE` for anything outside the numeric set.
        """
        if isinstance(kind, DType):
            return kind
        if kind is None:
            return cls.OPAQUE
        if kind is Decimal:
            return cls.DECIMAL128
        if isinstance(kind, str) and kind in cls._value2member_map_:
            return cls(kind)
        if isinstance(kind, type) and kind in _PYTHON_KINDS:
            return _PYTHON_KINDS[kind]
        try:
            np_dtype = np.dtype(kind)
        except TypeError:
            return cls.OPAQUE
        return _FROM_NUMPY.get(np_dtype, cls.OPAQUE)

    @classmethod
    def infer(cls, buffer: np.ndarray) -> "DType":
        """
        Infer the element kind actually held by a buffer.

        Numeric numpy buffers map directly. ``object`` buffers are
        `DECIMAL128` when every element is a `Decimal` and `OPAQUE`
        otherwise, as is every other numpy dtype.
        """
        if buffer.dtype == object:
            if buffer.size and all(isinstance(v, Decimal) for v in buffer.flat):
                return cls.DECIMAL128
            return cls.OPAQUE
        return _FROM_NUMPY.get(buffer.dtype, cls.OPAQUE)


_NUMPY_DTYPES = {
    DType.INT32: np.dtype(np.int32),
    DType.INT64: np.dtype(np.int64),
    DType.FLOAT32: np.dtype(np.float32),
    DType.FLOAT64: np.dtype(np.float64),
    DType.DECIMAL128: np.dtype(object),
    DType.COMPLEX64: np.dtype(np.complex128),
    DType.OPAQUE: np.dtype(object),
}

_ITEMSIZES = {
    DType.INT32: 4,
    DType.INT64: 8,
    DType.FLOAT32: 4,
    DType.FLOAT64: 8,
    DType.DECIMAL128: 16,
    DType.COMPLEX64: 16,
    DType.OPAQUE: 0,
}

_REAL_KINDS = frozenset({DType.INT32, DType.INT64, DType.FLOAT32, DType.FLOAT64})

_FROM_NUMPY = {
    np.dtype(np.int32): DType.INT32,
    np.dtype(np.int64): DType.INT64,
    np.dtype(np.float32): DType.FLOAT32,
    np.dtype(np.float64): DType.FLOAT64,
    np.dtype(np.complex64): DType.COMPLEX64,
    np.dtype(np.complex128): DType.COMPLEX64,
}

_PYTHON_KINDS = {
    int: DType.INT64,
    float: DType.FLOAT64,
    complex: DType.COMPLEX64,
}

DEFAULT_DTYPE = DType.FLOAT64
"""Element kind used when a storage is created without an explicit dtype."""
