"""
Conversion rules between storage element kinds.

Every function in this module converts a flat buffer to one target kind and
is registered in `conversion_table` for the (source, target) pairs it
handles. Rules always return a new buffer; none of them alias the input.

Rules
-----
- real -> float          : numpy widening / narrowing cast.
- real -> int            : truncation toward zero; integer sources wrap
                           modulo 2**bits, out-of-range or non-finite floats
                           follow numpy's cast.
- decimal -> float / int : ``float()`` / truncating ``int()`` (same wrap).
- real, complex, decimal -> complex : zero imaginary part for real sources.
- real -> decimal        : integers exactly, floats through their shortest
                           round-trip text.
- any -> opaque          : elements boxed unchanged.

Complex -> real, complex -> decimal and opaque -> numeric have no rule.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any, Iterable

import numpy as np

from ...domain._dtype import DType
from ._registry import conversion_table

REAL = tuple(d for d in DType if d.is_real)
INTEGERS = tuple(d for d in REAL if d.is_integer)
FLOATS = tuple(d for d in REAL if not d.is_integer)
ALL_KINDS = tuple(DType)

_BITS = {DType.INT32: 32, DType.INT64: 64}


def object_buffer(values: Iterable[Any], length: int) -> np.ndarray:
    """
    Build a 1-D ``object`` buffer element by element.

    Elements are assigned one at a time so that sequence-like elements are
    stored as references instead of being unpacked by numpy.
    """
    out = np.empty(length, dtype=object)
    for i, v in enumerate(values):
        out[i] = v
    return out


def wrap_integer(value: int, bits: int) -> int:
    """Reduce a Python int to a signed two's complement value of ``bits`` bits."""
    value &= (1 << bits) - 1
    if value >= 1 << (bits - 1):
        value -= 1 << bits
    return value


@conversion_table.register(sources=REAL, targets=FLOATS)
def real_to_float(buffer: np.ndarray, target: DType) -> np.ndarray:
    return buffer.astype(target.numpy_dtype)


@conversion_table.register(sources=REAL, targets=INTEGERS)
def real_to_integer(buffer: np.ndarray, target: DType) -> np.ndarray:
    with np.errstate(invalid="ignore", over="ignore"):
        return buffer.astype(target.numpy_dtype)


@conversion_table.register(sources=(DType.DECIMAL128,), targets=FLOATS)
def decimal_to_float(buffer: np.ndarray, target: DType) -> np.ndarray:
    return np.array([float(v) for v in buffer], dtype=target.numpy_dtype)


@conversion_table.register(sources=(DType.DECIMAL128,), targets=INTEGERS)
def decimal_to_integer(buffer: np.ndarray, target: DType) -> np.ndarray:
    bits = _BITS[target]
    out = np.empty(len(buffer), dtype=target.numpy_dtype)
    for i, v in enumerate(buffer):
        if v.is_finite():
            out[i] = wrap_integer(int(v), bits)
        else:
            # NaN / Infinity: same outcome as casting the float value.
            with np.errstate(invalid="ignore", over="ignore"):
                out[i] = np.array([float(v)]).astype(target.numpy_dtype)[0]
    return out


@conversion_table.register(
    sources=REAL + (DType.COMPLEX64,), targets=(DType.COMPLEX64,)
)
def numeric_to_complex(buffer: np.ndarray, target: DType) -> np.ndarray:
    return buffer.astype(target.numpy_dtype)


@conversion_table.register(sources=(DType.DECIMAL128,), targets=(DType.COMPLEX64,))
def decimal_to_complex(buffer: np.ndarray, target: DType) -> np.ndarray:
    return np.array([complex(float(v), 0.0) for v in buffer], dtype=target.numpy_dtype)


@conversion_table.register(sources=REAL, targets=(DType.DECIMAL128,))
def real_to_decimal(buffer: np.ndarray, target: DType) -> np.ndarray:
    if DType.infer(buffer).is_integer:
        values = (Decimal(int(v)) for v in buffer)
    else:
        values = (Decimal(str(v)) for v in buffer)
    return object_buffer(values, len(buffer))


@conversion_table.register(sources=(DType.DECIMAL128,), targets=(DType.DECIMAL128,))
def decimal_copy(buffer: np.ndarray, target: DType) -> np.ndarray:
    return object_buffer(buffer, len(buffer))


@conversion_table.register(sources=ALL_KINDS, targets=(DType.OPAQUE,))
def box(buffer: np.ndarray, target: DType) -> np.ndarray:
    if buffer.dtype == object:
        return object_buffer(buffer, len(buffer))
    return object_buffer(buffer.tolist(), len(buffer))


__all__ = [object_buffer.__name__, wrap_integer.__name__]
