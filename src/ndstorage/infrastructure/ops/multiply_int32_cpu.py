"""
CPU reference implementations of Int32 elementwise multiplication.

This module provides naive NumPy kernels that consume storages only through
the kernel interface:

- inputs are read via `Storage.get_typed_view(DType.INT32)` (borrowed, never
  converted), and
- results are handed back via `Storage.set_buffer(...)`.

Implemented variants
--------------------
- storage x storage  -> new storage (`multiply_int32_array_cpu`)
- storage x scalar   -> new storage (`multiply_int32_scalar_cpu`)
- storage x storage  -> in place    (`multiply_int32_inplace_cpu`)

Scope and assumptions
---------------------
- No broadcasting: both operands must have the same dimensions. When the
  layouts differ, the right operand is reordered into the left one's layout
  before the flat buffers are combined.
- Int32 arithmetic wraps on overflow (two's complement), as numpy does for
  ``int32`` arrays.
"""

from __future__ import annotations

from typing import Tuple

import numpy as np

from ...domain._dtype import DType
from ...domain._errors import ShapeMismatchError, TypeMismatchError
from ..dtype import wrap_integer
from ..storage._storage import Storage


def _aligned_operands(a: Storage, b: Storage) -> Tuple[np.ndarray, np.ndarray]:
    """
    Return the INT32 buffers of ``a`` and ``b`` with ``b`` laid out in
    ``a``'s element order.
    """
    x = a.get_typed_view(DType.INT32)
    y = b.get_typed_view(DType.INT32)
    if a.shape.dimensions() != b.shape.dimensions():
        raise ShapeMismatchError(
            a.shape.dimensions(), b.shape.dimensions(), op="multiply"
        )
    if a.shape.layout is not b.shape.layout:
        y = y.reshape(b.shape.dimensions(), order=b.shape.layout.value).reshape(
            -1, order=a.shape.layout.value
        )
    return x, y


def multiply_int32_array_cpu(a: Storage, b: Storage) -> Storage:
    """
    Elementwise product of two INT32 storages.

    Parameters
    ----------
    a, b : Storage
        INT32 operands with equal dimensions.

    Returns
    -------
    Storage
        A new INT32 storage shaped like ``a``.

    Raises
    ------
    TypeMismatchError
        If either operand is not INT32.
    ShapeMismatchError
        If the dimensions differ.
    """
    x, y = _aligned_operands(a, b)

    out = Storage(DType.INT32)
    out.allocate(a.shape.copy())
    out.set_buffer(np.multiply(x, y))
    return out


def multiply_int32_scalar_cpu(a: Storage, scalar: int) -> Storage:
    """
    Multiply every element of an INT32 storage by an integer scalar.

    The scalar is reduced to 32 bits first, so out-of-range scalars wrap the
    same way the product does.

    Raises
    ------
    TypeMismatchError
        If ``a`` is not INT32 or ``scalar`` is not an integer.
    """
    x = a.get_typed_view(DType.INT32)
    if isinstance(scalar, bool) or not isinstance(scalar, (int, np.integer)):
        raise TypeMismatchError(DType.INT32, DType.of(type(scalar)), op="multiply")

    out = Storage(DType.INT32)
    out.allocate(a.shape.copy())
    out.set_buffer(np.multiply(x, np.int32(wrap_integer(int(scalar), 32))))
    return out


def multiply_int32_inplace_cpu(a: Storage, b: Storage) -> None:
    """
    Replace the buffer of ``a`` with the elementwise product ``a * b``.

    Any borrowed view of ``a`` obtained before the call keeps the old values.
    """
    x, y = _aligned_operands(a, b)
    a.set_buffer(np.multiply(x, y))
