"""
Concrete storage implementation (NumPy backend).

This module provides `Storage`, the concrete implementation of the
domain-level `IStorage` protocol. A storage owns:

- one flat, homogeneous numpy buffer (`_values`),
- one dtype tag (`_dtype`) matching the runtime kind held in the buffer, and
- one shape (`_shape`) whose element count equals the buffer length.

Ownership
---------
- `get_typed_view` and `get_converted` (when the dtype already matches)
  return the live buffer. The borrow is valid only until the next mutating
  call on the same storage.
- `clone` and `clone_converted` always return independent copies.
- `set_buffer` takes ownership of the buffer it is given when no conversion
  is needed.

Design notes
------------
- Indexing, partial indexing, typed reads, writes and reshape live in
  `StorageIndexingMixin`.
- All conversions go through the dtype dispatch table; pairs without a rule
  raise `UnsupportedConversionError`.
"""

from __future__ import annotations

from typing import Any, Optional, Tuple

import numpy as np
from typing_extensions import Self

from ...domain._dtype import DEFAULT_DTYPE, DType
from ...domain._errors import (
    OperationNotImplementedError,
    ShapeMismatchError,
    TypeMismatchError,
)
from ...domain._shape import DEFAULT_LAYOUT, IShape
from ..dtype import as_buffer, convert_buffer
from ..shape._shape import Shape
from ._indexing import StorageIndexingMixin


def _allocate_buffer(dtype: DType, count: int) -> np.ndarray:
    """Allocate ``count`` default-initialized elements of ``dtype``."""
    if dtype.numpy_dtype == object:
        out = np.empty(count, dtype=object)
        out.fill(dtype.default)
        return out
    return np.zeros(count, dtype=dtype.numpy_dtype)


def _innermost(arr: np.ndarray) -> np.ndarray:
    """
    Descend through ``object`` arrays of nested arrays until the true element
    kind is reached.
    """
    while (
        arr.dtype == object
        and arr.size
        and isinstance(arr.flat[0], (np.ndarray, list, tuple))
    ):
        nested = np.array(arr.tolist())
        if nested.shape == arr.shape:
            break
        arr = nested
    return arr


class Storage(StorageIndexingMixin):
    """
    Runtime-typed, shape-aware element storage.

    Parameters
    ----------
    dtype : Any, optional
        Initial element kind (anything `DType.of` accepts). Defaults to
        `DEFAULT_DTYPE`. The storage starts as a rank-1, one-element buffer.

    Notes
    -----
    - ``len(buffer) == shape.element_count()`` holds after every call.
    - Not thread-safe: callers serialize access to a storage themselves.
    """

    def __init__(self, dtype: Any = DEFAULT_DTYPE) -> None:
        self._dtype: DType = DType.of(dtype)
        self._shape: IShape = Shape(1)
        self._values: np.ndarray = _allocate_buffer(self._dtype, 1)

    # ------------------------------------------------------------------
    # Constructors
    # ------------------------------------------------------------------
    @classmethod
    def wrap(cls, values: Any) -> Self:
        """
        Take ownership of an already typed, homogeneous 1-D sequence.

        The dtype is inferred from the element kind and the shape is rank 1.
        Numpy buffers whose dtype is already the storage representation are
        adopted without a copy.

        Raises
        ------
        ValueError
            If ``values`` is not one-dimensional or is empty.
        """
        arr = values if isinstance(values, np.ndarray) else np.asarray(values)
        if arr.ndim != 1:
            raise ValueError(f"wrap() expects a 1-D sequence, got shape {arr.shape}")

        dtype = DType.infer(arr)
        out = cls(dtype)
        out._shape = Shape(len(arr))
        out._values = out._adopt(arr, dtype)
        return out

    @classmethod
    def from_array(cls, values: Any) -> Self:
        """Build a storage via `allocate_from`."""
        out = cls()
        out.allocate_from(values)
        return out

    # ------------------------------------------------------------------
    # Metadata
    # ------------------------------------------------------------------
    @property
    def dtype(self) -> DType:
        return self._dtype

    @property
    def shape(self) -> IShape:
        return self._shape

    @property
    def dtype_size(self) -> int:
        """Bytes per element of the current dtype (0 for OPAQUE)."""
        return self._dtype.itemsize

    def dimensions(self) -> Tuple[int, ...]:
        return self._shape.dimensions()

    def rank(self) -> int:
        return self._shape.rank()

    def element_count(self) -> int:
        return self._shape.element_count()

    # ------------------------------------------------------------------
    # Allocation / lifecycle
    # ------------------------------------------------------------------
    def allocate(self, shape: Any, dtype: Optional[Any] = None) -> None:
        """
        Allocate a default-initialized buffer for ``shape``.

        Parameters
        ----------
        shape : IShape or Sequence[int]
            Target shape. Its `normalize_layout()` step runs before the
            buffer is sized.
        dtype : Any, optional
            New element kind. When omitted the current dtype is kept.
        """
        if not isinstance(shape, IShape):
            shape = Shape(shape)
        shape.normalize_layout()

        if dtype is not None:
            self._dtype = DType.of(dtype)
        self._shape = shape
        self._values = _allocate_buffer(self._dtype, shape.element_count())

    def allocate_from(self, values: Any) -> None:
        """
        Adopt a (possibly nested) array, inferring shape and dtype from it.

        The shape comes from the array's rank and extents, the dtype from the
        innermost element kind. The buffer is a flat view of ``values``
        whenever numpy can provide one; a copy only happens when the data
        is not contiguous or its representation must change (e.g., boxing
        into an OPAQUE buffer).
        """
        arr = values if isinstance(values, np.ndarray) else np.asarray(values)
        arr = _innermost(arr)
        if arr.ndim == 0:
            arr = arr.reshape(1)

        dtype = DType.infer(arr)
        shape = Shape(arr.shape, layout=DEFAULT_LAYOUT)

        self._dtype = dtype
        self._shape = shape
        self._values = self._adopt(
            as_buffer(arr, order=shape.layout.value), dtype
        )

    def clone(self) -> Self:
        """
        Return a storage with an independent copy of the buffer and shape.

        Elements of OPAQUE buffers are references and are shared, not
        deep-copied.
        """
        out = self.__class__(self._dtype)
        out._shape = self._shape.copy()
        out._values = self._values.copy()
        return out

    # ------------------------------------------------------------------
    # Buffer access / conversion
    # ------------------------------------------------------------------
    def get_typed_view(self, kind: Any) -> np.ndarray:
        """
        Return the live buffer if ``kind`` equals the current dtype.

        Never converts. The returned array is a borrow, valid until the next
        mutating call on this storage.

        Raises
        ------
        TypeMismatchError
            If ``kind`` does not resolve to the current dtype.
        """
        requested = DType.of(kind)
        if requested is not self._dtype:
            raise TypeMismatchError(self._dtype, requested, op="get_typed_view")
        return self._values

    def get_converted(self, dtype: Any) -> np.ndarray:
        """
        Return the buffer in ``dtype``, converting when the dtype differs.

        The storage itself is not modified. When no conversion is needed the
        live buffer is returned (borrow).
        """
        target = DType.of(dtype)
        if target is self._dtype:
            return self._values
        return convert_buffer(self._values, target, source=self._dtype)

    def clone_converted(self, dtype: Any) -> np.ndarray:
        """
        Return an independent buffer in ``dtype``; never aliases the storage.
        """
        target = DType.of(dtype)
        if target is self._dtype:
            return self._values.copy()
        return convert_buffer(self._values, target, source=self._dtype)

    def set_buffer(self, buffer: Any, dtype: Optional[Any] = None) -> None:
        """
        Replace the internal buffer.

        Parameters
        ----------
        buffer : Any
            Flat buffer or sequence with ``element_count()`` elements.
            Multi-dimensional input is flattened in the shape's layout order.
        dtype : Any, optional
            Kind the storage holds afterwards. Defaults to the current dtype.
            The buffer is converted first when its own kind differs.

        Raises
        ------
        ShapeMismatchError
            If the buffer length differs from the shape's element count.
        UnsupportedConversionError
            If the buffer's kind cannot be converted to the target kind.
        """
        arr = as_buffer(buffer, order=self._shape.layout.value)
        expected = self._shape.element_count()
        if arr.size != expected:
            raise ShapeMismatchError(expected, arr.size, op="set_buffer")

        target = self._dtype if dtype is None else DType.of(dtype)
        source = DType.infer(arr)
        if source is not target:
            arr = convert_buffer(arr, target, source=source)
        else:
            arr = self._adopt(arr, target)

        self._values = arr
        self._dtype = target

    def write_at_offset(self, value: Any, offset: int) -> None:
        """Typed write at a raw buffer offset. Not implemented."""
        raise OperationNotImplementedError("write_at_offset")

    def to_numpy(self) -> np.ndarray:
        """
        Return an independent copy of the data shaped like the storage.
        """
        return self._values.reshape(
            self._shape.dimensions(), order=self._shape.layout.value
        ).copy()

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    @staticmethod
    def _adopt(arr: np.ndarray, dtype: DType) -> np.ndarray:
        """
        Bring a buffer whose kind already matches ``dtype`` to the storage
        representation, copying only when the numpy dtype differs.
        """
        if arr.dtype == dtype.numpy_dtype:
            return arr
        if dtype.numpy_dtype == object:
            return convert_buffer(arr, dtype, source=DType.OPAQUE)
        return arr.astype(dtype.numpy_dtype)

    def __repr__(self) -> str:
        return f"Storage(dtype={self._dtype}, shape={self._shape!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Storage):
            return NotImplemented
        return (
            self._dtype is other._dtype
            and self._shape == other._shape
            and np.array_equal(self._values, other._values)
        )

    __hash__ = None
