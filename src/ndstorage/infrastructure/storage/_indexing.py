"""
Storage indexing and sub-tensor materialization mixin.

This module defines `StorageIndexingMixin`, the part of the concrete
`Storage` that resolves index vectors against the storage's shape:

- full reads and writes of single elements,
- partial reads that materialize a new rank-1 or rank-2 storage over the
  trailing dimensions,
- typed reads, and
- shape-only reshape.

Design notes
------------
- The mixin is inherited by `Storage` and works on the host's `_values`,
  `_dtype` and `_shape` fields.
- New storages are constructed via `self.__class__` to avoid importing
  `Storage` here.
- Partial reads return copies, never views: mutating the result does not
  touch the source buffer.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any, Sequence, Tuple, Union

import numpy as np

from ...domain._dtype import DType
from ...domain._errors import IndexArityError, ShapeMismatchError, TypeMismatchError
from ...domain._storage import IStorage
from ..dtype import object_buffer
from ..shape._shape import Shape


def _unpack_indices(indices: Tuple[Any, ...]) -> Tuple[int, ...]:
    """Accept both ``read(1, 2)`` and ``read((1, 2))`` / ``read([1, 2])``."""
    if len(indices) == 1 and isinstance(indices[0], (tuple, list, np.ndarray)):
        return tuple(int(i) for i in indices[0])
    return tuple(int(i) for i in indices)


class StorageIndexingMixin(IStorage):
    """
    Index resolution for the concrete `Storage` implementation.

    Notes
    -----
    Methods assume the host class provides:
        - `_values` (flat numpy buffer), `_dtype` (DType), `_shape` (Shape)
        - a constructor accepting a dtype
    """

    def read(self, *indices: int) -> Union[Any, "IStorage"]:
        """
        Read one element, or materialize a sub-tensor for a partial index.

        Resolution order
        ----------------
        1. ``len(indices) == rank``: the element at the flat offset.
        2. Trailing extent is 1: omitted trailing indices are taken as 0 and
           the element is returned.
        3. ``len(indices) == rank - 1``: a new rank-1 storage over the last
           dimension.
        4. ``len(indices) == rank - 2``: a new rank-2 storage over the last
           two dimensions.

        Parameters
        ----------
        *indices : int
            Leading indices, either as separate arguments or as one sequence.

        Returns
        -------
        Any or IStorage
            The raw element (not converted) or a newly owned storage.

        Raises
        ------
        IndexArityError
            If the index count matches none of the cases above.
        IndexError
            If an index is out of range.
        """
        idx = _unpack_indices(indices)
        rank = self._shape.rank()
        dims = self._shape.dimensions()

        if len(idx) > rank:
            raise IndexArityError(idx, rank)
        if len(idx) == rank:
            return self._values[self._shape.flat_offset(idx)]
        if dims[-1] == 1:
            padded = idx + (0,) * (rank - len(idx))
            return self._values[self._shape.flat_offset(padded)]
        if len(idx) == rank - 1:
            return self._materialize(idx, dims[-1:])
        if len(idx) == rank - 2:
            return self._materialize(idx, dims[-2:])
        raise IndexArityError(idx, rank)

    def _materialize(
        self, prefix: Tuple[int, ...], trailing: Sequence[int]
    ) -> "IStorage":
        """
        Copy the elements addressed by ``prefix + (i, ...)`` into a new
        storage shaped like ``trailing``.
        """
        sub_shape = Shape(trailing, layout=self._shape.layout)
        count = sub_shape.element_count()

        if self._values.dtype == object:
            values = object_buffer(
                (
                    self._values[self._shape.flat_offset(prefix + sub_idx)]
                    for sub_idx in sub_shape.indices()
                ),
                count,
            )
        else:
            values = np.empty(count, dtype=self._values.dtype)
            for pos, sub_idx in enumerate(sub_shape.indices()):
                values[pos] = self._values[self._shape.flat_offset(prefix + sub_idx)]

        out = self.__class__(self._dtype)
        out._shape = sub_shape
        out._values = values
        return out

    def read_typed(self, kind: Any, *indices: int) -> Any:
        """
        Read one element through the typed view of the buffer.

        Parameters
        ----------
        kind : Any
            Requested element kind; must resolve to the current dtype.
        *indices : int
            Full index (one per dimension).

        Raises
        ------
        TypeMismatchError
            If ``kind`` does not resolve to the current dtype.
        IndexArityError
            If the index is not a full index.
        """
        view = self.get_typed_view(kind)
        return view[self._shape.flat_offset(_unpack_indices(indices))]

    def write(self, value: Any, *indices: int) -> None:
        """
        Write one element in place at a full index.

        No implicit conversion of ``value`` is performed: a value numpy could
        only store by changing its kind (e.g., a float into an INT32 buffer)
        is rejected.

        Raises
        ------
        TypeMismatchError
            If ``value`` cannot be stored without changing its kind, or is
            an integer outside the range of an integer dtype.
        IndexArityError
            If the index is not a full index.
        """
        offset = self._shape.flat_offset(_unpack_indices(indices))
        self._check_value_kind(value)
        self._values[offset] = value

    def _check_value_kind(self, value: Any) -> None:
        if self._dtype is DType.OPAQUE:
            return
        if self._dtype is DType.DECIMAL128:
            if not isinstance(value, Decimal):
                raise TypeMismatchError(self._dtype, DType.of(type(value)), op="write")
            return
        if isinstance(value, Decimal):
            raise TypeMismatchError(self._dtype, DType.DECIMAL128, op="write")

        arr = np.asarray(value)
        if arr.ndim != 0 or not np.can_cast(
            arr.dtype, self._dtype.numpy_dtype, casting="same_kind"
        ):
            raise TypeMismatchError(self._dtype, DType.of(arr.dtype), op="write")

        if self._dtype.is_integer:
            limits = np.iinfo(self._dtype.numpy_dtype)
            if not limits.min <= int(arr) <= limits.max:
                raise TypeMismatchError(self._dtype, DType.of(arr.dtype), op="write")

    def reshape(self, *dimensions: int) -> None:
        """
        Replace the shape with one of equal element count. No data moves.

        Parameters
        ----------
        *dimensions : int
            New extents, either as separate arguments or as one sequence. The
            layout flag is kept.

        Raises
        ------
        ShapeMismatchError
            If the new element count differs from the buffer length.
        """
        new_shape = self._shape.with_dimensions(*dimensions)
        if new_shape.element_count() != len(self._values):
            raise ShapeMismatchError(
                len(self._values), new_shape.element_count(), op="reshape"
            )
        self._shape = new_shape
