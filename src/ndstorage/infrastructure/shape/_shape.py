"""
Concrete shape calculator (row- and column-major).

This module provides `Shape`, the concrete implementation of the domain-level
`IShape` interface. A shape holds positive dimension extents and a layout
flag, derives strides from them, and maps index vectors to flat buffer
offsets.

Design notes
------------
- Strides are element strides, not byte strides.
- Negative indices are not supported; every index must lie in
  ``[0, extent)``.
- `normalize_layout()` recomputes strides for the current layout flag and is
  safe to call any number of times.
"""

from __future__ import annotations

from typing import Iterable, Sequence, Tuple, Union

from ...domain._errors import IndexArityError
from ...domain._shape import DEFAULT_LAYOUT, IShape, Layout


def strides_from_dimensions(
    dimensions: Sequence[int], layout: Layout = DEFAULT_LAYOUT
) -> Tuple[int, ...]:
    """
    Compute contiguous element strides for the given extents.

    Parameters
    ----------
    dimensions : Sequence[int]
        Dimension extents.
    layout : Layout, optional
        Row-major (last dimension contiguous) or column-major (first dimension
        contiguous). Defaults to row-major.

    Returns
    -------
    tuple[int, ...]
        One stride per dimension.
    """
    order = range(len(dimensions))
    if layout is Layout.ROW_MAJOR:
        order = reversed(order)

    strides = [0] * len(dimensions)
    step = 1
    for axis in order:
        strides[axis] = step
        step *= dimensions[axis]
    return tuple(strides)


class Shape(IShape):
    """
    Dimension extents plus layout, mapping index vectors to flat offsets.

    Parameters
    ----------
    *dimensions : int or Sequence[int]
        Positive dimension extents, either as separate arguments or as a
        single sequence.
    layout : Layout, optional
        Element ordering inside the flat buffer. Defaults to row-major.

    Raises
    ------
    ValueError
        If no dimension is given or any dimension is not a positive integer.
    """

    __slots__ = ("_dimensions", "_layout", "_strides", "_size")

    def __init__(
        self,
        *dimensions: Union[int, Sequence[int]],
        layout: Layout = DEFAULT_LAYOUT,
    ) -> None:
        if len(dimensions) == 1 and hasattr(dimensions[0], "__iter__"):
            dimensions = tuple(dimensions[0])

        if len(dimensions) == 0:
            raise ValueError("Shape requires at least one dimension")

        dims = []
        for d in dimensions:
            if isinstance(d, bool) or int(d) != d or int(d) <= 0:
                raise ValueError(
                    f"Shape dimensions must be positive integers, got {tuple(dimensions)}"
                )
            dims.append(int(d))

        self._dimensions: Tuple[int, ...] = tuple(dims)
        self._layout = Layout(layout)
        self._size = 1
        for d in self._dimensions:
            self._size *= d
        self._strides: Tuple[int, ...] = strides_from_dimensions(
            self._dimensions, self._layout
        )

    # ------------------------------------------------------------------
    # Interface consumed by storage
    # ------------------------------------------------------------------
    @property
    def layout(self) -> Layout:
        return self._layout

    @property
    def strides(self) -> Tuple[int, ...]:
        return self._strides

    def element_count(self) -> int:
        return self._size

    def rank(self) -> int:
        return len(self._dimensions)

    def dimensions(self) -> Tuple[int, ...]:
        return self._dimensions

    def normalize_layout(self) -> None:
        """
        Recompute strides so that they match the current layout flag.

        Idempotent: repeated calls leave the shape unchanged.
        """
        self._strides = strides_from_dimensions(self._dimensions, self._layout)

    def flat_offset(self, indices: Sequence[int]) -> int:
        """
        Map a full index vector to its position in the flat buffer.

        Parameters
        ----------
        indices : Sequence[int]
            Exactly one index per dimension.

        Returns
        -------
        int
            Flat buffer offset.

        Raises
        ------
        IndexArityError
            If ``len(indices) != rank``.
        IndexError
            If any index is negative or not smaller than its extent.
        """
        if len(indices) != len(self._dimensions):
            raise IndexArityError(indices, len(self._dimensions))

        pos = 0
        for axis, (ind, extent, stride) in enumerate(
            zip(indices, self._dimensions, self._strides)
        ):
            ind = int(ind)
            if ind < 0:
                raise IndexError(
                    f"Negative index {ind} on axis {axis} is not supported."
                )
            if ind >= extent:
                raise IndexError(
                    f"Index {tuple(indices)} out of range for shape {self._dimensions}."
                )
            pos += ind * stride
        return pos

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def indices(self) -> Iterable[Tuple[int, ...]]:
        """
        Enumerate every index vector in flat buffer order.

        Yields
        ------
        tuple[int, ...]
            The index stored at flat offsets ``0, 1, 2, ...``.
        """
        axes = list(range(len(self._dimensions)))
        if self._layout is Layout.ROW_MAJOR:
            axes.reverse()

        for flat in range(self._size):
            idx = [0] * len(self._dimensions)
            cur = flat
            for axis in axes:
                idx[axis] = cur % self._dimensions[axis]
                cur //= self._dimensions[axis]
            yield tuple(idx)

    def copy(self) -> "Shape":
        return Shape(self._dimensions, layout=self._layout)

    def with_dimensions(self, *dimensions: int) -> "Shape":
        """Return a new shape with the given extents and this shape's layout."""
        return Shape(*dimensions, layout=self._layout)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Shape):
            return NotImplemented
        return (
            self._dimensions == other._dimensions and self._layout is other._layout
        )

    def __hash__(self) -> int:
        return hash((self._dimensions, self._layout))

    def __repr__(self) -> str:
        return f"Shape{self._dimensions}" + (
            "" if self._layout is DEFAULT_LAYOUT else f"[{self._layout.name}]"
        )
