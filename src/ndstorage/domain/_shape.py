"""
Shape interface definitions.

This module defines the domain-level contract the storage engine consumes
from a shape calculator: element count, rank, dimension sizes, index-to-offset
mapping and the layout normalization step run during allocation.

The storage layer only depends on this structural interface, so any object
providing these members can back a storage, regardless of its concrete class.
"""

from __future__ import annotations

from enum import Enum
from typing import Iterable, Protocol, Sequence, Tuple, runtime_checkable


class Layout(Enum):
    """
    Element ordering of a shape inside its flat buffer.

    The values are the numpy ``order`` codes for the same ordering.
    """

    ROW_MAJOR = "C"
    COLUMN_MAJOR = "F"


DEFAULT_LAYOUT = Layout.ROW_MAJOR
"""Layout used when a shape is created without an explicit layout."""


@runtime_checkable
class IShape(Protocol):
    """
    Shape interface.

    An `IShape` describes dimension extents and maps index vectors to flat
    offsets within a one-dimensional buffer.

    Notes
    -----
    - `element_count()` is fixed once the shape is built and must equal the
      buffer length of any storage using it.
    - `normalize_layout()` must be idempotent.
    - `with_dimensions()` returns a new shape with the same layout flag.
    """

    @property
    def layout(self) -> Layout: ...

    def element_count(self) -> int: ...

    def rank(self) -> int: ...

    def dimensions(self) -> Tuple[int, ...]: ...

    def flat_offset(self, indices: Sequence[int]) -> int: ...

    def normalize_layout(self) -> None: ...

    def indices(self) -> Iterable[Tuple[int, ...]]: ...

    def copy(self) -> "IShape": ...

    def with_dimensions(self, *dimensions: int) -> "IShape": ...
