"""
Storage interface definitions.

This module defines `IStorage`, the complete surface a higher-level tensor
type (and any elementwise kernel) may call on a storage: allocation, full and
partial reads, typed access, writes, reshape, cloning and dtype conversion.

Ownership
---------
- `get_typed_view` and `get_converted` (when no conversion is needed) return
  a *borrow*: the live internal buffer, valid only until the next mutating
  call on the same storage.
- `clone` and `clone_converted` always return independently owned copies.
"""

from __future__ import annotations

from typing import Any, Optional, Protocol, Tuple, Union, runtime_checkable

from ._dtype import DType
from ._shape import IShape
from .types._numpy import NDArrayLike


@runtime_checkable
class IStorage(Protocol):
    """
    Storage interface.

    An `IStorage` owns one flat homogeneous buffer, one dtype tag and one
    shape, and keeps ``len(buffer) == shape.element_count()`` after every
    mutating call.
    """

    # ---------------------------------------------------------------------
    # Metadata
    # ---------------------------------------------------------------------
    @property
    def dtype(self) -> DType: ...

    @property
    def shape(self) -> IShape: ...

    @property
    def dtype_size(self) -> int: ...

    # ---------------------------------------------------------------------
    # Allocation / lifecycle
    # ---------------------------------------------------------------------
    def allocate(self, shape: IShape, dtype: Optional[DType] = None) -> None: ...

    def allocate_from(self, values: Any) -> None: ...

    def clone(self) -> "IStorage": ...

    def reshape(self, *dimensions: int) -> None: ...

    # ---------------------------------------------------------------------
    # Buffer access / conversion
    # ---------------------------------------------------------------------
    def get_typed_view(self, kind: Any) -> NDArrayLike: ...

    def get_converted(self, dtype: Any) -> NDArrayLike: ...

    def clone_converted(self, dtype: Any) -> NDArrayLike: ...

    def set_buffer(self, buffer: Any, dtype: Optional[Any] = None) -> None: ...

    # ---------------------------------------------------------------------
    # Element access
    # ---------------------------------------------------------------------
    def read(self, *indices: int) -> Union[Any, "IStorage"]: ...

    def read_typed(self, kind: Any, *indices: int) -> Any: ...

    def write(self, value: Any, *indices: int) -> None: ...

    def dimensions(self) -> Tuple[int, ...]: ...
