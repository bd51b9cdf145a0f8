"""
Domain-level structural typing for flat element buffers.

This module defines :class:`NDArrayLike`, a backend-agnostic Protocol for the
flat, homogeneous buffers a storage owns and hands to kernels, without
introducing a dependency on NumPy in the domain layer.

``numpy.ndarray`` is the implementer used by the infrastructure layer; any
object following the same semantics (length, element access, ``astype``,
``copy``) satisfies the protocol.
"""

from __future__ import annotations

from typing import Any, Iterator, Tuple, overload, runtime_checkable, Protocol


@runtime_checkable
class NDArrayLike(Protocol):
    """
    NDArrayLike (flat buffer view of an N-dimensional array)

    Notes
    -----
    - Buffers handed out by a storage are one-dimensional; the logical shape
      lives on the storage, not on the buffer.
    - Whether a returned object aliases the storage (borrow) or is an
      independent copy is decided by the accessor that produced it.
    """

    @property
    def shape(self) -> Tuple[int, ...]:
        """
        Shape of the buffer; ``(n,)`` for flat storage buffers.
        """
        ...

    @property
    def ndim(self) -> int: ...

    @property
    def size(self) -> int:
        """
        Total number of elements in the buffer.
        """
        ...

    @property
    def dtype(self) -> Any:
        """
        Backend-defined element type descriptor (e.g., ``numpy.dtype``).
        """
        ...

    def astype(self, dtype: Any, copy: bool = ...) -> NDArrayLike:
        """
        Cast the buffer to a specified element type.

        Parameters
        ----------
        dtype : Any
            Target element type.
        copy : bool, optional
            Whether to force a copy even if the type is unchanged.
        """
        ...

    def copy(self) -> NDArrayLike:
        """
        Return a copy of the buffer. Element references in ``object`` buffers
        are shared, not deep-copied.
        """
        ...

    def tolist(self) -> list[Any]: ...

    def __len__(self) -> int: ...

    @overload
    def __getitem__(self, key: int) -> Any: ...

    @overload
    def __getitem__(self, key: slice) -> NDArrayLike: ...

    def __setitem__(self, key: Any, value: Any) -> None: ...

    def __iter__(self) -> Iterator[Any]: ...
