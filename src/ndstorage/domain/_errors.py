"""
Storage-, dtype- and indexing-related exceptions for ndstorage.

This module defines the custom errors used to signal contract violations in
the storage layer. Every error is a fail-fast programmer error: the storage
engine never retries, swallows or logs them, it only raises them to the
immediate caller.

Each error derives from `StorageError` (so callers can catch the whole family)
and from the closest builtin exception (so generic `TypeError` / `IndexError`
/ `ValueError` handlers keep working).
"""

from __future__ import annotations

from typing import Any, Sequence


class StorageError(Exception):
    """Base class for all errors raised by the storage engine."""


class TypeMismatchError(StorageError, TypeError):
    """
    Raised when a typed accessor is invoked with a kind that does not equal
    the storage's current dtype.

    Typed accessors (`get_typed_view`, `read_typed`) hand out the live buffer
    and therefore never convert. Asking for any other kind is a contract
    violation rather than a request for a cast.

    Attributes
    ----------
    expected : Any
        The dtype currently held by the storage.
    actual : Any
        The kind requested by the caller (or the kind of a written value).
    """

    def __init__(self, expected: Any, actual: Any, op: str = "access") -> None:
        """
        Initialize the TypeMismatchError.

        Parameters
        ----------
        expected : Any
            The dtype held by the storage.
        actual : Any
            The kind requested or supplied by the caller.
        op : str, optional
            Name of the operation that was attempted. Defaults to "access".
        """
        super().__init__(
            f"{op}: requested kind {actual} does not match storage dtype {expected}."
        )
        self.expected = expected
        self.actual = actual
        self.op = op


class IndexArityError(StorageError, IndexError):
    """
    Raised when the number of supplied indices matches neither a full index
    nor one of the supported partial-indexing depths.

    Attributes
    ----------
    indices : tuple[int, ...]
        The indices supplied by the caller.
    rank : int
        Rank of the shape the indices were resolved against.
    """

    def __init__(self, indices: Sequence[int], rank: int) -> None:
        super().__init__(
            f"Got {len(indices)} indices {tuple(indices)} for an array of rank {rank}; "
            f"expected {rank}, {rank - 1} or {rank - 2}."
        )
        self.indices = tuple(indices)
        self.rank = rank


class UnsupportedConversionError(StorageError, TypeError):
    """
    Raised when no conversion rule exists for a (source, target) dtype pair.

    Attributes
    ----------
    source : Any
        The dtype of the buffer being converted.
    target : Any
        The requested target dtype.
    """

    def __init__(self, source: Any, target: Any) -> None:
        super().__init__(f"No conversion rule from {source} to {target}.")
        self.source = source
        self.target = target


class ShapeMismatchError(StorageError, ValueError):
    """
    Raised when an element count or a set of dimensions does not match the
    one implied by the storage's shape (reshape, buffer replacement,
    elementwise kernels).

    Attributes
    ----------
    expected : int or tuple[int, ...]
        Element count (or dimensions) required by the current shape.
    actual : int or tuple[int, ...]
        Element count (or dimensions) that was supplied.
    """

    def __init__(self, expected: Any, actual: Any, op: str = "reshape") -> None:
        super().__init__(f"{op}: got {actual}, expected {expected}.")
        self.expected = expected
        self.actual = actual
        self.op = op


class OperationNotImplementedError(StorageError, NotImplementedError):
    """
    Raised by operations that are explicitly stubbed out.

    Kept distinct from a silent no-op so callers can tell "not defined yet"
    apart from "done".
    """

    def __init__(self, op: str) -> None:
        super().__init__(f"{op} is not implemented.")
        self.op = op
