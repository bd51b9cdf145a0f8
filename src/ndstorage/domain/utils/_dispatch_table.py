"""
Pair-keyed function dispatch via decorators.

This module provides a small mechanism for routing a call to one of several
registered implementations based on an ordered pair of hashable keys
(e.g., a (source dtype, target dtype) pair).

Core idea
---------
- A builder creates an isolated table. Different builders do not share
  mappings.
- Implementations register themselves for one or more (source, target) pairs
  through the decorator returned by the builder.
- Lookup is a plain dictionary access; a missing pair is reported through a
  caller-supplied exception factory instead of silently falling back.

Usage
-----
    table = create_dispatch_table("conversion", on_missing=MyError)

    @table.register(sources=(A, B), targets=(C,))
    def convert_to_c(buffer): ...

    table.lookup(A, C)(buffer)
"""

from __future__ import annotations

from collections import namedtuple
from typing import Any, Callable, Dict, Hashable, Iterable, Iterator, Optional
from typing_extensions import TypeVar

F = TypeVar("F", bound=Callable[..., Any])

DispatchKey = namedtuple("DispatchKey", ["Source", "Target"])
"""
Tuple-like key used to uniquely identify a registered implementation.

Fields
------
Source : Hashable
    The key the input currently has.
Target : Hashable
    The key the caller asks for.
"""


class DispatchTable:
    """
    Closed mapping from (source, target) pairs to implementations.

    Parameters
    ----------
    name : str
        Human-readable table name, used in error messages.
    on_missing : Optional[Callable[[Hashable, Hashable], Exception]]
        Factory building the exception raised by `lookup` for an unregistered
        pair. Defaults to a `KeyError`.
    """

    def __init__(
        self,
        name: str,
        on_missing: Optional[Callable[[Hashable, Hashable], Exception]] = None,
    ) -> None:
        self.name = name
        self._on_missing = on_missing
        self._entries: Dict[DispatchKey, Callable] = {}

    def register(
        self, sources: Iterable[Hashable], targets: Iterable[Hashable]
    ) -> Callable[[F], F]:
        """
        Build a decorator that registers an implementation for every pair in
        ``sources x targets``.

        Parameters
        ----------
        sources : Iterable[Hashable]
            Source keys handled by the implementation.
        targets : Iterable[Hashable]
            Target keys handled by the implementation.

        Returns
        -------
        Callable[[F], F]
            A decorator returning the implementation unchanged.

        Raises
        ------
        TypeError
            If any key is not hashable.
        ValueError
            If a pair is already registered in this table.
        """
        keys = [DispatchKey(s, t) for s in sources for t in targets]
        for key in keys:
            try:
                hash(key)
            except TypeError:
                raise TypeError(
                    f"Dispatch keys for {self.name!r} must be hashable. Got {key!r}"
                )

        def decorator(impl: F) -> F:
            for key in keys:
                if key in self._entries:
                    raise ValueError(
                        f"Duplicate {self.name} path {key.Source!r} -> {key.Target!r}"
                    )
                self._entries[key] = impl
            return impl

        return decorator

    def lookup(self, source: Hashable, target: Hashable) -> Callable:
        """
        Return the implementation registered for ``(source, target)``.

        Raises
        ------
        Exception
            Whatever `on_missing` builds, or `KeyError` when none was given.
        """
        impl = self._entries.get(DispatchKey(source, target))
        if impl is not None:
            return impl
        if self._on_missing is not None:
            raise self._on_missing(source, target)
        raise KeyError(f"Missing {self.name} path {source!r} -> {target!r}")

    def supports(self, source: Hashable, target: Hashable) -> bool:
        return DispatchKey(source, target) in self._entries

    def __iter__(self) -> Iterator[DispatchKey]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)


def create_dispatch_table(
    name: str,
    on_missing: Optional[Callable[[Hashable, Hashable], Exception]] = None,
) -> DispatchTable:
    """
    Create an empty, isolated `DispatchTable`.

    Parameters
    ----------
    name : str
        Table name used in error messages.
    on_missing : Optional[Callable[[Hashable, Hashable], Exception]]
        Exception factory for unregistered pairs.
    """
    return DispatchTable(name, on_missing)
