"""Immutable point-in-time copies of an aggregate's content.

Purpose
-------
Give every read and search one consistent state to work against while the live
stores stay writable. A :class:`Snapshot` copies each attached store into a
:class:`FrozenStore` (a ``mappingproxy`` over a private ``dict``) at creation
time; later writes to the live stores never show through.

Contents
--------
* :class:`FrozenStore` – read-only copy of one scope; satisfies
  :class:`lib_scoped_config.application.ports.ReadableStore`.
* :class:`Snapshot` – precedence-ordered collection of frozen stores with its
  own release lifecycle.
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Iterable, Iterator, Mapping

from ..domain.errors import HandleReleased
from ..domain.scope import Scope
from .ports import ReadableStore


@dataclass(frozen=True, slots=True)
class FrozenStore:
    """Read-only copy of the entries one store held at snapshot time."""

    scope: Scope
    path: str | None
    entries: Mapping[str, str | None]

    @classmethod
    def capture(cls, store: ReadableStore) -> FrozenStore:
        """Copy *store* into a new frozen store."""

        return cls(store.scope, store.path, MappingProxyType(dict(store.items())))

    def get(self, name: str) -> str | None:
        return self.entries[name]

    def items(self) -> Iterator[tuple[str, str | None]]:
        return iter(self.entries.items())


class Snapshot:
    """Consistent view over every scope attached when the snapshot was taken.

    Snapshots are context managers; leaving the ``with`` block releases them
    and any further use raises :class:`HandleReleased`.

    Examples
    --------
    >>> from lib_scoped_config.adapters.stores.memory import MemoryStore
    >>> live = MemoryStore(Scope.LOCAL, {"core.bare": "true"})
    >>> with Snapshot([live]) as snapshot:
    ...     live.set("core.bare", "false")
    ...     snapshot.lookup("core.bare")[1]
    'true'
    """

    def __init__(self, stores: Iterable[ReadableStore]) -> None:
        frozen = sorted((FrozenStore.capture(store) for store in stores), key=lambda item: item.scope.rank)
        self._stores: tuple[FrozenStore, ...] | None = tuple(frozen)

    def __enter__(self) -> Snapshot:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.release()

    @property
    def released(self) -> bool:
        return self._stores is None

    @property
    def scopes(self) -> tuple[Scope, ...]:
        """Scopes captured by the snapshot, highest precedence first."""

        return tuple(store.scope for store in self._frozen())

    def open_level(self, scope: Scope) -> FrozenStore | None:
        """Return the frozen store captured for *scope*, if any."""

        for store in self._frozen():
            if store.scope is scope:
                return store
        return None

    def lookup(self, name: str) -> tuple[FrozenStore, str | None] | None:
        """Return the highest-precedence ``(store, raw_value)`` holding *name*."""

        for store in self._frozen():
            if name in store.entries:
                return store, store.entries[name]
        return None

    def items(self) -> Iterator[tuple[Scope, str, str | None]]:
        """Yield ``(scope, name, raw_value)`` for every captured entry."""

        for store in self._frozen():
            for name, raw in store.items():
                yield store.scope, name, raw

    def release(self) -> None:
        """Drop the captured data; safe to call repeatedly."""

        self._stores = None

    def _frozen(self) -> tuple[FrozenStore, ...]:
        if self._stores is None:
            raise HandleReleased("Snapshot has been released")
        return self._stores
