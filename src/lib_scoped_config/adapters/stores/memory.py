"""In-memory backing store.

Purpose
-------
Implement the :class:`lib_scoped_config.application.ports.ScopeStore` protocol
on top of a plain ``dict``. Used to attach programmatic scopes (tests, embedded
defaults) and as the base class of the file-backed store, which only adds
loading and persistence.
"""

from __future__ import annotations

from typing import Iterator, Mapping

from ...application.codec import normalize_key
from ...domain.errors import HandleReleased
from ...domain.scope import Scope


class MemoryStore:
    """Scope store whose entries live only in the current process.

    Initial entries are keyed by their canonical name, so ``Core.Bare`` and
    ``core.bare`` address the same entry.

    Examples
    --------
    >>> store = MemoryStore(Scope.GLOBAL, {"user.name": "Ada"})
    >>> store.get("user.name")
    'Ada'
    >>> store.delete("user.name"), store.delete("user.name")
    (True, False)
    """

    def __init__(
        self,
        scope: Scope,
        entries: Mapping[str, str | None] | None = None,
        *,
        path: str | None = None,
    ) -> None:
        self._scope = scope
        self._path = path
        self._entries: dict[str, str | None] | None = {
            normalize_key(name): raw for name, raw in (entries or {}).items()
        }

    @property
    def scope(self) -> Scope:
        return self._scope

    @property
    def path(self) -> str | None:
        return self._path

    @property
    def closed(self) -> bool:
        return self._entries is None

    def get(self, name: str) -> str | None:
        return self._data()[name]

    def items(self) -> Iterator[tuple[str, str | None]]:
        return iter(list(self._data().items()))

    def set(self, name: str, raw: str) -> None:
        self._data()[name] = raw

    def delete(self, name: str) -> bool:
        data = self._data()
        if name not in data:
            return False
        del data[name]
        return True

    def close(self) -> None:
        self._entries = None

    def __len__(self) -> int:
        return len(self._data())

    def __repr__(self) -> str:
        state = "closed" if self.closed else f"{len(self)} entries"
        return f"{type(self).__name__}({self._scope.value}, {self._path!r}, {state})"

    def _data(self) -> dict[str, str | None]:
        if self._entries is None:
            raise HandleReleased(f"{self._scope.value} store has been closed")
        return self._entries
