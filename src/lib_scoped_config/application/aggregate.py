"""Aggregate configuration handle.

Purpose
-------
Own one backing store per scope and mediate every access to them. Reads and
searches go through a fresh :class:`Snapshot` so each call observes one
consistent state; writes and deletions go to the live store of the targeted
scope so they are visible to every snapshot taken afterwards.

Contents
--------
* :class:`Configuration` – the aggregate handle and public API.
* :class:`ScopedView` – a handle narrowed to one scope for one operation.
* :func:`open_scoped_view` – narrow an aggregate or a snapshot to one scope.

System Role
-----------
Built by :func:`lib_scoped_config.core.open_configuration`, which wires the
default-location probes and file stores. The value codec and signature
resolver are application-layer collaborators; the store engines are adapters
reached only through the :mod:`.ports` protocols.
"""

from __future__ import annotations

import re
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Iterable, Iterator

from ..domain.entry import Entry, Signature
from ..domain.errors import HandleReleased, KeyNotFound, ScopeNotFound
from ..domain.scope import Scope
from ..observability import log_debug, make_event
from .codec import ValueKind, decode, encode, kind_for, kind_for_value, normalize_key
from .ports import AccountProvider, ReadableStore, ScopeStore
from .signature import build_signature
from .snapshot import Snapshot


class ScopedView:
    """Handle restricted to the store of a single scope.

    The view borrows the store: releasing the view never closes it, because
    the store belongs to the aggregate (or snapshot) it was derived from.
    """

    def __init__(self, store: ReadableStore) -> None:
        self._store: ReadableStore | None = store

    def __enter__(self) -> ScopedView:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.release()

    @property
    def scope(self) -> Scope:
        return self._borrowed().scope

    @property
    def path(self) -> str | None:
        return self._borrowed().path

    def get_entry(self, name: str, kind: ValueKind) -> Entry[Any] | None:
        """Return the decoded entry for the normalised *name*, or ``None``."""

        store = self._borrowed()
        try:
            raw = store.get(name)
        except KeyError:
            return None
        return Entry(name, decode(kind, raw, name), store.scope)

    def entries(self, pattern: re.Pattern[str] | None = None) -> list[Entry[str]]:
        """Return string entries whose names match *pattern* (all when ``None``)."""

        store = self._borrowed()
        return [
            Entry(name, decode(ValueKind.STRING, raw, name), store.scope)
            for name, raw in store.items()
            if pattern is None or pattern.search(name)
        ]

    def set(self, name: str, raw: str) -> None:
        self._writable().set(name, raw)

    def delete(self, name: str) -> bool:
        return self._writable().delete(name)

    def release(self) -> None:
        self._store = None

    def _borrowed(self) -> ReadableStore:
        if self._store is None:
            raise HandleReleased("Scoped view has been released")
        return self._store

    def _writable(self) -> ScopeStore:
        store = self._borrowed()
        if not isinstance(store, ScopeStore):
            raise TypeError(f"The {store.scope.value} view of a snapshot is read-only")
        return store


def open_scoped_view(source: Configuration | Snapshot, scope: Scope, required: bool) -> ScopedView | None:
    """Narrow *source* to the store attached for *scope*.

    Returns ``None`` when the scope is not attached and *required* is false;
    raises :class:`ScopeNotFound` when it is required.
    """

    store = source.open_level(scope)
    if store is None:
        if required:
            raise ScopeNotFound(f"No {scope.value} configuration file has been found.")
        return None
    return ScopedView(store)


class Configuration:
    """Layered configuration over the local, global, xdg, and system scopes.

    Examples
    --------
    >>> from lib_scoped_config.adapters.stores.memory import MemoryStore
    >>> config = Configuration([
    ...     MemoryStore(Scope.GLOBAL, {"core.bare": "false"}),
    ...     MemoryStore(Scope.LOCAL, {"core.bare": "true"}),
    ... ])
    >>> config.get("core.bare", bool).value
    True
    >>> config.set("user.name", "Ada", Scope.GLOBAL)
    >>> config.get("user.name", scope=Scope.LOCAL) is None
    True
    >>> config.release()
    """

    def __init__(
        self,
        stores: Iterable[ScopeStore] = (),
        *,
        accounts: AccountProvider | None = None,
    ) -> None:
        self._stores: dict[Scope, ScopeStore] = {}
        self._accounts = accounts
        self._released = False
        for store in stores:
            self.attach_store(store)

    def __enter__(self) -> Configuration:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.release()

    def __iter__(self) -> Iterator[Entry[str]]:
        return self.entries()

    def __repr__(self) -> str:
        if self._released:
            return f"{type(self).__name__}(released)"
        scopes = ", ".join(scope.value for scope in self.scopes)
        return f"{type(self).__name__}([{scopes}])"

    # lifecycle -----------------------------------------------------------

    def attach(
        self,
        scope: Scope,
        location: str | Path | None = None,
        *,
        default: str | Path | None = None,
    ) -> ScopeStore | None:
        """Open the backing file for *scope* and attach it.

        *location* wins over *default* (the result of a default-location
        probe). When neither is given the scope stays unattached and ``None`` is
        returned. Failures opening the chosen file propagate.
        """

        from ..adapters.stores.file import FileStore

        self._ensure_live()
        chosen = location if location is not None else default
        if chosen is None:
            log_debug("scope_skipped", **make_event(scope.value, None))
            return None
        return self.attach_store(FileStore(scope, chosen))

    def attach_store(self, store: ScopeStore) -> ScopeStore:
        """Attach an already-open *store*; one store per scope."""

        self._ensure_live()
        if store.scope in self._stores:
            raise ValueError(f"A {store.scope.value} configuration store is already attached")
        self._stores[store.scope] = store
        log_debug("scope_attached", **make_event(store.scope.value, store.path))
        return store

    @property
    def released(self) -> bool:
        return self._released

    @property
    def scopes(self) -> tuple[Scope, ...]:
        """Attached scopes, highest precedence first."""

        self._ensure_live()
        return tuple(sorted(self._stores, key=lambda scope: scope.rank))

    def locations(self) -> dict[Scope, str | None]:
        """Map each attached scope to its backing file (``None`` for in-memory)."""

        return {scope: self._stores[scope].path for scope in self.scopes}

    def release(self) -> None:
        """Close every attached store; later calls are no-ops."""

        if self._released:
            return
        stores = list(self._stores.values())
        self._stores.clear()
        self._released = True
        for store in stores:
            store.close()
        log_debug("configuration_released", scope="all", path=None, stores=len(stores))

    close = release

    # narrowing -----------------------------------------------------------

    def snapshot(self) -> Snapshot:
        """Return an immutable copy of the current content of every scope."""

        self._ensure_live()
        return Snapshot(self._stores.values())

    def open_level(self, scope: Scope) -> ScopeStore | None:
        """Return the live store attached for *scope*, if any."""

        self._ensure_live()
        return self._stores.get(scope)

    def has_config(self, scope: Scope) -> bool:
        """Tell whether a backing store is attached for *scope*."""

        with self.snapshot() as snapshot:
            return open_scoped_view(snapshot, scope, required=False) is not None

    # typed access --------------------------------------------------------

    def get(self, key: str, type_: type | ValueKind = str, scope: Scope | None = None) -> Entry[Any] | None:
        """Return the entry for *key* decoded as *type_*, or ``None`` if unset.

        Without *scope* the scopes are searched in precedence order and the
        first match wins. With *scope* only that scope is consulted; an
        unattached scope simply yields ``None``.
        """

        kind = kind_for(type_)
        name = normalize_key(key)
        with self.snapshot() as snapshot:
            if scope is None:
                found = snapshot.lookup(name)
                if found is None:
                    return None
                store, raw = found
                return Entry(name, decode(kind, raw, name), store.scope)
            view = open_scoped_view(snapshot, scope, required=False)
            if view is None:
                return None
            with view:
                return view.get_entry(name, kind)

    def get_value(
        self,
        key: str,
        type_: type | ValueKind = str,
        default: Any = None,
        scope: Scope | None = None,
    ) -> Any:
        """Return the decoded value of *key* or *default* when unset."""

        entry = self.get(key, type_, scope)
        return default if entry is None else entry.value

    def set(self, key: str, value: Any, scope: Scope = Scope.LOCAL, *, kind: ValueKind | None = None) -> None:
        """Write *value* under *key* into the live store of *scope*.

        The kind is inferred from the value unless *kind* is given (use
        :attr:`ValueKind.INT32` to enforce 32-bit range).
        """

        if value is None:
            raise ValueError("Configuration value must not be None")
        resolved = kind if kind is not None else kind_for_value(value)
        name = normalize_key(key)
        raw = encode(resolved, value, name)
        view = open_scoped_view(self, scope, required=True)
        with view:
            view.set(name, raw)

    def unset(self, key: str, scope: Scope = Scope.LOCAL) -> None:
        """Delete *key* from the live store of *scope*."""

        name = normalize_key(key)
        view = open_scoped_view(self, scope, required=True)
        with view:
            if not view.delete(name):
                raise KeyNotFound(f"Configuration key {name!r} not found in {scope.value} configuration")

    # enumeration ---------------------------------------------------------

    def find(self, pattern: str, scope: Scope = Scope.LOCAL) -> list[Entry[str]]:
        """Return the entries of *scope* whose names match the regex *pattern*."""

        if not pattern:
            raise ValueError("Search pattern must not be empty")
        try:
            compiled = re.compile(pattern)
        except re.error as exc:
            raise ValueError(f"Invalid search pattern {pattern!r}: {exc}") from exc
        with self.snapshot() as snapshot:
            view = open_scoped_view(snapshot, scope, required=True)
            with view:
                return view.entries(compiled)

    def entries(self) -> Iterator[Entry[str]]:
        """Return a one-shot iterator over every entry of every scope.

        The content is captured when this method is called; entries are built
        as the iterator is consumed.
        """

        with self.snapshot() as snapshot:
            rows = tuple(snapshot.items())
        return (Entry(name, decode(ValueKind.STRING, raw, name), scope) for scope, name, raw in rows)

    # identity ------------------------------------------------------------

    def build_signature(self, now: datetime | None = None, *, strict: bool = False) -> Signature:
        """Build a :class:`Signature` from ``user.name`` and ``user.email``.

        Missing settings fall back to ``"unknown"`` and ``<account>@<domain>``
        with a warning, unless *strict* is set, in which case
        :class:`MissingConfiguration` is raised.
        """

        self._ensure_live()
        when = now if now is not None else datetime.now(timezone.utc)
        return build_signature(self, when, strict=strict, accounts=self._accounts)

    def _ensure_live(self) -> None:
        if self._released:
            raise HandleReleased("Configuration handle has been released")
