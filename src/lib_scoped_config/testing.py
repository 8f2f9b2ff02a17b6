"""Test double for code that consumes a configuration handle.

Purpose
    Let applications exercise code written against
    :class:`lib_scoped_config.application.ports.ConfigurationReader` without
    touching the filesystem or taking snapshots.

Contents
    - ``StubConfiguration``: dictionary-backed implementation of the reader
      port with the same precedence, codec, and error behaviour as the real
      handle for ``get``/``set``/``unset``.

System Integration
    Used by the signature tests and available to downstream test suites.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Mapping

from .application.codec import ValueKind, decode, encode, kind_for, kind_for_value, normalize_key
from .application.ports import AccountProvider
from .application.signature import build_signature
from .domain.entry import Entry, Signature
from .domain.errors import KeyNotFound, ScopeNotFound
from .domain.scope import Scope


class StubConfiguration:
    """In-memory stand-in for :class:`~lib_scoped_config.application.aggregate.Configuration`.

    Examples
    --------
    >>> stub = StubConfiguration({Scope.GLOBAL: {"user.name": "Ada"}})
    >>> stub.get("user.name").value
    'Ada'
    >>> stub.has_config(Scope.LOCAL)
    False
    """

    def __init__(
        self,
        scopes: Mapping[Scope, Mapping[str, str | None]] | None = None,
        *,
        accounts: AccountProvider | None = None,
    ) -> None:
        self.scopes: dict[Scope, dict[str, str | None]] = {
            scope: {normalize_key(key): raw for key, raw in entries.items()}
            for scope, entries in (scopes or {}).items()
        }
        self.accounts = accounts

    def has_config(self, scope: Scope) -> bool:
        return scope in self.scopes

    def get(self, key: str, type_: type | ValueKind = str, scope: Scope | None = None) -> Entry[Any] | None:
        kind = kind_for(type_)
        name = normalize_key(key)
        candidates = [scope] if scope is not None else list(Scope.ordered())
        for candidate in candidates:
            entries = self.scopes.get(candidate, {})
            if name in entries:
                return Entry(name, decode(kind, entries[name], name), candidate)
        return None

    def set(self, key: str, value: Any, scope: Scope = Scope.LOCAL, *, kind: ValueKind | None = None) -> None:
        if value is None:
            raise ValueError("Configuration value must not be None")
        name = normalize_key(key)
        raw = encode(kind if kind is not None else kind_for_value(value), value, name)
        self._scope(scope)[name] = raw

    def unset(self, key: str, scope: Scope = Scope.LOCAL) -> None:
        name = normalize_key(key)
        entries = self._scope(scope)
        if name not in entries:
            raise KeyNotFound(f"Configuration key {name!r} not found in {scope.value} configuration")
        del entries[name]

    def build_signature(self, now: datetime | None = None, *, strict: bool = False) -> Signature:
        when = now if now is not None else datetime.now(timezone.utc)
        return build_signature(self, when, strict=strict, accounts=self.accounts)

    def _scope(self, scope: Scope) -> dict[str, str | None]:
        if scope not in self.scopes:
            raise ScopeNotFound(f"No {scope.value} configuration file has been found.")
        return self.scopes[scope]
