"""Application-layer ports describing adapter responsibilities.

Purpose
-------
Define the structural contracts that adapters must satisfy so the aggregate
handle can orchestrate behaviour without depending on concrete store engines,
filesystem conventions, or the host environment.

Contents
--------
* :class:`ReadableStore` – read half of a backing store; satisfied by snapshots.
* :class:`ScopeStore` – a writable backing store bound to one scope.
* :class:`LocationResolver` – probes the default global/xdg/system files.
* :class:`AccountProvider` – supplies the local account and domain names.
* :class:`ConfigurationReader` – the precedence lookup the signature resolver
  consumes; implemented by the real handle and the test double.

System Role
-----------
These protocols enforce Dependency Inversion. Each adapter implements one
protocol so the application layer requests behaviour via abstraction.
"""

from __future__ import annotations

from typing import Any, Iterator, Protocol, runtime_checkable

from ..domain.entry import Entry
from ..domain.scope import Scope
from .codec import ValueKind


@runtime_checkable
class ReadableStore(Protocol):
    """Read access to the entries of one scope.

    Names passed to and returned by the store are already normalised by
    :func:`lib_scoped_config.application.codec.normalize_key`.
    """

    @property
    def scope(self) -> Scope:
        """Scope the store is bound to."""

    @property
    def path(self) -> str | None:
        """Backing file location, ``None`` for in-memory stores."""

    def get(self, name: str) -> str | None:
        """Return the raw value for *name*; raise ``KeyError`` when absent."""

    def items(self) -> Iterator[tuple[str, str | None]]:
        """Yield ``(name, raw_value)`` pairs in store order."""


@runtime_checkable
class ScopeStore(ReadableStore, Protocol):
    """A live backing store owned by one aggregate handle."""

    def set(self, name: str, raw: str) -> None:
        """Store *raw* under *name*, replacing any previous value."""

    def delete(self, name: str) -> bool:
        """Remove *name*; return ``False`` when it did not exist."""

    def close(self) -> None:
        """Release the store; later calls raise ``HandleReleased``."""


@runtime_checkable
class LocationResolver(Protocol):
    """Discover default backing files for the optional scopes."""

    def global_(self) -> str | None:
        """Return the per-user configuration file, if present."""

    def xdg(self) -> str | None:
        """Return the XDG per-user configuration file, if present."""

    def system(self) -> str | None:
        """Return the machine-wide configuration file, if present."""


@runtime_checkable
class AccountProvider(Protocol):
    """Describe the account running the process."""

    def account_name(self) -> str:
        """Return the login name of the current user."""

    def domain_name(self) -> str:
        """Return the host or domain the account belongs to."""


@runtime_checkable
class ConfigurationReader(Protocol):
    """Precedence-ordered typed lookup across scopes."""

    def get(self, key: str, type_: type | ValueKind = str, scope: Scope | None = None) -> Entry[Any] | None:
        """Return the first matching entry decoded as *type_*, or ``None``."""
