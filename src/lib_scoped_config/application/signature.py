"""Signature resolution from identity settings.

Purpose
-------
Turn ``user.name`` and ``user.email`` into a :class:`Signature`. The lookup
goes through :class:`lib_scoped_config.application.ports.ConfigurationReader`
so the same policy applies to the real aggregate and to test doubles.

Fallback policy
---------------
* missing or empty ``user.name`` – ``"unknown"``
* missing or empty ``user.email`` – ``<account>@<domain>`` from an
  :class:`AccountProvider`

Each fallback logs a ``signature_fallback`` warning. In strict mode the same
conditions raise :class:`MissingConfiguration` instead.
"""

from __future__ import annotations

from datetime import datetime
from typing import Callable, Final

from ..domain.entry import Signature
from ..domain.errors import MissingConfiguration
from ..observability import log_warning
from .ports import AccountProvider, ConfigurationReader

USER_NAME_KEY: Final[str] = "user.name"
USER_EMAIL_KEY: Final[str] = "user.email"
UNKNOWN_NAME: Final[str] = "unknown"


def build_signature(
    reader: ConfigurationReader,
    now: datetime,
    *,
    strict: bool = False,
    accounts: AccountProvider | None = None,
) -> Signature:
    """Resolve the identity settings of *reader* into a signature stamped *now*."""

    name = _normalize(strict, USER_NAME_KEY, _lookup(reader, USER_NAME_KEY), lambda: UNKNOWN_NAME)
    email = _normalize(strict, USER_EMAIL_KEY, _lookup(reader, USER_EMAIL_KEY), lambda: _account_address(accounts))
    return Signature(name, email, now)


def _lookup(reader: ConfigurationReader, key: str) -> str | None:
    entry = reader.get(key, str)
    return None if entry is None else entry.value


def _normalize(strict: bool, key: str, current: str | None, fallback: Callable[[], str]) -> str:
    if current:
        return current
    message = f"Configuration value '{key}' is missing or invalid."
    if strict:
        raise MissingConfiguration(message)
    value = fallback()
    log_warning("signature_fallback", key=key, fallback=value, detail=message)
    return value


def _account_address(accounts: AccountProvider | None) -> str:
    if accounts is None:
        from ..adapters.environment.default import DefaultAccountProvider

        accounts = DefaultAccountProvider()
    return f"{accounts.account_name()}@{accounts.domain_name()}"
