"""Composition root for ``lib_scoped_config``.

Purpose
-------
Provide the single entry point that wires the default-location probes, the
file store adapter, and the account adapter into a
:class:`~lib_scoped_config.application.aggregate.Configuration`.

Contents
--------
* :func:`open_configuration` – high-level API returning an attached handle.
* :func:`_attach_scopes` – internal helper that attaches scopes in precedence
  order and emits observability events.

System Role
-----------
This module connects adapters with the application layer. It is the canonical
location for adjusting which scopes are probed and in which order.
"""

from __future__ import annotations

from pathlib import Path
from typing import Callable

from .adapters.environment.default import DefaultAccountProvider
from .adapters.locations.default import DefaultLocationResolver
from .application.aggregate import Configuration
from .application.ports import AccountProvider, LocationResolver
from .domain.scope import Scope
from .observability import bind_trace_id, log_info


def open_configuration(
    *,
    local: str | Path | None = None,
    global_: str | Path | None = None,
    xdg: str | Path | None = None,
    system: str | Path | None = None,
    resolver: LocationResolver | None = None,
    accounts: AccountProvider | None = None,
    probe_defaults: bool = True,
) -> Configuration:
    """Open a configuration handle over the available scope files.

    Parameters
    ----------
    local:
        Per-repository configuration file. It is only attached when given,
        since locating the repository is the caller's business.
    global_ / xdg / system:
        Explicit files for the optional scopes. When omitted and
        *probe_defaults* is true, *resolver* supplies the default location;
        scopes without any location stay unattached.
    resolver:
        Default-location probes; :class:`DefaultLocationResolver` when omitted.
    accounts:
        Account adapter used for signature fallbacks;
        :class:`DefaultAccountProvider` when omitted.
    probe_defaults:
        Disable to attach explicit locations only.

    Returns
    -------
    Configuration
        Live handle; release it (or use it as a context manager) when done.

    Side Effects
    ------------
    Clears the active trace identifier and emits structured log events for
    every attached or skipped scope.

    Examples
    --------
    >>> from tempfile import TemporaryDirectory
    >>> tmp = TemporaryDirectory()
    >>> repo_config = Path(tmp.name) / "config"
    >>> with open_configuration(local=repo_config, probe_defaults=False) as config:
    ...     config.set("core.bare", True)
    ...     config.get("core.bare", bool).value
    True
    >>> tmp.cleanup()
    """

    resolver = resolver or DefaultLocationResolver()
    bind_trace_id(None)

    probes: dict[Scope, Callable[[], str | None]] = {
        Scope.GLOBAL: resolver.global_,
        Scope.XDG: resolver.xdg,
        Scope.SYSTEM: resolver.system,
    }
    explicit: dict[Scope, str | Path | None] = {
        Scope.LOCAL: local,
        Scope.GLOBAL: global_,
        Scope.XDG: xdg,
        Scope.SYSTEM: system,
    }

    config = Configuration(accounts=accounts or DefaultAccountProvider())
    try:
        _attach_scopes(config, explicit, probes if probe_defaults else {})
    except BaseException:
        config.release()
        raise
    log_info("configuration_opened", scope="all", path=None, scopes=[scope.value for scope in config.scopes])
    return config


def _attach_scopes(
    config: Configuration,
    explicit: dict[Scope, str | Path | None],
    probes: dict[Scope, Callable[[], str | None]],
) -> None:
    """Attach every scope in precedence order, probing defaults where needed."""

    for scope in Scope.ordered():
        location = explicit.get(scope)
        default = None
        if location is None and scope in probes:
            default = probes[scope]()
        config.attach(scope, location, default=default)


__all__ = ["open_configuration"]
