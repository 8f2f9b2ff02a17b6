"""Host account adapter.

Implements :class:`lib_scoped_config.application.ports.AccountProvider` using
:mod:`getpass` and :mod:`socket`. The signature resolver uses it to synthesise
``<account>@<domain>`` when no e-mail address is configured.
"""

from __future__ import annotations

import getpass
import os
import socket


class DefaultAccountProvider:
    """Report the login name and host domain of the running process."""

    def __init__(self, *, env: dict[str, str] | None = None) -> None:
        """Read account details from *env* instead of ``os.environ`` when given."""

        self._env = dict(os.environ) if env is None else dict(env)

    def account_name(self) -> str:
        for key in ("LOGNAME", "USER", "LNAME", "USERNAME"):
            value = self._env.get(key)
            if value:
                return value
        try:
            return getpass.getuser()
        except (KeyError, OSError):
            return "unknown"

    def domain_name(self) -> str:
        return self._env.get("USERDOMAIN") or socket.gethostname()
