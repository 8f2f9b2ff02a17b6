"""Default configuration file locations for the optional scopes.

Purpose
-------
Implement the :class:`lib_scoped_config.application.ports.LocationResolver`
protocol by encapsulating OS-specific probing rules. The adapter is the only
component that understands where per-user and machine-wide files live.

Contents
--------
* :class:`DefaultLocationResolver` – probes global, xdg, and system files.
* :func:`_existing` – helper returning a path only when the file exists.

System Role
-----------
Feeds default locations into :func:`lib_scoped_config.core.open_configuration`
for scopes the caller did not supply explicitly. It respects environment
overrides (for tests and relocated installs) and emits observability events
about the files it finds.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

from ...observability import log_debug


class DefaultLocationResolver:
    """Probe the conventional files of a git-style configuration family.

    With the default ``slug="git"`` the probes match git itself:
    ``~/.gitconfig``, ``$XDG_CONFIG_HOME/git/config`` and ``/etc/gitconfig``
    (``%ProgramData%\\Git\\config`` on Windows).
    """

    def __init__(
        self,
        *,
        slug: str = "git",
        env: dict[str, str] | None = None,
        platform: str | None = None,
    ) -> None:
        """Store context required to resolve filesystem locations.

        Parameters
        ----------
        slug:
            Configuration family name used to build file names.
        env:
            Optional environment mapping that overrides ``os.environ`` values
            (useful for deterministic tests).
        platform:
            Platform identifier (``sys.platform`` clone). Defaults to the
            current interpreter platform.
        """

        self.slug = slug
        self.env = {**os.environ, **(env or {})}
        self.platform = platform or sys.platform

    def global_(self) -> str | None:
        """Return the per-user file (``~/.<slug>config``) when it exists.

        Examples
        --------
        >>> from tempfile import TemporaryDirectory
        >>> tmp = TemporaryDirectory()
        >>> _ = (Path(tmp.name) / ".gitconfig").write_text("[user]\\n", encoding="utf-8")
        >>> resolver = DefaultLocationResolver(env={"HOME": tmp.name}, platform="linux")
        >>> Path(resolver.global_()).name
        '.gitconfig'
        >>> tmp.cleanup()
        """

        return _existing("global", self._home() / f".{self.slug}config")

    def xdg(self) -> str | None:
        """Return ``$XDG_CONFIG_HOME/<slug>/config`` (or ``~/.config``) when it exists."""

        xdg = self.env.get("XDG_CONFIG_HOME")
        base = Path(xdg) if xdg else self._home() / ".config"
        return _existing("xdg", base / self.slug / "config")

    def system(self) -> str | None:
        """Return the machine-wide file when it exists."""

        if self._is_windows:
            program_data = Path(
                self.env.get("LIB_SCOPED_CONFIG_PROGRAMDATA", self.env.get("ProgramData", r"C:\ProgramData"))
            )
            candidate = program_data / self.slug.title() / "config"
        else:
            etc_root = Path(self.env.get("LIB_SCOPED_CONFIG_ETC", "/etc"))
            candidate = etc_root / f"{self.slug}config"
        return _existing("system", candidate)

    @property
    def _is_windows(self) -> bool:
        """Return ``True`` when running on Windows."""

        return self.platform.startswith("win")

    def _home(self) -> Path:
        """Return the home directory honouring ``HOME`` / ``USERPROFILE`` overrides."""

        keys = ("HOME", "USERPROFILE") if self._is_windows else ("HOME",)
        for key in keys:
            value = self.env.get(key)
            if value:
                return Path(value)
        return Path.home()


def _existing(scope: str, candidate: Path) -> str | None:
    """Return ``str(candidate)`` if it is a file, else ``None``."""

    if candidate.is_file():
        log_debug("location_found", scope=scope, path=str(candidate))
        return str(candidate)
    log_debug("location_missing", scope=scope, path=str(candidate))
    return None
