"""Shared sandbox for tests that need real scope files on disk.

The sandbox lays out a fake home directory, XDG config directory, ``/etc``
replacement, and repository so the default location probes and the file store
can be exercised without touching the developer's own configuration.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from lib_scoped_config.adapters.locations.default import DefaultLocationResolver
from lib_scoped_config.domain.scope import Scope


@dataclass
class ScopedSandbox:
    """Paths and environment describing one isolated configuration family."""

    root: Path
    files: dict[Scope, Path]
    env: dict[str, str] = field(default_factory=dict)
    platform: str = "linux"

    def write(self, scope: Scope, content: str) -> Path:
        """Write *content* to the file of *scope* and return its path."""

        path = self.files[scope]
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        return path

    def resolver(self) -> DefaultLocationResolver:
        """Return a location resolver pointed at the sandbox."""

        return DefaultLocationResolver(env=self.env, platform=self.platform)


def create_scoped_sandbox(tmp_path: Path) -> ScopedSandbox:
    """Create the sandbox directory tree below *tmp_path*."""

    home = tmp_path / "home"
    xdg = tmp_path / "xdg"
    etc = tmp_path / "etc"
    repo = tmp_path / "repo" / ".git"
    for directory in (home, xdg, etc, repo):
        directory.mkdir(parents=True, exist_ok=True)
    files = {
        Scope.LOCAL: repo / "config",
        Scope.GLOBAL: home / ".gitconfig",
        Scope.XDG: xdg / "git" / "config",
        Scope.SYSTEM: etc / "gitconfig",
    }
    env = {
        "HOME": str(home),
        "XDG_CONFIG_HOME": str(xdg),
        "LIB_SCOPED_CONFIG_ETC": str(etc),
    }
    return ScopedSandbox(root=tmp_path, files=files, env=env)


__all__ = ["ScopedSandbox", "create_scoped_sandbox"]
