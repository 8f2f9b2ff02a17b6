"""Default location probes exercised against a sandboxed home and ``/etc``.

The sandbox from :mod:`tests.support` mirrors the files git itself consults so
the resolver can be checked on Linux and Windows layouts without touching the
developer's real configuration.
"""

from __future__ import annotations

from pathlib import Path

from lib_scoped_config.adapters.locations.default import DefaultLocationResolver
from lib_scoped_config.domain.scope import Scope
from tests.support import create_scoped_sandbox


def test_linux_probes_return_existing_files(tmp_path: Path) -> None:
    sandbox = create_scoped_sandbox(tmp_path)
    sandbox.write(Scope.GLOBAL, "[user]\n\tname = Ada\n")
    sandbox.write(Scope.XDG, "[core]\n\teditor = vim\n")
    sandbox.write(Scope.SYSTEM, "[core]\n\tbare = false\n")

    resolver = sandbox.resolver()

    assert resolver.global_() == str(sandbox.files[Scope.GLOBAL])
    assert resolver.xdg() == str(sandbox.files[Scope.XDG])
    assert resolver.system() == str(sandbox.files[Scope.SYSTEM])


def test_missing_files_are_not_reported(tmp_path: Path) -> None:
    resolver = create_scoped_sandbox(tmp_path).resolver()

    assert resolver.global_() is None
    assert resolver.xdg() is None
    assert resolver.system() is None


def test_xdg_falls_back_to_dot_config(tmp_path: Path) -> None:
    target = tmp_path / ".config" / "git" / "config"
    target.parent.mkdir(parents=True)
    target.write_text("[core]\n", encoding="utf-8")

    resolver = DefaultLocationResolver(env={"HOME": str(tmp_path), "XDG_CONFIG_HOME": ""}, platform="linux")

    assert resolver.xdg() == str(target)


def test_slug_selects_configuration_family(tmp_path: Path) -> None:
    (tmp_path / ".toolconfig").write_text("[core]\n", encoding="utf-8")

    resolver = DefaultLocationResolver(slug="tool", env={"HOME": str(tmp_path)}, platform="linux")

    assert resolver.global_() == str(tmp_path / ".toolconfig")


def test_windows_system_file_lives_in_program_data(tmp_path: Path) -> None:
    program_data = tmp_path / "ProgramData"
    target = program_data / "Git" / "config"
    target.parent.mkdir(parents=True)
    target.write_text("[core]\n\tautocrlf = true\n", encoding="utf-8")
    (tmp_path / "profile").mkdir()
    (tmp_path / "profile" / ".gitconfig").write_text("[user]\n", encoding="utf-8")

    resolver = DefaultLocationResolver(
        env={
            "HOME": "",
            "USERPROFILE": str(tmp_path / "profile"),
            "LIB_SCOPED_CONFIG_PROGRAMDATA": str(program_data),
        },
        platform="win32",
    )

    assert resolver.system() == str(target)
    assert resolver.global_() == str(tmp_path / "profile" / ".gitconfig")
