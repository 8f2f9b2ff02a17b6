"""End-to-end coverage for :func:`lib_scoped_config.open_configuration`.

Real scope files are laid out by the shared sandbox so default probing, file
parsing, precedence, persistence, and signature resolution are exercised
together the way an application would use them.
"""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path

import pytest

from lib_scoped_config import (
    InvalidFormat,
    MissingConfiguration,
    Scope,
    ScopeNotFound,
    open_configuration,
)
from tests.support import ScopedSandbox, create_scoped_sandbox


class FixedAccounts:
    def account_name(self) -> str:
        return "ada"

    def domain_name(self) -> str:
        return "analytical-engine"


@pytest.fixture()
def sandbox(tmp_path: Path) -> ScopedSandbox:
    sandbox = create_scoped_sandbox(tmp_path)
    sandbox.write(Scope.SYSTEM, "[core]\n\teditor = vi\n\tabbrev = 12\n[user]\n\tname = System User\n")
    sandbox.write(Scope.XDG, "[core]\n\teditor = emacs\n\tpager = less\n")
    sandbox.write(Scope.GLOBAL, '[user]\n\tname = Ada Lovelace\n\temail = ada@example.com\n[core]\n\teditor = "nano"\n')
    sandbox.write(Scope.LOCAL, '[core]\n\tbare = false\n\tfilemode\n[remote "origin"]\n\turl = /srv/repo.git\n')
    return sandbox


def open_sandbox(sandbox: ScopedSandbox, **kwargs):
    return open_configuration(
        local=sandbox.files[Scope.LOCAL],
        resolver=sandbox.resolver(),
        accounts=FixedAccounts(),
        **kwargs,
    )


def test_default_probes_attach_every_scope(sandbox: ScopedSandbox) -> None:
    with open_sandbox(sandbox) as config:
        assert config.scopes == (Scope.LOCAL, Scope.GLOBAL, Scope.XDG, Scope.SYSTEM)
        assert config.locations() == {scope: str(path) for scope, path in sandbox.files.items()}


def test_reads_resolve_by_precedence(sandbox: ScopedSandbox) -> None:
    with open_sandbox(sandbox) as config:
        assert config.get_value("core.editor") == "nano"
        assert config.get("core.editor").scope is Scope.GLOBAL
        assert config.get("core.pager").scope is Scope.XDG
        assert config.get_value("core.abbrev", int) == 12
        assert config.get_value("core.filemode", bool) is True
        assert config.get_value("core.bare", bool) is False
        assert config.get_value("remote.origin.url") == "/srv/repo.git"
        assert config.get_value("core.editor", scope=Scope.SYSTEM) == "vi"


def test_writes_persist_to_the_targeted_file(sandbox: ScopedSandbox) -> None:
    with open_sandbox(sandbox) as config:
        config.set("core.bare", True)
        config.set("core.abbrev", 7, Scope.XDG)
        config.unset("core.pager", Scope.XDG)

    with open_sandbox(sandbox) as reopened:
        assert reopened.get("core.bare", bool).value is True
        assert reopened.get("core.abbrev", int).scope is Scope.XDG
        assert reopened.get("core.pager") is None
    assert "abbrev = 12" in sandbox.files[Scope.SYSTEM].read_text(encoding="utf-8")


def test_explicit_locations_override_probes(sandbox: ScopedSandbox, tmp_path: Path) -> None:
    override = tmp_path / "override.gitconfig"
    override.write_text("[core]\n\teditor = ed\n", encoding="utf-8")

    with open_sandbox(sandbox, global_=override) as config:
        assert config.get("core.editor").value == "ed"
        assert config.locations()[Scope.GLOBAL] == str(override)


def test_without_probes_only_explicit_scopes_attach(sandbox: ScopedSandbox) -> None:
    with open_sandbox(sandbox, probe_defaults=False) as config:
        assert config.scopes == (Scope.LOCAL,)
        assert config.get("user.name") is None
        with pytest.raises(ScopeNotFound):
            config.set("user.name", "Ada", Scope.GLOBAL)


def test_signature_from_files(sandbox: ScopedSandbox) -> None:
    now = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)
    with open_sandbox(sandbox) as config:
        signature = config.build_signature(now, strict=True)
    assert str(signature) == "Ada Lovelace <ada@example.com>"
    assert signature.when == now


def test_signature_fallback_without_files(tmp_path: Path) -> None:
    sandbox = create_scoped_sandbox(tmp_path)
    with open_sandbox(sandbox) as config:
        signature = config.build_signature()
        assert signature.email == "ada@analytical-engine"
        with pytest.raises(MissingConfiguration):
            config.build_signature(strict=True)


def test_malformed_file_fails_to_open(sandbox: ScopedSandbox) -> None:
    sandbox.write(Scope.XDG, "[core\n\teditor = emacs\n")
    with pytest.raises(InvalidFormat):
        open_sandbox(sandbox)
