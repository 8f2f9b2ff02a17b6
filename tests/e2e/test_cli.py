"""End-to-end CLI coverage for the commands exposed by lib_scoped_config.

The tests drive the documented workflows (get, set, unset, list, find,
signature, metadata lookups) against sandboxed scope files so the precedence
order and persistence are observed through the command line surface.
"""

from __future__ import annotations

import json
from pathlib import Path

import lib_cli_exit_tools
from click.testing import CliRunner

from lib_scoped_config import cli
from lib_scoped_config.domain.errors import KeyNotFound
from lib_scoped_config.domain.scope import Scope
from tests.support import ScopedSandbox, create_scoped_sandbox


def _runner() -> CliRunner:
    return CliRunner()


def _local(sandbox: ScopedSandbox) -> list[str]:
    return ["--no-defaults", "--local", str(sandbox.files[Scope.LOCAL])]


def test_cli_set_then_get_round_trips(tmp_path: Path) -> None:
    sandbox = create_scoped_sandbox(tmp_path)

    result = _runner().invoke(cli.cli, [*_local(sandbox), "set", "core.bare", "yes", "--type", "bool"])
    assert result.exit_code == 0, result.output
    assert "bare = true" in sandbox.files[Scope.LOCAL].read_text(encoding="utf-8")

    result = _runner().invoke(cli.cli, [*_local(sandbox), "get", "core.bare", "--type", "bool"])
    assert result.exit_code == 0
    assert result.output.strip() == "true"


def test_cli_get_missing_key_exits_with_one(tmp_path: Path) -> None:
    sandbox = create_scoped_sandbox(tmp_path)
    result = _runner().invoke(cli.cli, [*_local(sandbox), "get", "user.name"])
    assert result.exit_code == 1
    assert result.output == ""


def test_cli_set_rejects_invalid_typed_value(tmp_path: Path) -> None:
    sandbox = create_scoped_sandbox(tmp_path)
    result = _runner().invoke(cli.cli, [*_local(sandbox), "set", "core.abbrev", "4g", "--type", "int32"])
    assert result.exit_code != 0
    assert not sandbox.files[Scope.LOCAL].exists()


def test_cli_reads_defaults_by_precedence(tmp_path: Path) -> None:
    sandbox = create_scoped_sandbox(tmp_path)
    sandbox.write(Scope.SYSTEM, "[core]\n\teditor = vi\n")
    sandbox.write(Scope.GLOBAL, "[core]\n\teditor = nano\n")

    result = _runner().invoke(cli.cli, ["get", "core.editor"], env=sandbox.env)
    assert result.output.strip() == "nano"

    result = _runner().invoke(cli.cli, ["get", "core.editor", "--scope", "system"], env=sandbox.env)
    assert result.output.strip() == "vi"

    result = _runner().invoke(cli.cli, ["list", "--show-scope"], env=sandbox.env)
    assert result.exit_code == 0
    assert set(result.output.splitlines()) == {"global\tcore.editor=nano", "system\tcore.editor=vi"}


def test_cli_find_and_unset_target_one_scope(tmp_path: Path) -> None:
    sandbox = create_scoped_sandbox(tmp_path)
    sandbox.write(Scope.LOCAL, '[core]\n\tbare = false\n[remote "origin"]\n\turl = /srv/repo.git\n')

    result = _runner().invoke(cli.cli, [*_local(sandbox), "find", r"^remote\."])
    assert result.output.splitlines() == ["remote.origin.url=/srv/repo.git"]

    result = _runner().invoke(cli.cli, [*_local(sandbox), "unset", "remote.origin.url"])
    assert result.exit_code == 0
    result = _runner().invoke(cli.cli, [*_local(sandbox), "list"])
    assert result.output.splitlines() == ["core.bare=false"]

    result = _runner().invoke(cli.cli, [*_local(sandbox), "unset", "remote.origin.url"])
    assert isinstance(result.exception, KeyNotFound)


def test_cli_signature_prints_json(tmp_path: Path) -> None:
    sandbox = create_scoped_sandbox(tmp_path)
    sandbox.write(Scope.GLOBAL, "[user]\n\tname = Ada\n\temail = ada@example.com\n")

    result = _runner().invoke(cli.cli, ["signature", "--strict"], env=sandbox.env)
    assert result.exit_code == 0, result.output
    payload = json.loads(result.output)
    assert (payload["name"], payload["email"]) == ("Ada", "ada@example.com")
    assert "T" in payload["when"]


def test_cli_info_handles_missing_metadata(monkeypatch) -> None:
    def _raise_pkg_not_found(*_args, **_kwargs):
        raise cli.metadata.PackageNotFoundError()

    monkeypatch.setattr(cli.metadata, "metadata", _raise_pkg_not_found)
    result = _runner().invoke(cli.cli, ["info"])
    assert result.exit_code == 0
    assert "metadata unavailable" in result.output


def test_cli_main_restores_traceback_flag(tmp_path: Path) -> None:
    previous_traceback = getattr(lib_cli_exit_tools.config, "traceback", False)
    sandbox = create_scoped_sandbox(tmp_path)
    exit_code = cli.main(
        ["--traceback", *_local(sandbox), "set", "user.name", "Ada Lovelace"],
        restore_traceback=True,
    )
    assert exit_code == 0
    assert getattr(lib_cli_exit_tools.config, "traceback", False) == previous_traceback
    assert "name = Ada Lovelace" in sandbox.files[Scope.LOCAL].read_text(encoding="utf-8")
