"""CLI adapter for ``lib_scoped_config`` built on ``lib_cli_exit_tools``.

Purpose
-------
Expose the scoped configuration store via a command line interface so
operators can inspect and edit scope files without writing Python code.

Contents
--------
* :data:`CLICK_CONTEXT_SETTINGS` – shared Click settings ensuring ``-h`` works.
* :func:`cli` – root command storing file overrides and traceback handling.
* :func:`cli_info` – prints distribution metadata for quick diagnostics.
* :func:`cli_get` / :func:`cli_set` / :func:`cli_unset` – typed access.
* :func:`cli_list` / :func:`cli_find` – enumeration and regex search.
* :func:`cli_signature` – resolves the identity as JSON.
* :func:`main` – entry point used by ``console_scripts`` registration.

System Role
-----------
The CLI lives in the outermost layer. It opens handles through
:func:`lib_scoped_config.core.open_configuration` and never reaches into the
store adapters directly. ``lib_cli_exit_tools`` centralises the exit code
strategy so all commands behave consistently across shells and CI.
"""

from __future__ import annotations

import json
import sys
from importlib import metadata
from pathlib import Path
from typing import Any, Final, Optional, Sequence

import lib_cli_exit_tools
import rich_click as click

from .application.aggregate import Configuration
from .application.codec import ValueKind, decode
from .core import open_configuration
from .domain.entry import Entry
from .domain.scope import Scope

CLICK_CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}
_TRACEBACK_SUMMARY_LIMIT: Final[int] = 500
_TRACEBACK_VERBOSE_LIMIT: Final[int] = 10_000

SCOPE_CHOICES: Final[tuple[str, ...]] = tuple(scope.value for scope in Scope)
TYPE_CHOICES: Final[tuple[str, ...]] = tuple(kind.value for kind in ValueKind)


def _resolve_version() -> str:
    """Return the installed package version with sensible fallbacks."""

    try:
        return metadata.version("lib_scoped_config")
    except metadata.PackageNotFoundError:
        return "0.0.0"


_FILE_OPTION = click.Path(path_type=Path, dir_okay=False)


@click.group(
    help="Layered local/global/xdg/system configuration store",
    context_settings=CLICK_CONTEXT_SETTINGS,
    invoke_without_command=False,
)
@click.version_option(
    version=_resolve_version(),
    prog_name="lib_scoped_config",
    message="lib_scoped_config version %(version)s",
)
@click.option(
    "--traceback/--no-traceback",
    is_flag=True,
    default=False,
    help="Show full Python traceback on errors",
)
@click.option("--local", "local", type=_FILE_OPTION, default=None, help="Repository (local scope) file")
@click.option("--global", "global_", type=_FILE_OPTION, default=None, help="Override the global scope file")
@click.option("--xdg", "xdg", type=_FILE_OPTION, default=None, help="Override the xdg scope file")
@click.option("--system", "system", type=_FILE_OPTION, default=None, help="Override the system scope file")
@click.option(
    "--defaults/--no-defaults",
    default=True,
    show_default=True,
    help="Probe default locations for scopes without an explicit file",
)
@click.pass_context
def cli(
    ctx: click.Context,
    traceback: bool,
    local: Optional[Path],
    global_: Optional[Path],
    xdg: Optional[Path],
    system: Optional[Path],
    defaults: bool,
) -> None:
    """Root command storing file overrides and the traceback preference.

    Side Effects
        Mutates ``lib_cli_exit_tools.config.traceback`` and
        ``lib_cli_exit_tools.config.traceback_force_color``.
    """

    ctx.ensure_object(dict)
    ctx.obj["traceback"] = traceback
    ctx.obj["files"] = {"local": local, "global_": global_, "xdg": xdg, "system": system}
    ctx.obj["defaults"] = defaults
    lib_cli_exit_tools.config.traceback = traceback
    lib_cli_exit_tools.config.traceback_force_color = traceback


@cli.command("info", context_settings=CLICK_CONTEXT_SETTINGS)
def cli_info() -> None:
    """Print basic distribution metadata so users can confirm installation."""

    try:
        meta = metadata.metadata("lib_scoped_config")
    except metadata.PackageNotFoundError:
        click.echo("lib_scoped_config (metadata unavailable)")
        return
    click.echo(f"Info for {meta.get('Name', 'lib_scoped_config')}:")
    click.echo(f"  Version         : {meta.get('Version', _resolve_version())}")
    click.echo(f"  Requires-Python : {meta.get('Requires-Python', '>=3.10')}")
    summary = meta.get("Summary")
    if summary:
        click.echo(f"  Summary         : {summary}")


@cli.command("get", context_settings=CLICK_CONTEXT_SETTINGS)
@click.argument("key")
@click.option("--scope", type=click.Choice(SCOPE_CHOICES, case_sensitive=False), default=None, help="Only read this scope")
@click.option("--type", "type_", type=click.Choice(TYPE_CHOICES, case_sensitive=False), default="string", show_default=True)
@click.pass_context
def cli_get(ctx: click.Context, key: str, scope: Optional[str], type_: str) -> None:
    """Print the value of KEY; exit with status 1 when it is not set.

    Examples
    --------
    >>> from click.testing import CliRunner
    >>> result = CliRunner().invoke(cli, ["--no-defaults", "get", "user.name"])
    >>> result.exit_code
    1
    """

    with _open(ctx) as config:
        entry = config.get(key, ValueKind.parse(type_), _scope_or_none(scope))
    if entry is None:
        ctx.exit(1)
    click.echo(_format_value(entry.value))


@cli.command("set", context_settings=CLICK_CONTEXT_SETTINGS)
@click.argument("key")
@click.argument("value")
@click.option("--scope", type=click.Choice(SCOPE_CHOICES, case_sensitive=False), default="local", show_default=True)
@click.option("--type", "type_", type=click.Choice(TYPE_CHOICES, case_sensitive=False), default="string", show_default=True)
@click.pass_context
def cli_set(ctx: click.Context, key: str, value: str, scope: str, type_: str) -> None:
    """Store VALUE under KEY in one scope, validated as --type."""

    kind = ValueKind.parse(type_)
    with _open(ctx) as config:
        config.set(key, decode(kind, value, key), Scope.parse(scope), kind=kind)


@cli.command("unset", context_settings=CLICK_CONTEXT_SETTINGS)
@click.argument("key")
@click.option("--scope", type=click.Choice(SCOPE_CHOICES, case_sensitive=False), default="local", show_default=True)
@click.pass_context
def cli_unset(ctx: click.Context, key: str, scope: str) -> None:
    """Remove KEY from one scope."""

    with _open(ctx) as config:
        config.unset(key, Scope.parse(scope))


@cli.command("list", context_settings=CLICK_CONTEXT_SETTINGS)
@click.option("--scope", type=click.Choice(SCOPE_CHOICES, case_sensitive=False), default=None, help="Only list this scope")
@click.option("--show-scope/--no-show-scope", default=False, help="Prefix each line with its scope")
@click.pass_context
def cli_list(ctx: click.Context, scope: Optional[str], show_scope: bool) -> None:
    """Print every entry as ``name=value``."""

    with _open(ctx) as config:
        entries = list(config.entries()) if scope is None else config.find(".", Scope.parse(scope))
    _echo_entries(entries, show_scope)


@cli.command("find", context_settings=CLICK_CONTEXT_SETTINGS)
@click.argument("pattern")
@click.option("--scope", type=click.Choice(SCOPE_CHOICES, case_sensitive=False), default="local", show_default=True)
@click.option("--show-scope/--no-show-scope", default=False, help="Prefix each line with its scope")
@click.pass_context
def cli_find(ctx: click.Context, pattern: str, scope: str, show_scope: bool) -> None:
    """Print the entries of one scope whose names match the regex PATTERN."""

    with _open(ctx) as config:
        entries = config.find(pattern, Scope.parse(scope))
    _echo_entries(entries, show_scope)


@cli.command("signature", context_settings=CLICK_CONTEXT_SETTINGS)
@click.option("--strict/--no-strict", default=False, help="Fail instead of falling back when identity is missing")
@click.pass_context
def cli_signature(ctx: click.Context, strict: bool) -> None:
    """Resolve user.name / user.email and print the signature as JSON."""

    with _open(ctx) as config:
        signature = config.build_signature(strict=strict)
    payload = {"name": signature.name, "email": signature.email, "when": signature.when.isoformat()}
    click.echo(json.dumps(payload))


def _open(ctx: click.Context) -> Configuration:
    """Open a handle using the file overrides stored on the root context."""

    files = ctx.obj["files"]
    return open_configuration(**files, probe_defaults=ctx.obj["defaults"])


def _scope_or_none(value: Optional[str]) -> Optional[Scope]:
    return None if value is None else Scope.parse(value)


def _format_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _echo_entries(entries: Sequence[Entry[str]], show_scope: bool) -> None:
    for entry in entries:
        line = f"{entry.name}={entry.value}"
        click.echo(f"{entry.scope.value}\t{line}" if show_scope else line)


def main(argv: Optional[Sequence[str]] = None, *, restore_traceback: bool = True) -> int:
    """Execute the CLI with shared exit handling and return the exit code."""

    previous_traceback = getattr(lib_cli_exit_tools.config, "traceback", False)
    previous_force_color = getattr(lib_cli_exit_tools.config, "traceback_force_color", False)
    try:
        try:
            return lib_cli_exit_tools.run_cli(
                cli,
                argv=list(argv) if argv is not None else None,
                prog_name="lib_scoped_config",
            )
        except BaseException as exc:  # noqa: BLE001 - funnel through shared printers
            lib_cli_exit_tools.print_exception_message(
                trace_back=lib_cli_exit_tools.config.traceback,
                length_limit=(
                    _TRACEBACK_VERBOSE_LIMIT if lib_cli_exit_tools.config.traceback else _TRACEBACK_SUMMARY_LIMIT
                ),
            )
            return lib_cli_exit_tools.get_system_exit_code(exc)
    finally:
        if restore_traceback:
            lib_cli_exit_tools.config.traceback = previous_traceback
            lib_cli_exit_tools.config.traceback_force_color = previous_force_color


if __name__ == "__main__":  # pragma: no cover - exercised via console entry point
    raise SystemExit(main(sys.argv[1:]))
