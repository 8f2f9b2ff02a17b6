"""Git-style INI backing file.

Purpose
-------
Implement the :class:`lib_scoped_config.application.ports.ScopeStore` protocol
for one on-disk configuration file. The adapter is a thin wrapper around the
standard library :mod:`configparser` so parsing, error translation, and
observability live in one place.

Contents
--------
* :class:`FileStore` – loads a file into memory and persists every write.
* :func:`_parse_header` / :func:`_format_header` – map ``[section "sub"]``
  headers to and from dotted key prefixes.
* :func:`_unquote` / :func:`_quote` – value quoting compatible with git files.

System Role
-----------
Opened by :meth:`lib_scoped_config.application.aggregate.Configuration.attach`
for every scope that has a location. Writes go through ``<file>.lock`` and an
atomic rename; a lock held by another writer raises :class:`StoreLocked`.
"""

from __future__ import annotations

import configparser
import os
import re
from pathlib import Path
from typing import Final

from ...application.codec import split_key
from ...domain.errors import InvalidFormat, StoreLocked
from ...domain.scope import Scope
from ...observability import log_debug, log_error
from .memory import MemoryStore

_HEADER: Final[re.Pattern[str]] = re.compile(r'^\s*([^\s"]+)(?:\s+"((?:[^"\\]|\\.)*)")?\s*$')
_ESCAPES: Final[dict[str, str]] = {"n": "\n", "t": "\t", "b": "\b", '"': '"', "\\": "\\"}
_NEEDS_QUOTES: Final[re.Pattern[str]] = re.compile(r'^\s|\s$|[#;"\\\n\r\t]')
_DEFAULT_SECTION: Final[str] = "lib_scoped_config:no-defaults"


class FileStore(MemoryStore):
    """Scope store backed by a git-style configuration file.

    A missing file is treated as empty and created on the first write, so a
    store can be attached for a location that does not exist yet.

    Every write rewrites the whole file from the parsed sections: comments and
    blank lines of the original file are not preserved. A write that fails
    (held lock, I/O error) leaves both the file and the store unchanged, and a
    closed store rejects writes before touching the file.

    Examples
    --------
    >>> from tempfile import TemporaryDirectory
    >>> tmp = TemporaryDirectory()
    >>> store = FileStore(Scope.GLOBAL, Path(tmp.name) / "config")
    >>> store.set("user.name", "Ada Lovelace")
    >>> FileStore(Scope.GLOBAL, Path(tmp.name) / "config").get("user.name")
    'Ada Lovelace'
    >>> tmp.cleanup()
    """

    def __init__(self, scope: Scope, path: str | Path) -> None:
        file_path = Path(path)
        super().__init__(scope, path=str(file_path))
        self._file = file_path
        self._parser = _new_parser()
        if file_path.exists():
            self._load()

    def set(self, name: str, raw: str) -> None:
        self._data()
        section, subsection, option = split_key(name)
        parser = _copy_parser(self._parser)
        header = _header_for(parser, section, subsection, option, str(self._file))
        parser.set(header, option, _quote(raw))
        self._persist(parser)
        self._parser = parser
        super().set(name, raw)

    def delete(self, name: str) -> bool:
        self._data()
        section, subsection, option = split_key(name)
        parser = _copy_parser(self._parser)
        removed = False
        for header in _matching_headers(parser, section, subsection, str(self._file)):
            if parser.remove_option(header, option):
                removed = True
                if not parser.options(header):
                    parser.remove_section(header)
        if not removed:
            return False
        self._persist(parser)
        self._parser = parser
        return super().delete(name)

    def close(self) -> None:
        super().close()
        self._parser = _new_parser()

    def _load(self) -> None:
        path = str(self._file)
        try:
            text = self._file.read_bytes().decode("utf-8")
            self._parser.read_string(text, source=path)
        except (configparser.Error, UnicodeDecodeError) as exc:
            log_error("store_invalid", scope=self.scope.value, path=path, error=str(exc))
            raise InvalidFormat(f"Invalid configuration file {path}: {exc}") from exc
        for header in self._parser.sections():
            section, subsection = _parse_header(header, path)
            prefix = section if subsection is None else f"{section}.{subsection}"
            for option in self._parser.options(header):
                raw = self._parser.get(header, option, raw=True)
                MemoryStore.set(self, f"{prefix}.{option}", None if raw is None else _unquote(raw))
        log_debug("store_loaded", scope=self.scope.value, path=path, entries=len(self))

    def _persist(self, parser: configparser.ConfigParser) -> None:
        target = self._file
        lock = target.with_name(target.name + ".lock")
        target.parent.mkdir(parents=True, exist_ok=True)
        try:
            descriptor = os.open(lock, os.O_CREAT | os.O_EXCL | os.O_WRONLY, 0o644)
        except FileExistsError as exc:
            raise StoreLocked(f"Configuration file {target} is locked ({lock} exists)") from exc
        try:
            with os.fdopen(descriptor, "w", encoding="utf-8", newline="\n") as handle:
                parser.write(handle)
            os.replace(lock, target)
        except BaseException:
            lock.unlink(missing_ok=True)
            raise
        log_debug("store_written", scope=self.scope.value, path=str(target))


def _new_parser() -> configparser.ConfigParser:
    parser = configparser.ConfigParser(
        interpolation=None,
        strict=False,
        allow_no_value=True,
        delimiters=("=",),
        comment_prefixes=("#", ";"),
        inline_comment_prefixes=None,
        empty_lines_in_values=False,
        default_section=_DEFAULT_SECTION,
    )
    return parser


def _copy_parser(parser: configparser.ConfigParser) -> configparser.ConfigParser:
    """Return an independent copy of *parser* so a failed write leaves it untouched."""

    copy = _new_parser()
    for header in parser.sections():
        copy.add_section(header)
        for option in parser.options(header):
            copy.set(header, option, parser.get(header, option, raw=True))
    return copy


def _matching_headers(
    parser: configparser.ConfigParser, section: str, subsection: str | None, path: str
) -> list[str]:
    return [header for header in parser.sections() if _parse_header(header, path) == (section, subsection)]


def _header_for(
    parser: configparser.ConfigParser, section: str, subsection: str | None, option: str, path: str
) -> str:
    headers = _matching_headers(parser, section, subsection, path)
    owning = [header for header in headers if parser.has_option(header, option)]
    if owning:
        return owning[-1]
    if headers:
        return headers[-1]
    header = _format_header(section, subsection)
    parser.add_section(header)
    return header


def _parse_header(header: str, path: str) -> tuple[str, str | None]:
    """Return ``(section, subsection)`` for a raw section header.

    Examples
    --------
    >>> _parse_header('remote "origin"', "config")
    ('remote', 'origin')
    >>> _parse_header("Core", "config")
    ('core', None)
    >>> _parse_header("branch.Main", "config")
    ('branch', 'main')
    """

    match = _HEADER.match(header)
    if match is None:
        raise InvalidFormat(f"Invalid section header [{header}] in {path}")
    section, quoted = match.groups()
    if quoted is not None:
        return section.lower(), re.sub(r"\\(.)", r"\1", quoted)
    if "." in section:
        head, _, tail = section.partition(".")
        return head.lower(), tail.lower()
    return section.lower(), None


def _format_header(section: str, subsection: str | None) -> str:
    if subsection is None:
        return section
    escaped = subsection.replace("\\", "\\\\").replace('"', '\\"')
    return f'{section} "{escaped}"'


def _unquote(raw: str) -> str:
    """Resolve quotes, escapes, and trailing comments in a stored value.

    Whitespace inside quotes or produced by an escape is kept; unquoted
    trailing whitespace before a comment is dropped.

    Examples
    --------
    >>> _unquote('"  padded  "')
    '  padded  '
    >>> _unquote('value   # comment')
    'value'
    >>> _unquote('"a # b" ; trailing')
    'a # b'
    """

    if not any(marker in raw for marker in '"\\#;'):
        return raw
    result: list[str] = []
    protected = 0
    quoted = False
    chars = iter(raw)
    for char in chars:
        if char == '"':
            quoted = not quoted
            continue
        if char == "\\":
            escaped = next(chars, "")
            result.append(_ESCAPES.get(escaped, escaped))
            protected = len(result)
            continue
        if not quoted and char in "#;":
            break
        result.append(char)
        if quoted:
            protected = len(result)
    return "".join(result[:protected]) + "".join(result[protected:]).rstrip()


def _quote(raw: str) -> str:
    """Quote *raw* when it would not survive an unquoted round trip.

    Examples
    --------
    >>> _quote("plain")
    'plain'
    >>> _quote(" padded")
    '" padded"'
    """

    if not _NEEDS_QUOTES.search(raw):
        return raw
    escaped = raw.replace("\\", "\\\\").replace('"', '\\"').replace("\n", "\\n").replace("\t", "\\t")
    return f'"{escaped}"'
