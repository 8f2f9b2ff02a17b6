"""Value codec and key normalisation.

Purpose
-------
Translate between the textual form kept by backing stores and the closed set of
typed values the public API supports. Every conversion dispatches over
:class:`ValueKind` with an explicit final arm, so adding a kind without teaching
the codec about it fails loudly instead of silently storing garbage.

Contents
--------
* :class:`ValueKind` – the supported value kinds.
* :func:`kind_for` / :func:`kind_for_value` – resolve a kind from a Python type
  or value, raising :class:`UnsupportedType` for anything else.
* :func:`decode` / :func:`encode` – textual <-> typed conversion.
* :func:`normalize_key` – canonical form of ``section[.subsection].name`` keys.

System Role
-----------
Called by :mod:`lib_scoped_config.application.aggregate` before any store is
touched, so type errors surface at the call site.
"""

from __future__ import annotations

import re
from enum import Enum
from typing import Any, Final

from ..domain.errors import InvalidKey, InvalidValue, UnsupportedType

_TRUE_WORDS: Final[frozenset[str]] = frozenset({"true", "yes", "on", "1"})
_FALSE_WORDS: Final[frozenset[str]] = frozenset({"false", "no", "off", "0", ""})
_INT_PATTERN: Final[re.Pattern[str]] = re.compile(r"^([+-]?\d+)\s*([kmg]?)$", re.IGNORECASE)
_SUFFIX_FACTORS: Final[dict[str, int]] = {"": 1, "k": 1024, "m": 1024**2, "g": 1024**3}
_SECTION_NAME: Final[re.Pattern[str]] = re.compile(r"[A-Za-z0-9-]+")
_VARIABLE_NAME: Final[re.Pattern[str]] = re.compile(r"[A-Za-z][A-Za-z0-9-]*")
_SUBSECTION_FORBIDDEN: Final[re.Pattern[str]] = re.compile(r"[\n\r\0]")


class ValueKind(Enum):
    """Closed set of value kinds understood by typed ``get``/``set``."""

    INT32 = "int32"
    INT64 = "int64"
    BOOL = "bool"
    STRING = "string"

    @classmethod
    def parse(cls, text: str) -> ValueKind:
        """Return the kind named *text* (``int`` is accepted for ``int64``)."""

        lowered = text.strip().lower()
        if lowered == "int":
            return cls.INT64
        if lowered == "str":
            return cls.STRING
        try:
            return cls(lowered)
        except ValueError as exc:
            raise UnsupportedType(f"Value type {text!r} is not supported") from exc


_BOUNDS: Final[dict[ValueKind, tuple[int, int]]] = {
    ValueKind.INT32: (-(2**31), 2**31 - 1),
    ValueKind.INT64: (-(2**63), 2**63 - 1),
}


def kind_for(type_: type | ValueKind) -> ValueKind:
    """Resolve the value kind requested by *type_*.

    ``bool``, ``int`` and ``str`` map to :attr:`ValueKind.BOOL`,
    :attr:`ValueKind.INT64` and :attr:`ValueKind.STRING`; a :class:`ValueKind`
    passes through unchanged so callers can ask for 32-bit integers.

    Examples
    --------
    >>> kind_for(bool)
    <ValueKind.BOOL: 'bool'>
    >>> kind_for(ValueKind.INT32)
    <ValueKind.INT32: 'int32'>
    >>> kind_for(float)
    Traceback (most recent call last):
    ...
    lib_scoped_config.domain.errors.UnsupportedType: Generic argument of type 'float' is not supported
    """

    if isinstance(type_, ValueKind):
        return type_
    if type_ is bool:
        return ValueKind.BOOL
    if type_ is int:
        return ValueKind.INT64
    if type_ is str:
        return ValueKind.STRING
    name = getattr(type_, "__name__", repr(type_))
    raise UnsupportedType(f"Generic argument of type {name!r} is not supported")


def kind_for_value(value: Any) -> ValueKind:
    """Infer the value kind for *value* (``bool`` is checked before ``int``)."""

    if isinstance(value, bool):
        return ValueKind.BOOL
    if isinstance(value, int):
        return ValueKind.INT64
    if isinstance(value, str):
        return ValueKind.STRING
    raise UnsupportedType(f"Generic argument of type {type(value).__name__!r} is not supported")


def decode(kind: ValueKind, raw: str | None, key: str) -> Any:
    """Convert the stored text *raw* of *key* into a value of *kind*.

    A variable declared without ``=`` is stored as ``None``: it reads as
    ``True`` for booleans and as an empty string for strings.

    Examples
    --------
    >>> decode(ValueKind.BOOL, "Yes", "core.bare")
    True
    >>> decode(ValueKind.INT64, "2k", "pack.window")
    2048
    >>> decode(ValueKind.STRING, None, "core.editor")
    ''
    """

    if kind is ValueKind.STRING:
        return "" if raw is None else raw
    if kind is ValueKind.BOOL:
        return _parse_bool(raw, key)
    if kind is ValueKind.INT32 or kind is ValueKind.INT64:
        return _parse_int(raw, key, kind)
    raise UnsupportedType(f"Value kind {kind!r} is not supported")


def encode(kind: ValueKind, value: Any, key: str) -> str:
    """Convert *value* into the text written to a store for *key*.

    Examples
    --------
    >>> encode(ValueKind.BOOL, False, "core.bare")
    'false'
    >>> encode(ValueKind.INT32, 42, "core.abbrev")
    '42'
    """

    if kind is ValueKind.STRING:
        if not isinstance(value, str):
            raise InvalidValue(key, value, kind.value, "expected a string")
        return value
    if kind is ValueKind.BOOL:
        if not isinstance(value, bool):
            raise InvalidValue(key, value, kind.value, "expected a boolean")
        return "true" if value else "false"
    if kind is ValueKind.INT32 or kind is ValueKind.INT64:
        if isinstance(value, bool) or not isinstance(value, int):
            raise InvalidValue(key, value, kind.value, "expected an integer")
        _check_range(value, key, kind)
        return str(value)
    raise UnsupportedType(f"Value kind {kind!r} is not supported")


def normalize_key(key: str) -> str:
    """Return the canonical form of *key*.

    Section and variable names are case-insensitive and folded to lower case;
    the optional subsection keeps its case.

    Examples
    --------
    >>> normalize_key("Core.Bare")
    'core.bare'
    >>> normalize_key("Remote.Origin.URL")
    'remote.Origin.url'
    """

    section, subsection, name = split_key(key)
    if subsection is None:
        return f"{section}.{name}"
    return f"{section}.{subsection}.{name}"


def split_key(key: str) -> tuple[str, str | None, str]:
    """Split *key* into ``(section, subsection, name)`` with case folding applied.

    Section names are alphanumeric (``-`` allowed), variable names start with
    a letter, and subsections may hold anything but line breaks and NUL.

    Examples
    --------
    >>> split_key("Remote.Origin.URL")
    ('remote', 'Origin', 'url')
    >>> split_key("my section.key")
    Traceback (most recent call last):
    ...
    lib_scoped_config.domain.errors.InvalidKey: Invalid section name in configuration key 'my section.key'
    """

    if not key:
        raise ValueError("Configuration key must not be empty")
    first = key.find(".")
    last = key.rfind(".")
    if first <= 0 or last == len(key) - 1:
        raise InvalidKey(f"Invalid configuration key {key!r}; expected 'section.name'")
    section = key[:first]
    name = key[last + 1 :]
    subsection = key[first + 1 : last] if last > first else None
    if _SECTION_NAME.fullmatch(section) is None:
        raise InvalidKey(f"Invalid section name in configuration key {key!r}")
    if _VARIABLE_NAME.fullmatch(name) is None:
        raise InvalidKey(f"Invalid variable name in configuration key {key!r}")
    if subsection is not None and _SUBSECTION_FORBIDDEN.search(subsection):
        raise InvalidKey(f"Invalid subsection in configuration key {key!r}")
    return section.lower(), subsection, name.lower()


def _parse_bool(raw: str | None, key: str) -> bool:
    if raw is None:
        return True
    lowered = raw.strip().lower()
    if lowered in _TRUE_WORDS:
        return True
    if lowered in _FALSE_WORDS:
        return False
    raise InvalidValue(key, raw, ValueKind.BOOL.value)


def _parse_int(raw: str | None, key: str, kind: ValueKind) -> int:
    if raw is None:
        raise InvalidValue(key, raw, kind.value, "no value")
    match = _INT_PATTERN.match(raw.strip())
    if match is None:
        raise InvalidValue(key, raw, kind.value)
    number, suffix = match.groups()
    value = int(number) * _SUFFIX_FACTORS[suffix.lower()]
    _check_range(value, key, kind)
    return value


def _check_range(value: int, key: str, kind: ValueKind) -> None:
    low, high = _BOUNDS[kind]
    if not low <= value <= high:
        raise InvalidValue(key, value, kind.value, "out of range")
