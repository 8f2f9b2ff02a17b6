"""Domain-level exception hierarchy.

Purpose
-------
Expose the stable error taxonomy shared by the store adapters, the aggregate
handle, and consuming applications. The hierarchy lives in the domain layer so
outer layers may depend on it without creating cycles.

Contents
--------
* :class:`ConfigError` – umbrella base class for all library failures.
* :class:`InvalidFormat` – a backing file could not be parsed.
* :class:`InvalidValue` – a stored or supplied value does not fit its type.
* :class:`InvalidKey` – a key is not of the form ``section.name``.
* :class:`NotFound` / :class:`ScopeNotFound` / :class:`KeyNotFound` – missing
  scopes or entries on operations that require them.
* :class:`UnsupportedType` – typed access with a type outside the codec.
* :class:`MissingConfiguration` – strict signature resolution failed.
* :class:`HandleReleased` – a released handle or snapshot was used.
* :class:`StoreLocked` – another writer holds the backing file lock.

System Role
-----------
Callers catch :class:`ConfigError` to handle every library failure uniformly;
``OSError`` raised by the filesystem passes through unchanged.
"""

from __future__ import annotations


class ConfigError(Exception):
    """Base type for all exceptions emitted by ``lib_scoped_config``."""


class InvalidFormat(ConfigError):
    """Raised when a backing file cannot be parsed into entries.

    Typical Sources
    ---------------
    :class:`lib_scoped_config.adapters.stores.file.FileStore` when the
    underlying ``configparser`` rejects the file.
    """


class InvalidValue(ConfigError):
    """A value cannot be converted to or from its textual representation.

    Parameters
    ----------
    key:
        The entry name involved.
    value:
        The offending raw or typed value.
    kind:
        Name of the value kind the codec tried to apply.
    message:
        Optional detail describing why the value is invalid.
    """

    def __init__(self, key: str, value: object, kind: str, message: str | None = None) -> None:
        super().__init__(key, value, kind, message)
        self.key = key
        self.value = value
        self.kind = kind
        self.message = message

    def __str__(self) -> str:
        text = f"invalid {self.kind} value {self.value!r} for {self.key!r}"
        if self.message:
            text += f": {self.message}"
        return text


class InvalidKey(ConfigError):
    """A key does not follow the ``section.name`` convention."""


class NotFound(ConfigError):
    """A required configuration resource is missing."""


class ScopeNotFound(NotFound):
    """No backing store is attached for a scope an operation requires."""


class KeyNotFound(NotFound):
    """The entry to delete does not exist in the targeted scope."""


class UnsupportedType(ConfigError, TypeError):
    """Typed access was requested for a type the value codec does not handle.

    Raised before any store is touched, so the condition always signals a
    programming error at the call site.
    """


class MissingConfiguration(ConfigError):
    """An identity setting needed for a signature is missing or empty."""


class HandleReleased(ConfigError):
    """A configuration handle, store, or snapshot was used after release."""


class StoreLocked(ConfigError):
    """The lock file guarding a backing store is held by another writer."""
