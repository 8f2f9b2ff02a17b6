"""Public package surface for ``lib_scoped_config``.

``lib_scoped_config`` layers the local, global, xdg, and system configuration
files of a git-style configuration family under one handle. Reads resolve by
scope precedence against an immutable snapshot; writes target exactly one
scope. The stable API is re-exported here so callers only ever need
``import lib_scoped_config``.
"""

from __future__ import annotations

from .adapters.environment.default import DefaultAccountProvider
from .adapters.locations.default import DefaultLocationResolver
from .adapters.stores.file import FileStore
from .adapters.stores.memory import MemoryStore
from .application.aggregate import Configuration, ScopedView, open_scoped_view
from .application.codec import ValueKind
from .application.signature import build_signature
from .application.snapshot import Snapshot
from .core import open_configuration
from .domain.entry import Entry, Signature
from .domain.errors import (
    ConfigError,
    HandleReleased,
    InvalidFormat,
    InvalidKey,
    InvalidValue,
    KeyNotFound,
    MissingConfiguration,
    NotFound,
    ScopeNotFound,
    StoreLocked,
    UnsupportedType,
)
from .domain.scope import Scope
from .observability import bind_trace_id, get_logger
from .testing import StubConfiguration

__all__ = [
    "ConfigError",
    "Configuration",
    "DefaultAccountProvider",
    "DefaultLocationResolver",
    "Entry",
    "FileStore",
    "HandleReleased",
    "InvalidFormat",
    "InvalidKey",
    "InvalidValue",
    "KeyNotFound",
    "MemoryStore",
    "MissingConfiguration",
    "NotFound",
    "Scope",
    "ScopeNotFound",
    "ScopedView",
    "Signature",
    "Snapshot",
    "StoreLocked",
    "StubConfiguration",
    "UnsupportedType",
    "ValueKind",
    "bind_trace_id",
    "build_signature",
    "get_logger",
    "open_configuration",
    "open_scoped_view",
]
