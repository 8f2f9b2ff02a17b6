"""Read-side value objects: configuration entries and signatures.

Purpose
-------
Carry the results of lookups out of the aggregate handle. Both types are frozen
dataclasses so callers can hash, compare, and share them without defensive
copies; a write is always expressed against a store, never by mutating an
:class:`Entry`.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Generic, TypeVar

from .scope import Scope

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class Entry(Generic[T]):
    """A single configuration variable as seen in one scope.

    Attributes
    ----------
    name:
        Normalised dotted name (``core.bare``, ``remote.origin.url``).
    value:
        Decoded value; ``str`` for enumeration and search results.
    scope:
        The scope whose store supplied the value.

    Examples
    --------
    >>> entry = Entry("core.bare", True, Scope.LOCAL)
    >>> entry.value, entry.scope.value
    (True, 'local')
    """

    name: str
    value: T
    scope: Scope


@dataclass(frozen=True, slots=True)
class Signature:
    """Identity derived from ``user.name`` / ``user.email`` plus a timestamp."""

    name: str
    email: str
    when: datetime

    def __str__(self) -> str:
        return f"{self.name} <{self.email}>"
