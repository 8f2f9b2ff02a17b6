"""Precedence tiers for backing stores.

Each :class:`Scope` names one physical configuration file. Reads consult the
scopes in :func:`Scope.ordered` order and stop at the first match, so the
enum's declaration order *is* the precedence order.
"""

from __future__ import annotations

from enum import Enum
from typing import Iterator


class Scope(Enum):
    """Configuration scope, declared from highest to lowest precedence.

    Examples
    --------
    >>> [scope.value for scope in Scope.ordered()]
    ['local', 'global', 'xdg', 'system']
    >>> Scope.parse("Global")
    <Scope.GLOBAL: 'global'>
    """

    LOCAL = "local"
    GLOBAL = "global"
    XDG = "xdg"
    SYSTEM = "system"

    @classmethod
    def ordered(cls) -> Iterator[Scope]:
        """Yield every scope from highest to lowest precedence."""

        return iter(cls)

    @classmethod
    def parse(cls, text: str) -> Scope:
        """Return the scope named *text* (case-insensitive)."""

        try:
            return cls(text.strip().lower())
        except ValueError as exc:
            choices = ", ".join(scope.value for scope in cls)
            raise ValueError(f"Unknown scope {text!r}; expected one of: {choices}") from exc

    @property
    def rank(self) -> int:
        """Position in the precedence order; lower wins."""

        return list(Scope).index(self)
