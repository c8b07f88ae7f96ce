from __future__ import annotations

from typing import Optional


class RolegateError(Exception):
    """Base class for all rolegate errors."""


class RuleTableError(RolegateError, ValueError):
    """Raised when raw rules cannot be turned into a rule table."""


class UnknownRoleError(RolegateError, KeyError):
    """A role name that is not defined in the rule table.

    ``role`` is the role whose ``inherited`` list referenced the missing name,
    or ``None`` when the missing name was passed in directly by a caller.
    """

    def __init__(self, missing: str, role: Optional[str] = None) -> None:
        self.missing = missing
        self.role = role
        super().__init__(missing)

    def __str__(self) -> str:
        if self.role is None:
            return f"role {self.missing!r} is not defined"
        return f"role {self.missing!r} is not defined but is inherited by {self.role!r}"


class UndefinedAttributeError(RolegateError, LookupError):
    """An attribute referenced by a role has no registered predicate."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"attribute {name!r} has not been registered")


__all__ = [
    "RolegateError",
    "RuleTableError",
    "UnknownRoleError",
    "UndefinedAttributeError",
]
