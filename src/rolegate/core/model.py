from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Literal, Mapping, Optional, Tuple, Union

from .errors import RuleTableError

DecisionReason = Literal["granted", "not_granted", "error"]

# role -> roles reachable through ``inherited``, excluding the role itself
InheritanceMap = Dict[str, List[str]]

_ROLE_KEYS = ("permissions", "inherited", "attributes")


@dataclass(frozen=True)
class RoleDefinition:
    """Static description of a single role.

    ``inherited`` and ``attributes`` keep their declared order: inherited
    roles are walked in that order and attributes are evaluated in that order.
    """

    permissions: Tuple[str, ...] = ()
    inherited: Tuple[str, ...] = ()
    attributes: Tuple[str, ...] = ()

    @classmethod
    def from_dict(cls, name: str, data: Mapping[str, Any] | None) -> "RoleDefinition":
        if data is None:
            return cls()
        if not isinstance(data, Mapping):
            raise RuleTableError(f"role {name!r}: definition must be a mapping")
        unknown = sorted(set(data) - set(_ROLE_KEYS))
        if unknown:
            raise RuleTableError(f"role {name!r}: unknown keys {unknown}")
        return cls(
            permissions=_str_tuple(name, "permissions", data.get("permissions")),
            inherited=_str_tuple(name, "inherited", data.get("inherited")),
            attributes=_str_tuple(name, "attributes", data.get("attributes")),
        )

    def to_dict(self) -> Dict[str, List[str]]:
        return {
            "permissions": list(self.permissions),
            "inherited": list(self.inherited),
            "attributes": list(self.attributes),
        }


RuleTable = Mapping[str, RoleDefinition]
RawRules = Mapping[str, Union[RoleDefinition, Mapping[str, Any], None]]


def _str_tuple(role: str, key: str, value: Any) -> Tuple[str, ...]:
    if value is None:
        return ()
    if key == "permissions" and isinstance(value, (set, frozenset)):
        if not all(isinstance(item, str) for item in value):
            raise RuleTableError(f"role {role!r}: {key!r} must contain non-empty strings")
        value = sorted(value)
    if isinstance(value, (str, bytes)) or not isinstance(value, (list, tuple)):
        if key == "permissions":
            raise RuleTableError(f"role {role!r}: {key!r} must be a list, tuple or set of strings")
        raise RuleTableError(f"role {role!r}: {key!r} must be an ordered list or tuple of strings")
    out: List[str] = []
    for item in value:
        if not isinstance(item, str) or not item:
            raise RuleTableError(f"role {role!r}: {key!r} must contain non-empty strings")
        # duplicates collapse, first occurrence wins
        if item not in out:
            out.append(item)
    return tuple(out)


def build_rule_table(raw: RawRules) -> Dict[str, RoleDefinition]:
    """Normalize a raw rule mapping (e.g. parsed JSON) into a rule table."""
    if not isinstance(raw, Mapping):
        raise RuleTableError("rules must be a mapping of role name to role definition")
    table: Dict[str, RoleDefinition] = {}
    for name, data in raw.items():
        if not isinstance(name, str) or not name:
            raise RuleTableError(f"role names must be non-empty strings, got {name!r}")
        if isinstance(data, RoleDefinition):
            table[name] = data
        else:
            table[name] = RoleDefinition.from_dict(name, data)
    return table


@dataclass(frozen=True)
class Decision:
    """Outcome of a single access check."""

    allowed: bool
    permission: str
    reason: DecisionReason
    roles: Tuple[str, ...] = ()
    active_roles: Tuple[str, ...] = ()
    error: Optional[BaseException] = field(default=None, compare=False)

    @property
    def effect(self) -> str:
        if self.error is not None:
            return "error"
        return "allow" if self.allowed else "deny"


__all__ = [
    "Decision",
    "DecisionReason",
    "InheritanceMap",
    "RawRules",
    "RoleDefinition",
    "RuleTable",
    "build_rule_table",
]
