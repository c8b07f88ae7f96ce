from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Dict, Iterable, Iterator, List, Mapping, Optional, Tuple

from ..core.compiler import compile_inheritance
from ..core.errors import UnknownRoleError
from ..core.model import InheritanceMap, RawRules, RoleDefinition, build_rule_table
from ..core.ports import RuleProvider

logger = logging.getLogger("rolegate.providers")


class StaticRuleProvider(RuleProvider):
    """In-memory rule provider over a JSON-shaped role mapping.

    The inheritance closure of every role is compiled once in the
    constructor, so a table that inherits from an undefined role never
    produces a provider::

        provider = StaticRuleProvider({
            "user": {"permissions": ["exist"]},
            "reader": {"permissions": ["read"], "inherited": ["user"]},
        })
        provider.get_user_roles(["reader"])  # {"reader": ["reader", "user"]}

    Raises:
        RuleTableError: the raw mapping is malformed.
        UnknownRoleError: an ``inherited`` entry names an undefined role.
    """

    def __init__(self, rules: RawRules) -> None:
        table = build_rule_table(rules)
        inheritance = compile_inheritance(table)
        self._rules: Mapping[str, RoleDefinition] = MappingProxyType(table)
        self._inheritance: Dict[str, Tuple[str, ...]] = {
            role: tuple(closure) for role, closure in inheritance.items()
        }
        logger.debug("rolegate: provider ready with %d roles", len(table))

    # --- alternate constructors --------------------------------------------

    @classmethod
    def from_text(
        cls,
        text: str,
        *,
        filename: Optional[str] = None,
        content_type: Optional[str] = None,
        validate_schema: bool = False,
    ) -> "StaticRuleProvider":
        from ..store.rules_loader import parse_rules_text

        data = parse_rules_text(text, filename=filename, content_type=content_type)
        if validate_schema:
            from ..dsl.validate import validate_rules

            validate_rules(data)
        return cls(data)

    @classmethod
    def from_file(cls, path: str, *, validate_schema: bool = False) -> "StaticRuleProvider":
        from ..store.rules_loader import load_rules_file

        data = load_rules_file(path)
        if validate_schema:
            from ..dsl.validate import validate_rules

            validate_rules(data)
        return cls(data)

    # --- RuleProvider -------------------------------------------------------

    def get_permissions(self, role: str) -> List[str]:
        definition = self._rules.get(role)
        if definition is None:
            return []
        return list(definition.permissions)

    def get_attributes(self, role: str) -> List[str]:
        definition = self._rules.get(role)
        if definition is None:
            return []
        return list(definition.attributes)

    def get_user_roles(self, roles: Iterable[str]) -> Dict[str, List[str]]:
        out: Dict[str, List[str]] = {}
        for role in roles:
            closure = self._inheritance.get(role)
            if closure is None:
                raise UnknownRoleError(role)
            out[role] = [role, *closure]
        return out

    def get_inheritance_map(self) -> InheritanceMap:
        return {role: list(closure) for role, closure in self._inheritance.items()}

    # --- extras ------------------------------------------------------------

    def get_inherited_permissions(self, role: str) -> List[str]:
        """Permissions of *role* and everything it inherits, without duplicates.

        Attributes are not evaluated here; this is the static upper bound.
        """
        return _collect(self._with_closure(role), self.get_permissions)

    def get_inherited_attributes(self, role: str) -> List[str]:
        return _collect(self._with_closure(role), self.get_attributes)

    def get_role(self, role: str) -> Optional[RoleDefinition]:
        return self._rules.get(role)

    @property
    def rules(self) -> Mapping[str, RoleDefinition]:
        return self._rules

    @property
    def roles(self) -> Tuple[str, ...]:
        return tuple(self._rules)

    def __contains__(self, role: object) -> bool:
        return role in self._rules

    def __len__(self) -> int:
        return len(self._rules)

    def __iter__(self) -> Iterator[str]:
        return iter(self._rules)

    def _with_closure(self, role: str) -> List[str]:
        closure = self._inheritance.get(role)
        if closure is None:
            return []
        return [role, *closure]


def _collect(roles: Iterable[str], lookup) -> List[str]:
    out: Dict[str, None] = {}
    for role in roles:
        for item in lookup(role):
            out.setdefault(item)
    return list(out)


__all__ = ["StaticRuleProvider"]
