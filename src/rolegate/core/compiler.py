from __future__ import annotations

import logging
from typing import Iterator, List, Set, Tuple

from .errors import UnknownRoleError
from .model import InheritanceMap, RuleTable

logger = logging.getLogger("rolegate.compiler")


def expand_role(rules: RuleTable, role: str) -> List[str]:
    """Return every role reachable from *role* through ``inherited``.

    Depth-first, in first-discovery order. *role* itself is never part of the
    result, and a role reached through several paths (diamonds, cycles) is
    listed once.
    """
    if role not in rules:
        raise UnknownRoleError(role)

    closure: List[str] = []
    seen: Set[str] = {role}
    # explicit stack instead of recursion: deep chains must not hit the recursion limit
    stack: List[Tuple[str, Iterator[str]]] = [(role, iter(rules[role].inherited))]
    while stack:
        parent, children = stack[-1]
        for child in children:
            if child not in rules:
                raise UnknownRoleError(child, role=parent)
            if child in seen:
                continue
            seen.add(child)
            closure.append(child)
            stack.append((child, iter(rules[child].inherited)))
            break
        else:
            stack.pop()
    return closure


def compile_inheritance(rules: RuleTable) -> InheritanceMap:
    """Compile the inheritance closure of every role in *rules*.

    Raises:
        UnknownRoleError: if any ``inherited`` entry names an undefined role.
    """
    compiled: InheritanceMap = {}
    for role in rules:
        compiled[role] = expand_role(rules, role)
    logger.debug(
        "rolegate: compiled inheritance for %d roles (%d edges)",
        len(compiled),
        sum(len(v) for v in compiled.values()),
    )
    return compiled


__all__ = ["compile_inheritance", "expand_role"]
