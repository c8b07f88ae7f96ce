from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Awaitable, Callable, Dict, Iterable, List, TypeVar, Union

from .model import InheritanceMap

C = TypeVar("C")

AttributePredicate = Callable[[C], Union[bool, Awaitable[bool]]]
ErrorListener = Callable[[BaseException], Any]


class RuleProvider(ABC):
    """Answers "what permissions/attributes/inherited roles does this role have".

    Implementations must keep the empty-versus-error contract: permission and
    attribute lookups return an empty list for unknown roles, while
    :meth:`get_user_roles` raises :class:`~rolegate.core.errors.UnknownRoleError`.
    """

    @abstractmethod
    def get_permissions(self, role: str) -> List[str]:
        """Direct permissions of *role*, or ``[]`` when the role is unknown."""

    @abstractmethod
    def get_attributes(self, role: str) -> List[str]:
        """Direct attribute names of *role*, or ``[]`` when the role is unknown."""

    @abstractmethod
    def get_user_roles(self, roles: Iterable[str]) -> Dict[str, List[str]]:
        """Map each of *roles* to ``[role, *inherited_closure]``."""

    def get_inheritance_map(self) -> InheritanceMap:
        """Full role -> inherited closure map, for introspection and tooling.

        Optional: the evaluator never calls it, so backends that resolve
        roles lazily may leave it unimplemented.

        Raises:
            NotImplementedError: the provider cannot enumerate its roles.
        """
        raise NotImplementedError(f"{type(self).__name__} does not expose an inheritance map")


class DecisionLogSink(ABC):
    @abstractmethod
    def log(self, payload: Dict[str, Any]) -> None | Awaitable[None]: ...


class MetricsSink(ABC):
    @abstractmethod
    def inc(self, name: str, labels: Dict[str, str] | None = None) -> None: ...

    def observe(
        self, name: str, value: float, labels: Dict[str, str] | None = None
    ) -> None:  # pragma: no cover - optional
        return None


__all__ = [
    "AttributePredicate",
    "DecisionLogSink",
    "ErrorListener",
    "MetricsSink",
    "RuleProvider",
]
