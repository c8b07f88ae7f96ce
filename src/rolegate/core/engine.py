from __future__ import annotations

import logging
import time
from typing import Any, Dict, Generic, Iterable, List, Optional, Sequence, Set, TypeVar, Union

from .attributes import AttributeRegistry
from .errors import UnknownRoleError
from .helpers import maybe_await, run_coroutine_blocking
from .model import Decision
from .ports import DecisionLogSink, ErrorListener, MetricsSink, RuleProvider

logger = logging.getLogger("rolegate.engine")

C = TypeVar("C")

RolesArg = Union[str, Iterable[str], None]


def _as_role_list(roles: RolesArg) -> List[str]:
    if roles is None:
        return []
    if isinstance(roles, str):
        return [roles]
    return list(roles)


class AccessEvaluator(Generic[C]):
    """Decides whether a set of roles grants a permission in a given context.

    A check runs three stages, each also usable on its own:

    1. :meth:`expand_roles` - the requested roles plus everything they inherit.
    2. :meth:`filter_roles_by_attributes` - drops roles whose attribute
       predicates do not all hold for the context.
    3. :meth:`collect_permissions` - direct permissions of the surviving roles.

    :meth:`check` and :meth:`evaluate` never raise: any failure inside the
    stages yields a denial, is logged on ``rolegate.engine`` and is passed to
    every registered error listener.
    """

    def __init__(
        self,
        attributes: AttributeRegistry[C],
        provider: RuleProvider,
        *,
        logger_sink: DecisionLogSink | None = None,
        metrics: MetricsSink | None = None,
        error_listeners: Sequence[ErrorListener] = (),
    ) -> None:
        self.attributes = attributes
        self.provider = provider
        self.logger_sink = logger_sink
        self.metrics = metrics
        self._error_listeners: List[ErrorListener] = list(error_listeners)

    # ----------------------------------------------------------------- errors

    def add_error_listener(self, listener: ErrorListener) -> None:
        if not callable(listener):
            raise TypeError("error listener must be callable")
        self._error_listeners.append(listener)

    def remove_error_listener(self, listener: ErrorListener) -> bool:
        try:
            self._error_listeners.remove(listener)
        except ValueError:
            return False
        return True

    # ----------------------------------------------------------------- stages

    def expand_roles(self, roles: RolesArg) -> List[str]:
        """Union of each role and its inherited closure, in discovery order.

        Raises:
            UnknownRoleError: one of *roles* is not defined.
        """
        expanded: Dict[str, None] = {}
        for chain in self.provider.get_user_roles(_as_role_list(roles)).values():
            for role in chain:
                expanded.setdefault(role)
        return list(expanded)

    async def filter_roles_by_attributes(self, roles: Iterable[str], context: C) -> List[str]:
        """Keep the roles whose attributes all hold for *context*.

        Attributes are evaluated one at a time in declared order and a role
        stops at its first failing attribute, so later predicates of that role
        are never called.

        Raises:
            UndefinedAttributeError: a role references an unregistered attribute.
        """
        active: List[str] = []
        for role in roles:
            eligible = True
            for name in self.provider.get_attributes(role):
                if not await self.attributes.validate_async(name, context):
                    eligible = False
                    break
            if eligible:
                active.append(role)
        return active

    def collect_permissions(self, roles: Iterable[str]) -> Set[str]:
        permissions: Set[str] = set()
        for role in roles:
            permissions.update(self.provider.get_permissions(role))
        return permissions

    # -------------------------------------------------------------- decisions

    async def evaluate(self, user_roles: RolesArg, permission: str, context: Optional[C] = None) -> Decision:
        roles_in: List[str] = []
        start = time.perf_counter()
        try:
            roles_in = _as_role_list(user_roles)
            roles = self.expand_roles(roles_in)
            active = await self.filter_roles_by_attributes(roles, context)  # type: ignore[arg-type]
            allowed = permission in self.collect_permissions(active)
            decision = Decision(
                allowed=allowed,
                permission=permission,
                reason="granted" if allowed else "not_granted",
                roles=tuple(roles),
                active_roles=tuple(active),
            )
        except Exception as e:
            decision = Decision(allowed=False, permission=permission, reason="error", error=e)
            await self._emit_error(e, roles_in, permission)
        elapsed = time.perf_counter() - start

        logger.debug(
            "rolegate: %s roles=%s permission=%s active=%s",
            decision.effect,
            roles_in,
            permission,
            list(decision.active_roles),
        )
        await self._record(decision, roles_in, elapsed)
        return decision

    async def check(self, user_roles: RolesArg, permission: str, context: Optional[C] = None) -> bool:
        """Return ``True`` if *user_roles* grant *permission* under *context*."""
        decision = await self.evaluate(user_roles, permission, context)
        return decision.allowed

    def evaluate_sync(self, user_roles: RolesArg, permission: str, context: Optional[C] = None) -> Decision:
        return run_coroutine_blocking(self.evaluate(user_roles, permission, context))

    def check_sync(self, user_roles: RolesArg, permission: str, context: Optional[C] = None) -> bool:
        return self.evaluate_sync(user_roles, permission, context).allowed

    # -------------------------------------------------------------- internals

    async def _emit_error(self, err: Exception, roles: List[str], permission: str) -> None:
        if isinstance(err, UnknownRoleError):
            logger.warning("rolegate: check denied for roles=%s permission=%s: %s", roles, permission, err)
        else:
            logger.error(
                "rolegate: check failed for roles=%s permission=%s", roles, permission, exc_info=err
            )
        for listener in list(self._error_listeners):
            try:
                await maybe_await(listener(err))
            except Exception:
                logger.exception("rolegate: error listener %r raised", listener)

    async def _record(self, decision: Decision, roles: List[str], elapsed: float) -> None:
        if self.logger_sink is not None:
            payload: Dict[str, Any] = {
                "roles": roles,
                "permission": decision.permission,
                "allowed": decision.allowed,
                "decision": decision.effect,
                "reason": decision.reason,
                "active_roles": list(decision.active_roles),
                "error": repr(decision.error) if decision.error is not None else None,
                "duration_ms": round(elapsed * 1000.0, 3),
            }
            try:
                await maybe_await(self.logger_sink.log(payload))
            except Exception:
                logger.exception("rolegate: decision logger failed")

        if self.metrics is not None:
            labels = {"decision": decision.effect}
            try:
                await maybe_await(self.metrics.inc("rolegate_checks_total", labels))
                observe = getattr(self.metrics, "observe", None)
                if observe is not None:
                    await maybe_await(observe("rolegate_check_seconds", elapsed, labels))
            except Exception:
                logger.exception("rolegate: metrics sink failed")


__all__ = ["AccessEvaluator"]
