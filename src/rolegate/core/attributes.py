from __future__ import annotations

from typing import Awaitable, Dict, Generic, List, Optional, TypeVar, Union

from .errors import UndefinedAttributeError
from .helpers import maybe_await
from .ports import AttributePredicate

C = TypeVar("C")


class AttributeRegistry(Generic[C]):
    """Named attribute predicates evaluated against a request context.

    A predicate receives the context and returns ``bool`` or an awaitable
    resolving to ``bool``. Registration is validated eagerly: names must be
    non-empty strings and predicates must be callable.

    Example::

        attrs = AttributeRegistry[dict]()
        attrs.set("is_owner", lambda ctx: ctx["user"] == ctx["owner"])
    """

    def __init__(self) -> None:
        self._predicates: Dict[str, AttributePredicate[C]] = {}

    def set(self, name: str, predicate: AttributePredicate[C]) -> "AttributeRegistry[C]":
        """Register or replace the predicate for *name*. Returns ``self``."""
        if not isinstance(name, str) or not name:
            raise ValueError("attribute name must be a non-empty string")
        if not callable(predicate):
            raise TypeError(f"predicate for attribute {name!r} must be callable")
        self._predicates[name] = predicate
        return self

    def remove(self, name: str) -> Optional[AttributePredicate[C]]:
        """Unregister *name* and return its predicate, or ``None`` if absent."""
        return self._predicates.pop(name, None)

    def get(self, name: str) -> Optional[AttributePredicate[C]]:
        return self._predicates.get(name)

    def names(self) -> List[str]:
        return list(self._predicates)

    def __contains__(self, name: object) -> bool:
        return name in self._predicates

    def __len__(self) -> int:
        return len(self._predicates)

    def validate(self, name: str, context: C) -> Union[bool, Awaitable[bool]]:
        """Call the predicate registered under *name* with *context*.

        The raw predicate result is returned, so async predicates yield an
        awaitable. Use :meth:`validate_async` to always get a ``bool``.

        Raises:
            UndefinedAttributeError: if nothing is registered under *name*.
        """
        predicate = self._predicates.get(name)
        if predicate is None:
            raise UndefinedAttributeError(name)
        return predicate(context)

    async def validate_async(self, name: str, context: C) -> bool:
        return bool(await maybe_await(self.validate(name, context)))


__all__ = ["AttributeRegistry"]
