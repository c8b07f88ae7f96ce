from __future__ import annotations

import asyncio
import inspect
import threading
from typing import Any, Awaitable, Optional, TypeVar, Union

T = TypeVar("T")


async def _await_compat(x: Awaitable[T]) -> T:
    return await x


async def maybe_await(x: Union[T, Awaitable[T]]) -> T:
    """Await *x* if it is awaitable, otherwise return it unchanged."""
    if inspect.isawaitable(x):
        return await _await_compat(x)
    return x  # type: ignore[return-value]


def run_coroutine_blocking(coro: Awaitable[T], timeout: Optional[float] = None) -> T:
    """Run *coro* to completion from synchronous code.

    Without a running loop in this thread the coroutine runs via
    ``asyncio.run``. Inside a running loop it is executed on a fresh loop in a
    helper thread, and this call blocks until it finishes.
    """
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return asyncio.run(_await_compat(coro))

    result: dict[str, Any] = {}

    def _runner() -> None:
        try:
            result["value"] = asyncio.run(_await_compat(coro))
        except BaseException as e:  # re-raised in the calling thread
            result["error"] = e

    th = threading.Thread(target=_runner, name="rolegate-sync-bridge", daemon=True)
    th.start()
    th.join(timeout)
    if th.is_alive():
        raise TimeoutError("rolegate: synchronous evaluation timed out")
    if "error" in result:
        raise result["error"]
    return result["value"]


__all__ = ["maybe_await", "run_coroutine_blocking"]
