"""Invocation Adapter - one call, observed uniformly in callback or awaitable convention.

Invariants:
    - A trailing positional callable that is not a class is the completion callback;
      it is removed before the target is called and receives (error, value)
    - Without a callback the caller gets an awaitable that returns the value or raises
      the ORIGINAL exception object (no wrapping, no translation)
    - Exactly one underlying call per invocation: no retry, no timeout, no serialization
    - The target is always called without a callback; awaitable results are awaited
    - Exceptions raised by the callback itself propagate out of the returned task

Design Decisions:
    - Single async path (_settle) shared by both conventions: the callback branch only
      schedules it as a task and routes the outcome, no per-convention business logic
    - Classes are excluded from callback detection: classmethod operations receive cls
      as the only positional argument when called with no other arguments
"""

import asyncio
import functools
import inspect
import logging
from typing import Any, Awaitable, Callable

logger = logging.getLogger(__name__)

Callback = Callable[[BaseException | None, Any], Any]
Transform = Callable[[Any], Any]


def split_callback(args: tuple) -> tuple[tuple, Callback | None]:
    """Separate a trailing completion callback from positional arguments."""
    if args and callable(args[-1]) and not isinstance(args[-1], type):
        return args[:-1], args[-1]
    return args, None


def invoke(
    target: Callable[..., Any],
    args: tuple = (),
    kwargs: dict[str, Any] | None = None,
    transform: Transform | None = None,
) -> Awaitable[Any]:
    """Call target once; deliver the (transformed) outcome in the caller's convention.

    Returns a coroutine for awaitable-convention callers, or an asyncio.Task
    that completes after the callback has run for callback-convention callers.
    """
    call_args, callback = split_callback(tuple(args))
    settled = _settle(target, call_args, kwargs or {}, transform)
    if callback is None:
        return settled
    return asyncio.ensure_future(_deliver(settled, callback))


async def _settle(
    target: Callable[..., Any],
    args: tuple,
    kwargs: dict[str, Any],
    transform: Transform | None,
) -> Any:
    result = target(*args, **kwargs)
    if inspect.isawaitable(result):
        result = await result
    if transform is not None:
        result = transform(result)
    return result


async def _deliver(settled: Awaitable[Any], callback: Callback) -> None:
    try:
        value = await settled
    except Exception as exc:
        logger.debug(f"Routing {type(exc).__name__} to completion callback")
        callback(exc, None)
        return
    callback(None, value)


def operation(func: Callable[..., Any]) -> Callable[..., Awaitable[Any]]:
    """Make an async function (or method) callable in either convention."""

    @functools.wraps(func)
    def dual(*args: Any, **kwargs: Any) -> Awaitable[Any]:
        return invoke(func, args, kwargs)

    return dual
