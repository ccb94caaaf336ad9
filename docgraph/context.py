from __future__ import annotations

import asyncio
from typing import Any, Awaitable, TypeVar

from pydantic import BaseModel, ConfigDict, field_validator

from docgraph.errors import RequestCancelledError

T = TypeVar("T")


class RequestContext(BaseModel):
    """Deadline and cancellation signal applied to every remote call of an operation.

    `timeout` bounds each remote call in seconds. Setting `cancel` aborts
    whatever call is in flight and any that follow.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    timeout: float | None = None
    cancel: asyncio.Event | None = None

    @field_validator("timeout")
    @classmethod
    def timeout_must_be_positive(cls, value: float | None) -> float | None:
        if value is not None and value <= 0:
            raise ValueError("timeout must be > 0")
        return value

    @property
    def cancelled(self) -> bool:
        return self.cancel is not None and self.cancel.is_set()


async def run_remote(ctx: RequestContext | None, call: Awaitable[T], operation: str, **details: Any) -> T:
    """Await a remote call under `ctx`.

    Raises RequestCancelledError when the deadline passes or the cancel
    signal fires first. Cancelling the calling task is not intercepted.
    """
    if ctx is None:
        return await call

    task = asyncio.ensure_future(call)
    if ctx.cancelled:
        task.cancel()
        await asyncio.gather(task, return_exceptions=True)
        raise RequestCancelledError(operation, "cancelled before the call started", **details)

    waiters: set[asyncio.Future] = {task}
    cancel_waiter: asyncio.Future | None = None
    if ctx.cancel is not None:
        cancel_waiter = asyncio.ensure_future(ctx.cancel.wait())
        waiters.add(cancel_waiter)

    try:
        done, _ = await asyncio.wait(waiters, timeout=ctx.timeout, return_when=asyncio.FIRST_COMPLETED)
    finally:
        if cancel_waiter is not None and not cancel_waiter.done():
            cancel_waiter.cancel()
        if not task.done():
            task.cancel()
            await asyncio.gather(task, return_exceptions=True)

    if task in done:
        return task.result()
    if cancel_waiter is not None and cancel_waiter in done:
        raise RequestCancelledError(operation, "cancelled", **details)
    raise RequestCancelledError(operation, f"deadline of {ctx.timeout}s exceeded", **details)
