"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
jsonrequest, a product of Garudex Labs

Request contexts: cooperative cancellation and deadlines.

A :class:`RequestContext` is handed to every call. It can be cancelled
explicitly or expire at a deadline, and derived contexts inherit both
from their parent::

    async with RequestContext(timeout=10) as ctx:
        user = await jsonrequest.get(url, User, context=ctx)
        short = ctx.with_timeout(0.5)
        await jsonrequest.delete(other_url, context=short)
"""

from __future__ import annotations

import asyncio
import inspect
import time
import weakref
from typing import Awaitable, Optional, TypeVar

from jsonrequest.exceptions import (
    ContextCancelledError,
    ContextError,
    DeadlineExceededError,
)

T = TypeVar("T")


class RequestContext:
    """Cancellation and deadline carrier for one or more requests.

    Args:
        timeout: Seconds from now until the context expires. ``None`` means
            no deadline.
        parent: Context to inherit cancellation and deadline from.
    """

    def __init__(
        self,
        timeout: Optional[float] = None,
        parent: Optional[RequestContext] = None,
    ) -> None:
        if timeout is not None and timeout < 0:
            raise ValueError(f"timeout must be non-negative, got {timeout}")

        deadline = time.monotonic() + timeout if timeout is not None else None
        if parent is not None and parent.deadline is not None:
            deadline = parent.deadline if deadline is None else min(deadline, parent.deadline)

        self._deadline = deadline
        self._cancel_error: Optional[ContextError] = None
        self._event = asyncio.Event()
        self._children: weakref.WeakSet[RequestContext] = weakref.WeakSet()

        if parent is not None:
            parent._children.add(self)
            if parent._cancel_error is not None:
                self._set_cancelled(parent._cancel_error)

    @classmethod
    def background(cls) -> RequestContext:
        """A context that is never cancelled and has no deadline."""
        return cls()

    def with_timeout(self, timeout: float) -> RequestContext:
        """Derive a child context that expires after ``timeout`` seconds."""
        return RequestContext(timeout=timeout, parent=self)

    # -- State -------------------------------------------------------------

    @property
    def deadline(self) -> Optional[float]:
        """Deadline on the ``time.monotonic()`` clock, if any."""
        return self._deadline

    @property
    def cancelled(self) -> bool:
        return self._cancel_error is not None

    @property
    def done(self) -> bool:
        return self.error() is not None

    def remaining(self) -> Optional[float]:
        """Seconds left before the deadline, or ``None`` without one."""
        if self._deadline is None:
            return None
        return max(0.0, self._deadline - time.monotonic())

    def error(self) -> Optional[ContextError]:
        """Why the context finished, or ``None`` while it is still live."""
        if self._cancel_error is not None:
            return self._cancel_error
        if self._deadline is not None and time.monotonic() >= self._deadline:
            return DeadlineExceededError("context deadline exceeded")
        return None

    # -- Cancellation ------------------------------------------------------

    def cancel(self, reason: Optional[str] = None) -> None:
        """Cancel this context and every context derived from it."""
        if self._cancel_error is not None:
            return
        self._set_cancelled(ContextCancelledError(reason or "context canceled"))

    def _set_cancelled(self, error: ContextError) -> None:
        self._cancel_error = error
        self._event.set()
        for child in list(self._children):
            child._set_cancelled(error)

    def __enter__(self) -> RequestContext:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.cancel()

    async def __aenter__(self) -> RequestContext:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        self.cancel()

    # -- Execution ---------------------------------------------------------

    async def run(self, awaitable: Awaitable[T]) -> T:
        """Await ``awaitable`` unless the context finishes first.

        When the context is cancelled or its deadline passes, the pending
        awaitable is cancelled and allowed to unwind before the context
        error is raised.

        Raises:
            ContextCancelledError: If the context was cancelled.
            DeadlineExceededError: If the deadline passed.
        """
        err = self.error()
        if err is not None:
            if inspect.iscoroutine(awaitable):
                awaitable.close()
            raise err

        task = asyncio.ensure_future(awaitable)
        waiter = asyncio.ensure_future(self._event.wait())
        try:
            done, _ = await asyncio.wait(
                {task, waiter},
                timeout=self.remaining(),
                return_when=asyncio.FIRST_COMPLETED,
            )
        except asyncio.CancelledError:
            task.cancel()
            waiter.cancel()
            raise
        waiter.cancel()

        if task in done:
            return task.result()

        task.cancel()
        await asyncio.gather(task, return_exceptions=True)
        # asyncio.wait may wake a clock tick before the deadline
        raise self._cancel_error or DeadlineExceededError("context deadline exceeded")
