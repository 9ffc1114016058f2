# user_service/core/domain/context.py
import asyncio
import time
from typing import Awaitable, Optional, TypeVar

from .exceptions import DeadlineExceededError, OperationCancelledError

T = TypeVar("T")


class RequestContext:
    """
    Explicit cancellation/deadline handle threaded from the transport layer
    through the use case down to every repository call.

    Usage:
        ctx = RequestContext.with_timeout(30)
        user = await repo.get_by_id(ctx, 42)

    A repository wraps its I/O in `await ctx.run(...)` so that a cancelled or
    expired context aborts the in-flight call instead of letting it complete
    silently.
    """

    def __init__(self, deadline: Optional[float] = None):
        # Deadline is expressed on the time.monotonic() clock.
        self._deadline = deadline
        self._cancelled = asyncio.Event()

    @classmethod
    def background(cls) -> "RequestContext":
        """A context that never expires on its own (may still be cancelled)."""
        return cls()

    @classmethod
    def with_timeout(cls, seconds: float) -> "RequestContext":
        return cls(deadline=time.monotonic() + seconds)

    @property
    def deadline(self) -> Optional[float]:
        return self._deadline

    def remaining(self) -> Optional[float]:
        """Seconds left before the deadline, None when there is no deadline."""
        if self._deadline is None:
            return None
        return max(0.0, self._deadline - time.monotonic())

    def cancel(self) -> None:
        self._cancelled.set()

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    @property
    def expired(self) -> bool:
        return self._deadline is not None and time.monotonic() >= self._deadline

    def raise_if_done(self) -> None:
        """
        Raises:
            OperationCancelledError: If cancel() was called.
            DeadlineExceededError: If the deadline has passed.
        """
        if self.cancelled:
            raise OperationCancelledError()
        if self.expired:
            raise DeadlineExceededError()

    async def run(self, awaitable: Awaitable[T]) -> T:
        """
        Awaits `awaitable` unless the context is cancelled or expires first,
        in which case the underlying task is cancelled and the matching
        domain error is raised.
        """
        if self.cancelled or self.expired:
            if asyncio.iscoroutine(awaitable):
                awaitable.close()
            self.raise_if_done()

        task = asyncio.ensure_future(awaitable)
        waiter = asyncio.ensure_future(self._cancelled.wait())
        try:
            done, _ = await asyncio.wait(
                {task, waiter},
                timeout=self.remaining(),
                return_when=asyncio.FIRST_COMPLETED,
            )
        except asyncio.CancelledError:
            # The caller itself was cancelled; do not leave the I/O running.
            task.cancel()
            raise
        finally:
            waiter.cancel()

        if task in done:
            return task.result()

        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass

        if self.cancelled:
            raise OperationCancelledError()
        raise DeadlineExceededError()
