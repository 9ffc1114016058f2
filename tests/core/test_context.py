# tests/core/test_context.py
import asyncio

import pytest

from user_service.core.domain.context import RequestContext
from user_service.core.domain.exceptions import DeadlineExceededError, OperationCancelledError


@pytest.mark.asyncio
class TestRequestContext:

    async def test_background_has_no_deadline(self):
        ctx = RequestContext.background()
        assert ctx.deadline is None
        assert ctx.remaining() is None
        assert not ctx.expired
        ctx.raise_if_done()

    async def test_run_returns_result(self):
        ctx = RequestContext.with_timeout(5)

        async def work():
            return 42

        assert await ctx.run(work()) == 42

    async def test_run_raises_on_deadline(self):
        """
        Scenario: The awaited call outlives the deadline.
        Expected: DeadlineExceededError and the call is cancelled.
        """
        ctx = RequestContext.with_timeout(0.05)
        finished = asyncio.Event()

        async def slow():
            await asyncio.sleep(5)
            finished.set()

        with pytest.raises(DeadlineExceededError):
            await ctx.run(slow())
        assert not finished.is_set()

    async def test_run_raises_on_cancel(self):
        ctx = RequestContext.background()
        started = asyncio.Event()

        async def slow():
            started.set()
            await asyncio.sleep(5)

        async def cancel_soon():
            await started.wait()
            ctx.cancel()

        canceller = asyncio.ensure_future(cancel_soon())
        with pytest.raises(OperationCancelledError):
            await ctx.run(slow())
        await canceller
        assert ctx.cancelled

    async def test_run_refuses_already_expired_context(self):
        ctx = RequestContext.with_timeout(0)

        async def work():
            return 1

        with pytest.raises(DeadlineExceededError):
            await ctx.run(work())

    async def test_cancel_wins_over_deadline(self):
        ctx = RequestContext.with_timeout(0)
        ctx.cancel()
        with pytest.raises(OperationCancelledError):
            ctx.raise_if_done()
