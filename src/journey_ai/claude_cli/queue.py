"""In-memory priority queue with a concurrency gate for Claude CLI requests."""

from __future__ import annotations

import asyncio
import heapq
import itertools
import logging
import time

from journey_ai.claude_cli.models import (
    ClaudeCliRequest,
    ClaudeCliResponse,
    FailureClass,
    QueueClearedError,
    QueueItem,
    QueueStatus,
)
from journey_ai.claude_cli.retry import RetryController

logger = logging.getLogger(__name__)


class RequestQueue:
    """Dispatches pending requests into at most ``max_concurrent`` slots.

    All bookkeeping runs on the event loop thread: the heap and the active
    counter are only touched from ``enqueue``, ``clear`` and dispatch callbacks.
    Pending items are ordered by priority (higher first), then by enqueue order.
    """

    def __init__(self, *, retry: RetryController, max_concurrent: int) -> None:
        if max_concurrent <= 0:
            raise ValueError("max_concurrent must be > 0.")
        self.retry = retry
        self.max_concurrent = max_concurrent
        self._heap: list[tuple[tuple[int, int], QueueItem]] = []
        self._sequence = itertools.count(1)
        self._active_requests = 0
        self._tasks: set[asyncio.Task[None]] = set()

    def enqueue(self, request: ClaudeCliRequest) -> asyncio.Future[ClaudeCliResponse]:
        """Add a request and return the future its response will settle."""

        loop = asyncio.get_running_loop()
        item = QueueItem(
            sequence=next(self._sequence),
            request=request,
            enqueued_at=time.time(),
            future=loop.create_future(),
        )
        item.future.add_done_callback(lambda _: self._forget_if_cancelled(item))
        heapq.heappush(self._heap, (item.sort_key, item))
        logger.debug(
            "Enqueued Claude CLI request seq=%d priority=%d pending=%d",
            item.sequence,
            request.priority,
            len(self._heap),
        )
        self._dispatch()
        return item.future

    def clear(self) -> int:
        """Reject every pending request with ``QueueClearedError``; return the count."""

        items = [item for _, item in self._heap if not item.future.done()]
        self._heap.clear()
        for item in items:
            item.future.set_exception(QueueClearedError())
        if items:
            logger.info("Cleared %d pending Claude CLI requests", len(items))
        return len(items)

    def status(self) -> QueueStatus:
        pending = sum(1 for _, item in self._heap if not item.future.done())
        return QueueStatus(queue_length=pending, active_requests=self._active_requests)

    async def drain(self) -> None:
        """Wait until every dispatched request has completed."""

        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    def _dispatch(self) -> None:
        while self._active_requests < self.max_concurrent and self._heap:
            _, item = heapq.heappop(self._heap)
            if item.future.done():
                continue
            self._active_requests += 1
            logger.debug(
                "Dispatching Claude CLI request seq=%d waited=%.3fs active=%d",
                item.sequence,
                time.time() - item.enqueued_at,
                self._active_requests,
            )
            task = asyncio.create_task(self._run_item(item), name=f"claude-cli-{item.sequence}")
            self._tasks.add(task)
            task.add_done_callback(self._tasks.discard)

    async def _run_item(self, item: QueueItem) -> None:
        try:
            response = await self.retry.execute(item.request)
        except asyncio.CancelledError:
            item.future.cancel()
            raise
        except Exception as error:
            logger.exception(
                "Unexpected failure executing Claude CLI request seq=%d",
                item.sequence,
            )
            response = ClaudeCliResponse(
                success=False,
                error=f"Unexpected Claude CLI failure: {error}",
                failure_class=FailureClass.INTERNAL_ERROR,
            )
        finally:
            self._active_requests -= 1

        _settle(item.future, response)
        self._dispatch()

    def _forget_if_cancelled(self, item: QueueItem) -> None:
        if not item.future.cancelled():
            return
        remaining = [entry for entry in self._heap if entry[1] is not item]
        if len(remaining) != len(self._heap):
            self._heap = remaining
            heapq.heapify(self._heap)


def _settle(future: asyncio.Future[ClaudeCliResponse], response: ClaudeCliResponse) -> None:
    if future.done():
        return
    future.set_result(response)
