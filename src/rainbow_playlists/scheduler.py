from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, Sequence, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")

DEFAULT_BATCH_SIZE = 8
DEFAULT_BATCH_DELAY = 0.1


class BatchScheduler:
    """Run an async worker over items in sequential, paced waves.

    At most ``batch_size`` workers are in flight at once.  Each wave must
    finish before the next starts, and ``delay`` seconds pass between
    waves (never after the last one).
    """

    def __init__(
        self,
        batch_size: int = DEFAULT_BATCH_SIZE,
        delay: float = DEFAULT_BATCH_DELAY,
        sleep: Callable[[float], Awaitable[object]] = asyncio.sleep,
    ) -> None:
        if batch_size < 1:
            raise ValueError(f"batch_size must be at least 1, got {batch_size}")
        if delay < 0:
            raise ValueError(f"delay must not be negative, got {delay}")
        self.batch_size = batch_size
        self.delay = delay
        self._sleep = sleep

    def batches(self, items: Sequence[T]) -> list[Sequence[T]]:
        return [items[start:start + self.batch_size] for start in range(0, len(items), self.batch_size)]

    async def run(self, items: Sequence[T], worker: Callable[[T], Awaitable[R]]) -> list[R]:
        results: list[R] = []
        batches = self.batches(items)
        for index, batch in enumerate(batches):
            if index:
                await self._sleep(self.delay)
            logger.debug("Processing batch %d/%d (%d items)", index + 1, len(batches), len(batch))
            results.extend(await asyncio.gather(*(worker(item) for item in batch)))
        return results
