import asyncio
import unittest

from rainbow_playlists.scheduler import BatchScheduler


class _RecordingSleep:
    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


class BatchSchedulerTests(unittest.IsolatedAsyncioTestCase):
    async def test_nine_items_run_in_two_batches_with_one_pause(self) -> None:
        sleep = _RecordingSleep()
        scheduler = BatchScheduler(batch_size=8, delay=0.1, sleep=sleep)
        in_flight = 0
        peak = 0

        async def worker(item: int) -> int:
            nonlocal in_flight, peak
            in_flight += 1
            peak = max(peak, in_flight)
            await asyncio.sleep(0)
            in_flight -= 1
            return item * 2

        results = await scheduler.run(list(range(9)), worker)

        self.assertEqual(results, [i * 2 for i in range(9)])
        self.assertEqual(sleep.delays, [0.1])
        self.assertEqual(peak, 8)
        self.assertEqual([len(batch) for batch in scheduler.batches(list(range(9)))], [8, 1])

    async def test_exactly_one_batch_has_no_pause(self) -> None:
        sleep = _RecordingSleep()
        scheduler = BatchScheduler(batch_size=8, delay=0.1, sleep=sleep)

        async def worker(item: int) -> int:
            return item

        results = await scheduler.run(list(range(8)), worker)

        self.assertEqual(results, list(range(8)))
        self.assertEqual(sleep.delays, [])

    async def test_empty_input_never_calls_worker(self) -> None:
        sleep = _RecordingSleep()
        calls: list[int] = []

        async def worker(item: int) -> int:
            calls.append(item)
            return item

        results = await BatchScheduler(sleep=sleep).run([], worker)

        self.assertEqual(results, [])
        self.assertEqual(calls, [])
        self.assertEqual(sleep.delays, [])

    async def test_next_batch_waits_for_previous_to_finish(self) -> None:
        events: list[tuple[str, int]] = []

        async def worker(item: int) -> int:
            events.append(("start", item))
            # Later items in a batch finish first.
            for _ in range(5 - item % 3):
                await asyncio.sleep(0)
            events.append(("end", item))
            return item

        results = await BatchScheduler(batch_size=3, delay=0, sleep=_RecordingSleep()).run(list(range(7)), worker)

        self.assertEqual(results, list(range(7)))
        second_batch_start = events.index(("start", 3))
        for item in range(3):
            self.assertLess(events.index(("end", item)), second_batch_start)
        third_batch_start = events.index(("start", 6))
        for item in range(3, 6):
            self.assertLess(events.index(("end", item)), third_batch_start)

    def test_invalid_configuration_is_rejected(self) -> None:
        with self.assertRaises(ValueError):
            BatchScheduler(batch_size=0)
        with self.assertRaises(ValueError):
            BatchScheduler(delay=-1)


if __name__ == "__main__":
    unittest.main()
