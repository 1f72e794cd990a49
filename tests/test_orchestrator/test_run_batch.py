"""Tests for concurrent batches."""

import asyncio
import pytest

from weestack.errors import BatchError, DiskCreationFailed
from weestack.orchestrator.batch import TaskOutcome, run_batch


@pytest.mark.asyncio
class TestRunBatch:
    """Test the batch fan-out and aggregation."""

    async def test_all_succeed(self):
        """Test one outcome per item, in submission order."""
        seen = []

        async def task(item):
            await asyncio.sleep(0.01 * (5 - item))
            seen.append(item)

        outcomes = await run_batch([1, 2, 3, 4], task, "counting")

        assert sorted(seen) == [1, 2, 3, 4]
        assert [outcome.item for outcome in outcomes] == ["1", "2", "3", "4"]
        assert all(outcome.ok for outcome in outcomes)

    async def test_empty_batch(self):
        async def task(item):
            raise AssertionError("no items, no tasks")

        assert await run_batch([], task, "nothing") == []

    async def test_tasks_run_concurrently(self):
        """Test every task is running before any of them finishes."""
        items = list(range(5))
        started = []
        all_started = asyncio.Event()

        async def task(item):
            started.append(item)
            if len(started) == len(items):
                all_started.set()
            await all_started.wait()

        outcomes = await asyncio.wait_for(run_batch(items, task, "waiting"), timeout=5)

        assert len(outcomes) == len(items)

    async def test_failures_aggregated(self):
        """Test every failure is reported once and the rest still run."""
        finished = []

        async def task(name):
            if name in ("b", "d"):
                raise RuntimeError(f"{name} broke")
            await asyncio.sleep(0.01)
            finished.append(name)

        with pytest.raises(BatchError) as exc_info:
            await run_batch(["a", "b", "c", "d", "e"], task, "lettering")

        error = exc_info.value
        assert sorted(finished) == ["a", "c", "e"]
        assert [outcome.item for outcome in error.failures] == ["b", "d"]
        assert error.description == "lettering"

        message = str(error)
        assert message.splitlines()[0] == "error lettering:"
        assert message.count("b broke") == 1
        assert message.count("d broke") == 1
        assert len(message.splitlines()) == 3

    async def test_failure_does_not_wait_on_siblings(self):
        """Test a fast failure neither cancels nor blocks slower siblings."""
        release = asyncio.Event()
        done = []

        async def task(item):
            if item == "fast":
                raise RuntimeError("fast failure")
            await release.wait()
            done.append(item)

        batch = asyncio.ensure_future(run_batch(["fast", "slow"], task, "racing"))
        await asyncio.sleep(0.01)
        assert not batch.done()

        release.set()
        with pytest.raises(BatchError):
            await batch

        assert done == ["slow"]

    async def test_cancelled_item_reported(self):
        """Test a cancelled item still yields an outcome, so the batch finishes."""
        done = []

        async def task(item):
            if item == "b":
                raise asyncio.CancelledError()
            done.append(item)

        with pytest.raises(BatchError) as exc_info:
            await asyncio.wait_for(run_batch(["a", "b"], task, "cancelling"), timeout=5)

        assert [outcome.item for outcome in exc_info.value.failures] == ["b"]
        assert isinstance(exc_info.value.failures[0].error, asyncio.CancelledError)
        assert done == ["a"]

    async def test_key(self):
        """Test items are named in the report by key."""
        async def task(item):
            raise ValueError("bad")

        with pytest.raises(BatchError) as exc_info:
            await run_batch([{"name": "vm1"}], task, "keyed", key=lambda item: item["name"])

        assert exc_info.value.failures[0].item == "vm1"
        assert "vm1: ValueError: bad" in str(exc_info.value)


class TestTaskOutcome:
    """Test outcome descriptions."""

    def test_machine_error_named_once(self):
        outcome = TaskOutcome(
            index=0, item="10-0-0-2", error=DiskCreationFailed("10-0-0-2", "no space")
        )

        assert outcome.describe() == "10-0-0-2: disk creation failed: no space"

    def test_success(self):
        outcome = TaskOutcome(index=0, item="10-0-0-1")

        assert outcome.ok
        assert outcome.describe() == "10-0-0-1: ok"
