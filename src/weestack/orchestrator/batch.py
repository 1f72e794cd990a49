"""Concurrent batches of independent per-machine operations."""

import asyncio
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, List, Optional, Sequence, TypeVar

from weestack.errors import BatchError, MachineError


logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class TaskOutcome:
    """Result of one item of a batch."""
    index: int
    item: str
    error: Optional[BaseException] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def describe(self) -> str:
        """One line for the batch report."""
        if self.ok:
            return f"{self.item}: ok"
        if isinstance(self.error, MachineError):
            return str(self.error)
        return f"{self.item}: {type(self.error).__name__}: {self.error}"


async def run_batch(
    items: Sequence[T],
    task: Callable[[T], Awaitable[None]],
    description: str,
    key: Callable[[T], str] = str,
) -> List[TaskOutcome]:
    """Run task once per item, all concurrently, and collect every outcome.

    Every task is started before any outcome is read, and each puts
    exactly one outcome on a queue sized to the batch, even when it is
    cancelled. A failing item never stops its siblings. If any item
    failed, a BatchError listing all failures in submission order is
    raised once every task has finished; otherwise the outcomes are
    returned in submission order.
    """
    items = list(items)
    if not items:
        return []

    results: "asyncio.Queue[TaskOutcome]" = asyncio.Queue(maxsize=len(items))

    async def _run(index: int, item: T):
        outcome = TaskOutcome(index=index, item=key(item))
        try:
            await task(item)
        except Exception as e:
            logger.error(f"Failed {description} ({outcome.item}): {e}")
            outcome.error = e
        except BaseException as e:
            logger.error(f"Interrupted {description} ({outcome.item}): {e!r}")
            outcome.error = e
            raise
        finally:
            results.put_nowait(outcome)

    logger.info(f"Started {description}: {len(items)} item(s)")
    tasks = [
        asyncio.create_task(_run(index, item))
        for index, item in enumerate(items)
    ]

    outcomes = []
    for _ in range(len(tasks)):
        outcomes.append(await results.get())
    await asyncio.gather(*tasks, return_exceptions=True)

    outcomes.sort(key=lambda outcome: outcome.index)
    failures = [outcome for outcome in outcomes if not outcome.ok]
    if failures:
        raise BatchError(description, failures)

    logger.info(f"Finished {description}: {len(outcomes)} item(s)")
    return outcomes
