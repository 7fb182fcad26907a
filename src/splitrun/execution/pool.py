"""PartitionPool: run every partition concurrently, abort on first failure.

One asyncio task per partition, each with a fresh runner instance from
runner_factory. Results are appended to a shared list under a lock,
tagged with the partition's original index; the list is in completion
order and is reordered later by the aggregator.

With cancel_on_failure (the default) the tasks run in an
asyncio.TaskGroup, so the first failure cancels in-flight siblings.
Without it the first failure is raised and siblings are left running
un-awaited; they may keep sending requests until the event loop closes.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable

import structlog

from splitrun.errors import RunError
from splitrun.models.collection import Partition
from splitrun.models.result import TaggedResult
from splitrun.runners.base import BaseRunner

logger = structlog.get_logger("splitrun")


class PartitionPool:
    """Fans partitions out to runners and collects tagged results."""

    def __init__(
        self,
        runner_factory: Callable[[], BaseRunner],
        reporter: str = "json",
        max_parallel: int = 0,
        cancel_on_failure: bool = True,
    ) -> None:
        self._runner_factory = runner_factory
        self._reporter = reporter
        self._max_parallel = max_parallel
        self._cancel_on_failure = cancel_on_failure
        self._background: set[asyncio.Task] = set()

    async def run_all(
        self,
        partitions: list[Partition],
        progress_callback: Callable[[int, int], None] | None = None,
    ) -> list[TaggedResult]:
        """Run every partition once and return the tagged results.

        Args:
            partitions: Partitions to execute.
            progress_callback: Optional callback(completed, total) called
                after each partition completes successfully.

        Returns:
            One TaggedResult per partition, in completion order.

        Raises:
            RunError: The first partition failure; no partial results.
        """
        results: list[TaggedResult] = []
        lock = asyncio.Lock()
        semaphore = (
            asyncio.Semaphore(self._max_parallel) if self._max_parallel > 0 else None
        )
        total = len(partitions)

        async def run_one(partition: Partition) -> None:
            if semaphore is None:
                tagged = await self._execute(partition)
            else:
                async with semaphore:
                    tagged = await self._execute(partition)

            async with lock:
                results.append(tagged)
                if progress_callback is not None:
                    progress_callback(len(results), total)

        if self._cancel_on_failure:
            try:
                async with asyncio.TaskGroup() as tg:
                    for p in partitions:
                        tg.create_task(run_one(p))
            except ExceptionGroup as group:
                raise _first_run_error(group)
        else:
            tasks = [asyncio.create_task(run_one(p)) for p in partitions]
            self._background.update(tasks)
            for task in tasks:
                task.add_done_callback(self._forget)
            for completed in asyncio.as_completed(tasks):
                await completed

        return results

    def _forget(self, task: asyncio.Task) -> None:
        """Drop a finished task, marking any exception as retrieved."""
        self._background.discard(task)
        if not task.cancelled():
            task.exception()

    async def _execute(self, partition: Partition) -> TaggedResult:
        """Invoke a fresh runner for one partition, wrapping failures."""
        log = logger.bind(partition=partition.name, index=partition.original_index)
        try:
            runner = self._runner_factory()
            log.info("partition_started", runner=runner.runner_name())
            result = await runner.run(partition.to_document(), self._reporter)
        except RunError as exc:
            if exc.partition_name is None:
                exc.partition_name = partition.name
                exc.original_index = partition.original_index
            log.error("partition_failed", error=exc.message)
            raise
        except Exception as exc:
            log.error("partition_failed", error=str(exc), error_type=type(exc).__name__)
            raise RunError(
                str(exc) or type(exc).__name__,
                partition_name=partition.name,
                original_index=partition.original_index,
            ) from exc

        log.info("partition_finished", executions=len(result.executions))
        return TaggedResult(
            original_index=partition.original_index,
            partition_name=partition.name,
            result=result,
        )


def _first_run_error(group: BaseExceptionGroup) -> BaseException:
    """Return the first leaf exception of a (possibly nested) group."""
    first = group.exceptions[0]
    while isinstance(first, BaseExceptionGroup):
        first = first.exceptions[0]
    return first
