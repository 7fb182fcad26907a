"""Reassemble per-partition results into document order and report failures.

Partitions finish in any order. Sorting by original index restores the
order of the top-level folders in the source collection; within a
partition, executions keep the order the runner reported them in.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator

import structlog

from splitrun.errors import PathResolutionError
from splitrun.models.collection import Folder, Request
from splitrun.models.result import Execution, FailureReport, RunSummary, TaggedResult
from splitrun.reporting.paths import index_by_id, node_name, require_path

logger = structlog.get_logger("splitrun")


def _request_name(execution: Execution, index: dict[str, Folder | Request]) -> str:
    """Name of the executed request, preferring what the runner echoed back."""
    if execution.item is not None and execution.item.name:
        return execution.item.name
    node = index.get(execution.item_id)
    if node is not None:
        return node_name(node)
    return execution.item_id


def aggregate(tagged_results: Iterable[TaggedResult]) -> Iterator[FailureReport]:
    """Yield one FailureReport per execution with failed assertions.

    Results are visited in ascending original index. Executions whose
    item id is missing from their own result tree are logged and skipped.

    Args:
        tagged_results: Results from every partition, in any order.

    Yields:
        FailureReport with the full path (ancestors plus request name).
    """
    for tagged in sorted(tagged_results, key=lambda t: t.original_index):
        tree = tagged.result.collection
        index: dict[str, Folder | Request] | None = None

        for execution in tagged.result.executions:
            failures = execution.failures()
            if not failures:
                continue

            if index is None:
                index = index_by_id(tree)

            try:
                ancestors = require_path(tree, execution.item_id)
            except PathResolutionError as exc:
                logger.warning(
                    "execution_unresolved",
                    partition=tagged.partition_name,
                    item_id=exc.item_id,
                    failed_assertions=len(failures),
                )
                continue

            name = _request_name(execution, index)
            yield FailureReport(
                path=[*ancestors, name],
                request_name=name,
                item_id=execution.item_id,
                failures=failures,
            )


def summarize(
    tagged_results: Iterable[TaggedResult],
    reports: list[FailureReport],
) -> RunSummary:
    """Count partitions, executions, and failures across a run.

    Args:
        tagged_results: Results from every partition.
        reports: The reports produced by aggregate() for those results.

    Returns:
        RunSummary; `unresolved` counts failing executions that produced
        no report.
    """
    partitions = 0
    executed = 0
    failed = 0
    assertions_failed = 0

    for tagged in tagged_results:
        partitions += 1
        for execution in tagged.result.executions:
            executed += 1
            failures = execution.failures()
            if failures:
                failed += 1
                assertions_failed += len(failures)

    return RunSummary(
        partitions=partitions,
        requests_executed=executed,
        requests_failed=failed,
        assertions_failed=assertions_failed,
        unresolved=failed - len(reports),
    )
