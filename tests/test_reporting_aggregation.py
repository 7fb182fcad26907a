"""Tests for splitrun.reporting.aggregation - reordering and failure reports."""

from __future__ import annotations

from typing import Any

from structlog.testing import capture_logs

from splitrun.models.result import ExecutionResult, TaggedResult
from splitrun.reporting.aggregation import aggregate, summarize


def _assertion(name: str, error: str | None = None) -> dict[str, Any]:
    entry: dict[str, Any] = {"assertion": name}
    if error is not None:
        entry["error"] = {"name": "AssertionError", "message": error}
    return entry


def _tagged(index: int, name: str, item: list, executions: list) -> TaggedResult:
    return TaggedResult(
        original_index=index,
        partition_name=name,
        result=ExecutionResult.model_validate(
            {"collection": {"info": {"name": name}, "item": item}, "executions": executions}
        ),
    )


def _users(index: int = 0) -> TaggedResult:
    return _tagged(
        index,
        "API Users",
        [{"name": "GetUser", "id": "n0"}, {"name": "ListUsers", "id": "n1"}],
        [
            {
                "id": "n0",
                "item": {"id": "n0", "name": "GetUser"},
                "assertions": [_assertion("has body"), _assertion("status is 200", "expected 404 to equal 200")],
            },
            {"id": "n1", "item": {"id": "n1", "name": "ListUsers"}, "assertions": [_assertion("ok")]},
        ],
    )


def _orders(index: int = 1) -> TaggedResult:
    return _tagged(
        index,
        "API Orders",
        [{"name": "Archive", "id": "n0", "item": [{"name": "OldOrders", "id": "n1"}]}],
        [
            {
                "id": "n1",
                "item": {"id": "n1", "name": "OldOrders"},
                "assertions": [_assertion("a", "boom"), _assertion("b", "bang")],
            }
        ],
    )


class TestAggregateOrdering:
    """Output order depends only on original_index."""

    def test_reports_follow_original_index(self):
        reports = list(aggregate([_orders(), _users()]))
        assert [r.display_path for r in reports] == [
            "API Users / GetUser",
            "API Orders / Archive / OldOrders",
        ]

    def test_completion_order_does_not_matter(self):
        forward = [r.model_dump() for r in aggregate([_users(), _orders()])]
        reverse = [r.model_dump() for r in aggregate([_orders(), _users()])]
        assert forward == reverse

    def test_executions_keep_runner_order(self):
        tagged = _tagged(
            0,
            "P",
            [{"name": "B", "id": "b"}, {"name": "A", "id": "a"}],
            [
                {"id": "a", "item": {"name": "A"}, "assertions": [_assertion("x", "e")]},
                {"id": "b", "item": {"name": "B"}, "assertions": [_assertion("x", "e")]},
            ],
        )
        assert [r.request_name for r in aggregate([tagged])] == ["A", "B"]

    def test_aggregate_is_lazy(self):
        reports = aggregate([_users()])
        assert next(reports).request_name == "GetUser"
        assert list(reports) == []


class TestAggregateFailures:
    def test_all_pass_execution_emits_nothing(self):
        tagged = _tagged(
            0,
            "API Orders",
            [{"name": "ListOrders", "id": "n0"}],
            [{"id": "n0", "item": {"name": "ListOrders"}, "assertions": [_assertion("ok")]}],
        )
        assert list(aggregate([tagged])) == []

    def test_execution_without_assertions_emits_nothing(self):
        tagged = _tagged(0, "P", [{"name": "R", "id": "r"}], [{"id": "r"}])
        assert list(aggregate([tagged])) == []

    def test_only_failed_assertions_are_reported(self):
        report = next(aggregate([_users()]))
        assert [a.assertion for a in report.failures] == ["status is 200"]
        assert report.failures[0].error.message == "expected 404 to equal 200"

    def test_multiple_failures_in_one_report(self):
        report = next(aggregate([_orders(0)]))
        assert [a.assertion for a in report.failures] == ["a", "b"]

    def test_ids_do_not_cross_partitions(self):
        # Both partitions use id n1; each must resolve in its own tree
        reports = list(aggregate([_users(), _orders()]))
        assert reports[1].path == ["API Orders", "Archive", "OldOrders"]

    def test_request_name_falls_back_to_tree(self):
        tagged = _tagged(
            0, "P", [{"name": "Named", "id": "r"}], [{"id": "r", "assertions": [_assertion("x", "e")]}]
        )
        assert next(aggregate([tagged])).path == ["P", "Named"]

    def test_item_id_taken_from_item_when_missing(self):
        tagged = _tagged(
            0,
            "P",
            [{"name": "R", "id": "r"}],
            [{"item": {"id": "r", "name": "R"}, "assertions": [_assertion("x", "e")]}],
        )
        assert next(aggregate([tagged])).item_id == "r"

    def test_unresolvable_id_is_logged_and_skipped(self):
        tagged = _tagged(
            0,
            "P",
            [{"name": "R", "id": "r"}],
            [
                {"id": "ghost", "item": {"name": "Ghost"}, "assertions": [_assertion("x", "e")]},
                {"id": "r", "item": {"name": "R"}, "assertions": [_assertion("x", "e")]},
            ],
        )
        with capture_logs() as logs:
            reports = list(aggregate([tagged]))
        assert [r.request_name for r in reports] == ["R"]
        warning = next(entry for entry in logs if entry["event"] == "execution_unresolved")
        assert warning["log_level"] == "warning"
        assert warning["item_id"] == "ghost"


class TestSummarize:
    def test_counts(self):
        results = [_users(), _orders()]
        reports = list(aggregate(results))
        summary = summarize(results, reports)
        assert summary.partitions == 2
        assert summary.requests_executed == 3
        assert summary.requests_failed == 2
        assert summary.assertions_failed == 3
        assert summary.unresolved == 0
        assert summary.passed is False

    def test_passing_run(self):
        tagged = _tagged(0, "P", [{"name": "R", "id": "r"}], [{"id": "r", "assertions": [_assertion("ok")]}])
        summary = summarize([tagged], [])
        assert summary.passed is True

    def test_unresolved_counted(self):
        tagged = _tagged(
            0, "P", [], [{"id": "ghost", "assertions": [_assertion("x", "e")]}]
        )
        reports = list(aggregate([tagged]))
        assert summarize([tagged], reports).unresolved == 1


class TestEndToEndScenario:
    """Collection API: Users/GetUser fails 'status is 200', Orders all pass."""

    def test_single_report_for_users(self):
        results = [
            _tagged(
                1,
                "API Orders",
                [{"name": "ListOrders", "id": "n0"}],
                [{"id": "n0", "item": {"name": "ListOrders"}, "assertions": [_assertion("ok")]}],
            ),
            _tagged(
                0,
                "API Users",
                [{"name": "GetUser", "id": "n0"}],
                [
                    {
                        "id": "n0",
                        "item": {"name": "GetUser"},
                        "assertions": [_assertion("status is 200", "expected 500 to equal 200")],
                    }
                ],
            ),
        ]
        reports = list(aggregate(results))
        assert len(reports) == 1
        assert reports[0].display_path == "API Users / GetUser"
        assert [a.assertion for a in reports[0].failures] == ["status is 200"]
