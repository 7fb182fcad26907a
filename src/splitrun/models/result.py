"""Runner output models and derived failure reports.

ExecutionResult mirrors the shape of a JSON run report: a copy of the
executed collection in which every node carries a runner-assigned `id`,
plus a flat list of executions referencing those ids.
"""

from __future__ import annotations

from typing import Any

from pydantic import AliasChoices, BaseModel, Field, model_validator

from splitrun.models.collection import Collection


class AssertionErrorDetail(BaseModel):
    """Error attached to a failed assertion."""

    model_config = {"extra": "allow"}

    name: str | None = None
    message: str = ""
    test: str | None = None


class Assertion(BaseModel):
    """Outcome of one test assertion. Failed iff `error` is set."""

    model_config = {"extra": "allow"}

    assertion: str = Field(
        default="",
        validation_alias=AliasChoices("assertion", "name"),
    )
    skipped: bool = False
    error: AssertionErrorDetail | None = None

    @property
    def failed(self) -> bool:
        return self.error is not None


class ExecutedItem(BaseModel):
    """The request an execution ran, as echoed back by the runner."""

    model_config = {"extra": "allow"}

    id: str | None = None
    name: str | None = None


class Execution(BaseModel):
    """One request's run outcome, referencing a node of the result tree."""

    item_id: str = Field(validation_alias=AliasChoices("itemId", "item_id", "id"))
    item: ExecutedItem | None = None
    assertions: list[Assertion] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def _item_id_from_item(cls, data: Any) -> Any:
        """Fall back to `item.id` when the execution has no id of its own."""
        if isinstance(data, dict) and not any(
            key in data for key in ("itemId", "item_id", "id")
        ):
            item = data.get("item")
            if isinstance(item, dict) and item.get("id") is not None:
                return {**data, "itemId": item["id"]}
        return data

    def failures(self) -> list[Assertion]:
        """Return the assertions that carry an error."""
        return [a for a in self.assertions if a.failed]


class ExecutionResult(BaseModel):
    """What the runner returns for one partition."""

    collection: Collection
    executions: list[Execution] = Field(default_factory=list)


class TaggedResult(BaseModel):
    """An ExecutionResult paired with its partition's original position."""

    original_index: int
    partition_name: str
    result: ExecutionResult


class FailureReport(BaseModel):
    """A request with at least one failed assertion, located in the tree."""

    path: list[str]
    request_name: str
    item_id: str
    failures: list[Assertion]

    @property
    def display_path(self) -> str:
        return " / ".join(self.path)


class RunSummary(BaseModel):
    """Aggregate counts for a whole run."""

    partitions: int
    requests_executed: int
    requests_failed: int
    assertions_failed: int
    unresolved: int = 0

    @property
    def passed(self) -> bool:
        return self.requests_failed == 0
