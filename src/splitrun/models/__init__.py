"""splitrun data models - re-exports all public model classes."""

from splitrun.models.collection import (
    Collection,
    CollectionInfo,
    Folder,
    Item,
    Partition,
    PartitionInfo,
    Request,
)
from splitrun.models.config import NewmanConfig, ProjectConfig
from splitrun.models.result import (
    Assertion,
    AssertionErrorDetail,
    ExecutedItem,
    Execution,
    ExecutionResult,
    FailureReport,
    RunSummary,
    TaggedResult,
)

__all__ = [
    "Assertion",
    "AssertionErrorDetail",
    "Collection",
    "CollectionInfo",
    "ExecutedItem",
    "Execution",
    "ExecutionResult",
    "FailureReport",
    "Folder",
    "Item",
    "NewmanConfig",
    "Partition",
    "PartitionInfo",
    "ProjectConfig",
    "Request",
    "RunSummary",
    "TaggedResult",
]
