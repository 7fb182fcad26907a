"""Exception taxonomy for splitrun.

Validation errors are raised before any partition runs. Run errors abort
the whole batch. Path resolution errors indicate malformed runner output
and are normally logged and skipped by the aggregator.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass
class ValidationErrorDetail:
    """A single problem found in a collection document.

    Attributes:
        field: Dotted path of the offending field (e.g. 'item.2').
        message: Human-readable error description.
        type: Error type string (pydantic type or a splitrun code).
        input_value: The invalid input value, if available.
    """

    field: str
    message: str
    type: str
    input_value: Any = field(default=None)


class SplitrunError(Exception):
    """Base class for all splitrun errors."""


class CollectionValidationError(SplitrunError):
    """Raised when a collection document is malformed or unsupported."""

    def __init__(
        self,
        message: str,
        details: list[ValidationErrorDetail] | None = None,
    ) -> None:
        self.message = message
        self.details = details or []
        super().__init__(message)


class RunError(SplitrunError):
    """Raised when the runner fails to execute a partition."""

    def __init__(
        self,
        message: str,
        partition_name: str | None = None,
        original_index: int | None = None,
    ) -> None:
        self.message = message
        self.partition_name = partition_name
        self.original_index = original_index
        super().__init__(message)

    def __str__(self) -> str:
        if self.partition_name is None:
            return self.message
        return f"[{self.partition_name}] {self.message}"


class PathResolutionError(SplitrunError):
    """Raised when an execution's item id is missing from its result tree."""

    def __init__(self, item_id: str, tree_name: str | None = None) -> None:
        self.item_id = item_id
        self.tree_name = tree_name
        super().__init__(
            f"Item id '{item_id}' not found in result tree '{tree_name or '?'}'"
        )
