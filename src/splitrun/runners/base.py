"""BaseRunner ABC: the capability that executes one partition.

Runners receive a stand-alone collection document and return an
ExecutionResult whose collection copy carries an id on every node and
whose executions reference those ids. Any failure to produce such a
result should be raised; the pool wraps it in RunError.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from splitrun.models.result import ExecutionResult


class BaseRunner(ABC):
    """Abstract base class for all runners.

    Subclasses must implement run(). A fresh instance is created per
    partition, so implementations may keep per-run state.
    """

    @abstractmethod
    async def run(
        self,
        collection: dict[str, Any],
        reporter: str = "json",
    ) -> ExecutionResult:
        """Execute a collection document and return its results.

        Args:
            collection: A stand-alone collection document (info + item).
            reporter: Report format requested from the engine.

        Returns:
            ExecutionResult for the whole document.
        """
        ...

    def runner_name(self) -> str:
        """Return the runner name. Defaults to the class name."""
        return type(self).__name__
