"""splitrun execution - partitioning and concurrent partition runs."""

from splitrun.execution.partitioner import partition
from splitrun.execution.pool import PartitionPool

__all__ = [
    "PartitionPool",
    "partition",
]
