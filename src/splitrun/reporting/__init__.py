"""splitrun reporting - result reassembly and failure path resolution."""

from splitrun.reporting.aggregation import aggregate, summarize
from splitrun.reporting.paths import index_by_id, require_path, resolve_path

__all__ = [
    "aggregate",
    "index_by_id",
    "require_path",
    "resolve_path",
    "summarize",
]
