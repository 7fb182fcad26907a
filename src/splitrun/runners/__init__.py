"""splitrun runners - the capability that executes one partition."""

from splitrun.runners.base import BaseRunner
from splitrun.runners.registry import BUILTIN_RUNNERS, get_runner

__all__ = [
    "BUILTIN_RUNNERS",
    "BaseRunner",
    "get_runner",
]
