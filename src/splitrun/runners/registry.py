"""Runner registry for resolving runner names to classes.

Supports builtin runner names (e.g., "newman") and custom dotted-path
imports (e.g., "my.module.MyRunner").
"""

from __future__ import annotations

import importlib
from typing import Any

from splitrun.runners.base import BaseRunner

# Mapping of builtin runner short names to their fully-qualified class paths.
BUILTIN_RUNNERS: dict[str, str] = {
    "newman": "splitrun.runners.newman.NewmanRunner",
}


def get_runner(name: str, **options: Any) -> BaseRunner:
    """Resolve a runner by name or dotted path and return an instance.

    Args:
        name: A builtin runner name or a fully-qualified dotted path
              to a runner class.
        **options: Keyword arguments passed to the runner constructor.

    Returns:
        An instance of the resolved runner class.

    Raises:
        ValueError: If the name is not a builtin and has no dots (unknown).
        ImportError: If the module or class cannot be imported.
        TypeError: If the resolved class is not a subclass of BaseRunner.
    """
    if name in BUILTIN_RUNNERS:
        dotted_path = BUILTIN_RUNNERS[name]
    elif "." in name:
        dotted_path = name
    else:
        available = ", ".join(sorted(BUILTIN_RUNNERS.keys()))
        raise ValueError(
            f"Unknown runner '{name}'. "
            f"Available builtin runners: {available}. "
            f"For custom runners, provide the full dotted path "
            f"(e.g., 'my.module.MyRunner')."
        )

    module_path, _, class_name = dotted_path.rpartition(".")
    if not module_path or not class_name:
        raise ValueError(
            f"Invalid runner path '{dotted_path}'. "
            f"Expected format: 'module.path.ClassName'."
        )

    module = importlib.import_module(module_path)

    try:
        cls = getattr(module, class_name)
    except AttributeError:
        raise ImportError(
            f"Module '{module_path}' has no attribute '{class_name}'."
        ) from None

    if not isinstance(cls, type) or not issubclass(cls, BaseRunner):
        raise TypeError(
            f"'{dotted_path}' is not a subclass of BaseRunner. "
            f"Custom runners must inherit from splitrun.runners.base.BaseRunner."
        )

    return cls(**options)
