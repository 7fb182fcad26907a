"""Project configuration model for splitrun.

Captures splitrun.yaml fields with defaults for runner selection,
concurrency, and logging. CLI options override these values.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field

CONFIG_FILENAME = "splitrun.yaml"


class NewmanConfig(BaseModel):
    """Settings for the builtin newman runner."""

    model_config = {"extra": "forbid"}

    command: str = "newman"
    timeout_seconds: float | None = Field(default=None, gt=0)
    extra_args: list[str] = Field(default_factory=list)


class ProjectConfig(BaseModel):
    """Project-level configuration loaded from splitrun.yaml."""

    model_config = {"extra": "forbid"}

    runner: str = "newman"
    reporter: str = "json"
    max_parallel: int = Field(default=0, ge=0)
    cancel_on_failure: bool = True
    newman: NewmanConfig = Field(default_factory=NewmanConfig)
    log_level: str = "warning"
    log_format: Literal["console", "plain", "json"] = "console"


def find_project_root(start: Path | None = None) -> Path:
    """Walk up from start (default: cwd) looking for splitrun.yaml.

    Args:
        start: Starting path (file or directory). Defaults to cwd.

    Returns:
        The directory containing splitrun.yaml, or cwd if none is found.
    """
    current = (start or Path.cwd()).resolve()
    if current.is_file():
        current = current.parent
    while current != current.parent:
        if (current / CONFIG_FILENAME).exists():
            return current
        current = current.parent
    return Path.cwd()


def load_project_config(project_root: Path | None = None) -> ProjectConfig:
    """Load ProjectConfig from splitrun.yaml. Returns defaults if not found."""
    if project_root is None:
        project_root = find_project_root()
    config_path = project_root / CONFIG_FILENAME
    if not config_path.exists():
        return ProjectConfig()
    import yaml

    raw = yaml.safe_load(config_path.read_text(encoding="utf-8"))
    if raw is None:
        return ProjectConfig()
    return ProjectConfig.model_validate(raw)
