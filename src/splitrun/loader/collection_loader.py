"""Collection document loading and schema validation.

Reads JSON (or YAML) collection files and validates them against the
Collection model. Pydantic errors are converted into
CollectionValidationError with one detail per offending field, so every
problem is reported at once.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from splitrun.errors import CollectionValidationError, ValidationErrorDetail
from splitrun.models.collection import Collection

YAML_SUFFIXES = frozenset({".yaml", ".yml"})


def _loc_to_field_path(loc: tuple[str | int, ...]) -> str:
    """Convert a Pydantic error loc tuple to a dotted field path."""
    return ".".join(str(part) for part in loc)


def load_collection(data: Any) -> Collection:
    """Validate an in-memory collection document.

    Args:
        data: Parsed collection document (normally a dict).

    Returns:
        The validated Collection.

    Raises:
        CollectionValidationError: If the document lacks `info` or `item`,
            or any node has the wrong shape.
    """
    if not isinstance(data, dict):
        raise CollectionValidationError(
            "The collection document must be a mapping",
            [
                ValidationErrorDetail(
                    field="<root>",
                    message=f"Expected an object, got {type(data).__name__}",
                    type="type_error",
                    input_value=data,
                )
            ],
        )

    try:
        return Collection.model_validate(data)
    except ValidationError as e:
        details = [
            ValidationErrorDetail(
                field=_loc_to_field_path(err.get("loc", ())),
                message=err.get("msg", "Validation error"),
                type=err.get("type", "unknown"),
                input_value=err.get("input"),
            )
            for err in e.errors()
        ]
        missing = [d.field for d in details if d.type == "missing" and "." not in d.field]
        if missing:
            message = (
                "The collection is invalid because it lacks a top-level "
                + ", ".join(f"`{name}`" for name in missing)
            )
        else:
            message = f"The collection is invalid ({len(details)} error(s))"
        raise CollectionValidationError(message, details) from e


def parse_collection_text(source: str, filename: str = "<string>") -> Any:
    """Parse collection text as JSON, or YAML when the filename says so.

    Raises:
        CollectionValidationError: On a syntax error.
    """
    try:
        if Path(filename).suffix.lower() in YAML_SUFFIXES:
            return yaml.safe_load(source)
        return json.loads(source)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise CollectionValidationError(
            f"Could not parse {filename}",
            [ValidationErrorDetail(field="<document>", message=str(e), type="syntax_error")],
        ) from e


def load_collection_file(filepath: Path) -> Collection:
    """Read, parse, and validate a collection file.

    Raises:
        FileNotFoundError: If the file does not exist.
        CollectionValidationError: On unreadable files, syntax or schema errors.
    """
    try:
        source = filepath.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise
    except UnicodeDecodeError as e:
        raise CollectionValidationError(
            f"{filepath} is not valid UTF-8",
            [ValidationErrorDetail(field="<document>", message=str(e), type="encoding_error")],
        ) from e
    except OSError as e:
        raise CollectionValidationError(
            f"Could not read {filepath}",
            [ValidationErrorDetail(field="<document>", message=str(e), type="read_error")],
        ) from e
    if not source.strip():
        raise CollectionValidationError(
            f"{filepath} is empty",
            [ValidationErrorDetail(field="<document>", message="File is empty", type="empty_file")],
        )
    return load_collection(parse_collection_text(source, filename=str(filepath)))
