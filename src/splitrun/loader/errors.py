"""Error formatter with dual-mode output (human and CI concise).

Human mode groups details under a coded headline; CI mode prints one
`file -- field: message` line per detail.
"""

from __future__ import annotations

import os
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from splitrun.errors import CollectionValidationError, ValidationErrorDetail


# Map error types to error codes
ERROR_CODES: dict[str, str] = {
    "missing": "E002",
    "value_error": "E003",
    "greater_than_equal": "E003",
    "type_error": "E004",
    "string_type": "E004",
    "list_type": "E004",
    "dict_type": "E004",
    "model_type": "E004",
    "int_type": "E004",
    "syntax_error": "E006",
    "empty_file": "E007",
    "encoding_error": "E009",
    "read_error": "E009",
    "top_level_request": "E008",
}

ERROR_DESCRIPTIONS: dict[str, str] = {
    "E002": "required field missing",
    "E003": "invalid value",
    "E004": "type mismatch",
    "E006": "syntax error",
    "E007": "empty input",
    "E008": "unsupported top-level request",
    "E009": "unreadable file",
}


class ErrorFormatter:
    """Formats collection validation errors for human or CI consumption.

    Args:
        ci_mode: If True, use CI-friendly concise output. If None,
            auto-detect from the CI environment variable.
    """

    def __init__(self, ci_mode: bool | None = None) -> None:
        if ci_mode is None:
            self.ci_mode = os.environ.get("CI", "").lower() in ("true", "1", "yes")
        else:
            self.ci_mode = ci_mode

    def _get_error_code(self, error_type: str) -> str:
        if error_type in ERROR_CODES:
            return ERROR_CODES[error_type]
        for key, code in ERROR_CODES.items():
            if key in error_type:
                return code
        return "E999"

    def format_detail(self, detail: ValidationErrorDetail, filename: str) -> str:
        """Format a single detail for display."""
        if self.ci_mode:
            return f"{filename} -- {detail.field}: {detail.message}"

        code = self._get_error_code(detail.type)
        description = ERROR_DESCRIPTIONS.get(code, "validation error")
        return "\n".join(
            [
                f"error[{code}]: {description}",
                f"  --> {filename}",
                "   |",
                f"   | {detail.field}: {detail.message}",
                "   |",
            ]
        )

    def format_error(self, error: CollectionValidationError, filename: str) -> str:
        """Format a validation error and all of its details.

        Errors without details are rendered from their message alone.
        """
        if not error.details:
            if self.ci_mode:
                return f"{filename} -- {error.message}"
            return f"error: {error.message}\n  --> {filename}"

        formatted = [self.format_detail(d, filename) for d in error.details]
        separator = "\n" if self.ci_mode else "\n\n"
        return separator.join(formatted)

    def format_success(self, filename: str, partitions: int) -> str:
        return f"  {filename} ... valid ({partitions} partition(s))"
