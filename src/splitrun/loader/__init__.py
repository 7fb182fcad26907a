"""splitrun collection loader - parsing, validation, and error reporting."""

from splitrun.loader.collection_loader import (
    load_collection,
    load_collection_file,
    parse_collection_text,
)
from splitrun.loader.errors import ErrorFormatter

__all__ = [
    "ErrorFormatter",
    "load_collection",
    "load_collection_file",
    "parse_collection_text",
]
