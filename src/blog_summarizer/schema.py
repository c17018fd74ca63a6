"""Helpers to load and validate the packaged JSON schemas."""

from __future__ import annotations

import json
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Iterable, Optional

from jsonschema import Draft202012Validator, FormatChecker
from jsonschema.exceptions import ValidationError


def data_dir() -> Path:
    """Directory holding the packaged word list and schemas."""
    return Path(__file__).resolve().parent / "data"


def default_schema_path() -> Path:
    """Return the path to the dictionary word-list schema."""
    return data_dir() / "dictionary_schema.json"


@lru_cache(maxsize=4)
def load_schema(path: Optional[Path | str] = None) -> Dict[str, Any]:
    """Load and cache a schema as a dictionary."""
    schema_path = Path(path) if path else default_schema_path()
    return json.loads(schema_path.read_text(encoding="utf-8"))


def format_errors(errors: Iterable[ValidationError]) -> str:
    """Turn jsonschema errors into a concise human-readable string."""
    parts = []
    for err in errors:
        location = ".".join(str(piece) for piece in err.absolute_path) or "<root>"
        parts.append(f"{location}: {err.message}")
    return "; ".join(parts)


def validate_dictionary_payload(
    payload: Any, schema: Optional[Dict[str, Any]] = None
) -> Dict[str, Any]:
    """
    Validate a word-list document against the dictionary schema.

    Raises ValueError with a readable message if validation fails.
    """
    schema_dict = schema or load_schema()
    validator = Draft202012Validator(schema_dict, format_checker=FormatChecker())
    errors = sorted(validator.iter_errors(payload), key=lambda e: list(e.absolute_path))
    if errors:
        raise ValueError(f"Schema validation failed: {format_errors(errors)}")
    return payload
