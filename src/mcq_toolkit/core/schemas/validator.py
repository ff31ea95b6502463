"""
Schema Validation Utilities

Validates question snapshots (the JSON written next to each generated
PDF) before they are fed back into the regenerate flow.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import jsonschema

# Schemas are loaded lazily and cached
_SCHEMAS: dict[str, dict] = {}


class ValidationError(Exception):
    """Raised when data fails schema validation."""

    def __init__(self, message: str, path: str = "", errors: list[str] | None = None):
        super().__init__(message)
        self.path = path
        self.errors = errors or []


def _load_schema(name: str) -> dict:
    """Load a schema from the schemas directory."""
    if name not in _SCHEMAS:
        schema_path = Path(__file__).parent / f"{name}.schema.json"
        with open(schema_path, "r", encoding="utf-8") as f:
            _SCHEMAS[name] = json.load(f)
    return _SCHEMAS[name]


def validate_snapshot(data: Any) -> None:
    """
    Validate a question snapshot against the snapshot schema.

    Args:
        data: Parsed JSON (expected: list of question objects)

    Raises:
        ValidationError: If data is invalid, with every violation listed
    """
    validator = jsonschema.Draft7Validator(_load_schema("snapshot"))
    errors = sorted(validator.iter_errors(data), key=lambda e: [str(p) for p in e.absolute_path])
    if errors:
        first = errors[0]
        path = "/".join(str(p) for p in first.absolute_path)
        raise ValidationError(
            f"Invalid snapshot at '{path}': {first.message}",
            path=path,
            errors=[e.message for e in errors],
        )
