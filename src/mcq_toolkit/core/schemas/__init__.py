"""JSON schema definitions and validation."""

from .validator import ValidationError, validate_snapshot

__all__ = ["ValidationError", "validate_snapshot"]
