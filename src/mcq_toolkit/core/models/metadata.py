"""
Module: metadata

Purpose:
    Descriptive test metadata printed verbatim in the paper header.

Key Classes:
    - TestMetadata: Immutable header fields with documented defaults

Used By:
    - builder.layout.composer: Header block
    - builder.controller: Build entry points
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any, Mapping, Optional

# Wire keys that differ from attribute names
_WIRE_KEYS = {
    "class_name": "class",
    "max_marks": "maxMarks",
    "min_marks": "minMarks",
}


@dataclass(frozen=True)
class TestMetadata:
    """
    Test paper header fields (immutable).

    Every field is optional on the wire; absent, null or blank values are
    replaced by the defaults below. ``date`` defaults to blank, which the
    header renders as a fillable line.

    Attributes:
        instructor: Instructor name
        subject: Subject name
        date: Test date, blank for a hand-filled field
        time: Time window / duration
        class_name: Class or grade ("class" on the wire)
        max_marks: Maximum marks
        min_marks: Passing marks
    """

    __test__ = False  # not a pytest test class

    instructor: str = "Prof. Ahmed Khan"
    subject: str = "Mathematics"
    date: str = ""
    time: str = "10:00 AM - 11:30 AM"
    class_name: str = "XI"
    max_marks: str = "50"
    min_marks: str = "25"

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> TestMetadata:
        """Build metadata from a request/CLI mapping, applying defaults."""
        if not data:
            return cls()
        values = {}
        for f in fields(cls):
            raw = data.get(_WIRE_KEYS.get(f.name, f.name))
            if raw is None:
                raw = data.get(f.name)
            if raw is not None and str(raw).strip():
                values[f.name] = str(raw)
        return cls(**values)

    def to_dict(self) -> dict:
        """Serialize using wire keys."""
        return {_WIRE_KEYS.get(f.name, f.name): getattr(self, f.name) for f in fields(self)}
