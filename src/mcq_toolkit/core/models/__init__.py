"""
Core Models Package

Immutable data models handed from extraction to the layout core.

All models in this package are frozen dataclasses, so a render call can
never mutate the items or metadata it was given, and independent render
calls share nothing.
"""

from .questions import QuestionItem
from .metadata import TestMetadata

__all__ = [
    "QuestionItem",
    "TestMetadata",
]
