"""
Module: builder.math

Purpose:
    Math span detection, delimiter normalization and typesetting.

Key Functions:
    - normalize(): Canonicalize math delimiters
    - split_math_spans(): Text/math run splitting
    - typeset_text(): Per-span typesetting with verbatim fallback

Key Classes:
    - Typesetter / MathtextTypesetter: Math engines
    - TextRun / MathRun: Pieces of formatted text
"""

from .formatter import (
    MathRun,
    TextRun,
    normalize,
    plain_text,
    split_math_spans,
    typeset_text,
)
from .typesetter import MathtextTypesetter, Typesetter, TypesetError, TypesetMath

__all__ = [
    "MathRun",
    "TextRun",
    "normalize",
    "plain_text",
    "split_math_spans",
    "typeset_text",
    "MathtextTypesetter",
    "Typesetter",
    "TypesetError",
    "TypesetMath",
]
