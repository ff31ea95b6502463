"""
Module: builder.math.formatter

Purpose:
    Find math spans in question text, rewrite them to one canonical
    delimiter pair and hand each span to a typesetter independently.

Key Functions:
    - normalize(): Rewrite every recognized span to canonical delimiters
    - split_math_spans(): Split text into TextRun / MathRun pieces
    - typeset_text(): Split and typeset, keeping failed spans verbatim

Recognized delimiters, in priority order (display before inline so a
display pair is never split by an inline pattern):
    1. \\[ ... \\]     display
    2. $$ ... $$     display
    3. \\( ... \\)     inline
    4. $ ... $       inline (a backslash-escaped \\$ is not a delimiter)

Canonical output is \\[ ... \\] for display and \\( ... \\) for inline.
_iter_spans() enforces the priority: display spans are matched over the
whole text first, and inline patterns only run on the gaps between them.

Dependencies:
    - re (std)
    - builder.math.typesetter: Typesetter, TypesetError
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Iterator, Optional, Tuple, Union

from .typesetter import Typesetter, TypesetError, TypesetMath

logger = logging.getLogger(__name__)

DISPLAY_OPEN, DISPLAY_CLOSE = "\\[", "\\]"
INLINE_OPEN, INLINE_CLOSE = "\\(", "\\)"

_DISPLAY_PATTERN = re.compile(
    r"\\\[(?P<bracket>[\s\S]*?)\\\]"
    r"|\$\$(?P<dollar>[\s\S]*?)\$\$"
)
_INLINE_PATTERN = re.compile(
    r"\\\((?P<paren>[\s\S]*?)\\\)"
    r"|(?<!\\)\$(?P<dollar>[^$]+?)\$"
)


@dataclass(frozen=True)
class TextRun:
    """Plain text outside any math span."""

    text: str


@dataclass(frozen=True)
class MathRun:
    """
    A math span.

    Attributes:
        latex: Span body with surrounding whitespace trimmed
        display: True for display math
        source: The span exactly as it appeared, delimiters included
        rendered: Typeset image, None when typesetting is deferred
    """

    latex: str
    display: bool
    source: str
    rendered: Optional[TypesetMath] = None

    @property
    def canonical(self) -> str:
        """The span rewritten with canonical delimiters."""
        if self.display:
            return f"{DISPLAY_OPEN}{self.latex}{DISPLAY_CLOSE}"
        return f"{INLINE_OPEN}{self.latex}{INLINE_CLOSE}"


Run = Union[TextRun, MathRun]


def _iter_spans(text: str) -> Iterator[Tuple[int, int, str, bool]]:
    """
    Yield (start, end, body, is_display) for every math span, in order.

    Display pairs are found first across the whole text, so a stray
    single $ before a $$ ... $$ pair can never pull half of it into an
    inline span. Inline patterns are matched only between display spans.
    """
    cursor = 0
    for match in _DISPLAY_PATTERN.finditer(text):
        yield from _inline_spans(text, cursor, match.start())
        yield match.start(), match.end(), match.group(match.lastgroup), True
        cursor = match.end()
    yield from _inline_spans(text, cursor, len(text))


def _inline_spans(text: str, start: int, end: int) -> Iterator[Tuple[int, int, str, bool]]:
    for match in _INLINE_PATTERN.finditer(text[start:end]):
        yield start + match.start(), start + match.end(), match.group(match.lastgroup), False


def normalize(text: str) -> str:
    """
    Rewrite all recognized math delimiters to the canonical pair.

    The span body and all text outside spans are kept byte-for-byte.
    Text without delimiters is returned unchanged, and normalizing
    already-canonical text is a no-op.

    Example:
        >>> normalize("Solve $x^2 = 4$ and $$y$$")
        'Solve \\\\(x^2 = 4\\\\) and \\\\[y\\\\]'
    """
    if not text:
        return text

    parts: list[str] = []
    cursor = 0
    for start, end, body, display in _iter_spans(text):
        parts.append(text[cursor:start])
        if display:
            parts.append(f"{DISPLAY_OPEN}{body}{DISPLAY_CLOSE}")
        else:
            parts.append(f"{INLINE_OPEN}{body}{INLINE_CLOSE}")
        cursor = end
    parts.append(text[cursor:])
    return "".join(parts)


def split_math_spans(text: str) -> Tuple[Run, ...]:
    """
    Split text into alternating text and math runs, in order.

    Unbalanced delimiters never match and remain inside a TextRun.
    """
    if not text:
        return ()

    runs: list[Run] = []
    cursor = 0
    for start, end, body, display in _iter_spans(text):
        if start > cursor:
            runs.append(TextRun(text[cursor:start]))
        runs.append(MathRun(latex=body.strip(), display=display, source=text[start:end]))
        cursor = end
    if cursor < len(text):
        runs.append(TextRun(text[cursor:]))
    return tuple(runs)


def typeset_text(text: str, typesetter: Optional[Typesetter] = None) -> Tuple[Run, ...]:
    """
    Split ``text`` and typeset every math span independently.

    A span the typesetter rejects is replaced by a TextRun holding its
    original delimited source, so one bad span never affects its
    neighbours. Without a typesetter, spans stay un-rendered MathRuns.

    Args:
        text: Question or option text
        typesetter: Math engine, or None to defer typesetting

    Returns:
        Tuple of runs covering the whole input
    """
    runs = split_math_spans(text)
    if typesetter is None:
        return runs

    result: list[Run] = []
    for run in runs:
        if isinstance(run, TextRun):
            result.append(run)
            continue
        try:
            rendered = typesetter.typeset(run.latex, display=run.display)
        except TypesetError as e:
            logger.warning(f"Keeping math span verbatim: {e}")
            result.append(TextRun(run.source))
            continue
        result.append(MathRun(
            latex=run.latex,
            display=run.display,
            source=run.source,
            rendered=rendered,
        ))
    return tuple(result)


def plain_text(runs: Tuple[Run, ...]) -> str:
    """Flatten runs back to text, math in canonical delimiters."""
    return "".join(run.text if isinstance(run, TextRun) else run.canonical for run in runs)
