"""
Module: questions

Purpose:
    Provides the QuestionItem dataclass - the record passed from the
    extraction collaborator to the layout core. Represents one
    multiple-choice question with its labelled options.

Key Functions:
    - QuestionItem.is_valid: Extraction-side validity check
    - QuestionItem.option_map: Options as an ordered dict
    - QuestionItem.to_dict() / QuestionItem.from_dict(): Serialization

Dependencies:
    - dataclasses (std)

Used By:
    - core.utils.serialization
    - builder.layout (metrics, composer)
    - ingest.extraction

Design Note:
    The core never rejects an item. Missing text or options are tolerated
    (empty string / no options) and ``is_valid`` is only consulted by the
    extraction parser, which drops invalid items upstream.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Tuple

# Minimum number of options for an item to be kept by extraction
MIN_OPTIONS = 2


@dataclass(frozen=True)
class QuestionItem:
    """
    One extracted multiple-choice question (immutable).

    Attributes:
        text: Question text, may contain delimited math spans
        options: (label, text) pairs sorted by label, labels unique
        correct_answer: Optional label, never used by layout

    Example:
        >>> item = QuestionItem.from_dict({
        ...     "question": "What is 2 + 2?",
        ...     "options": {"A": "3", "B": "4"},
        ... })
        >>> item.labels
        ('A', 'B')
    """

    text: str = ""
    options: Tuple[Tuple[str, str], ...] = ()
    correct_answer: Optional[str] = None

    def __post_init__(self) -> None:
        """Sort options by label and drop duplicate labels (first wins)."""
        seen: Dict[str, str] = {}
        for label, value in self.options:
            key = str(label).strip().upper()
            if key and key not in seen:
                seen[key] = "" if value is None else str(value)
        object.__setattr__(self, "options", tuple(sorted(seen.items())))
        if self.text is None:
            object.__setattr__(self, "text", "")

    @property
    def labels(self) -> Tuple[str, ...]:
        """Option labels in render order."""
        return tuple(label for label, _ in self.options)

    @property
    def option_map(self) -> Dict[str, str]:
        """Options as a label -> text dict."""
        return dict(self.options)

    @property
    def present_options(self) -> Tuple[Tuple[str, str], ...]:
        """Options that have non-empty text."""
        return tuple((label, value) for label, value in self.options if value.strip())

    @property
    def is_valid(self) -> bool:
        """Text is non-empty and at least two options carry text."""
        return bool(self.text.strip()) and len(self.present_options) >= MIN_OPTIONS

    def with_text(self, text: str, options: Mapping[str, str]) -> QuestionItem:
        """Return a copy with replaced text fields."""
        return QuestionItem(
            text=text,
            options=tuple(options.items()),
            correct_answer=self.correct_answer,
        )

    def to_dict(self) -> dict:
        """Serialize to the extraction wire format."""
        return {
            "question": self.text,
            "options": self.option_map,
            "correct_answer": self.correct_answer,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> QuestionItem:
        """
        Deserialize from the extraction wire format.

        Tolerates missing/null ``question`` and ``options`` and accepts
        ``text`` as an alias for ``question``.

        Args:
            data: Dict with keys question, options, correct_answer

        Returns:
            QuestionItem instance
        """
        text = data.get("question")
        if text is None:
            text = data.get("text")
        raw_options = data.get("options") or {}
        if not isinstance(raw_options, Mapping):
            raw_options = {}
        return cls(
            text="" if text is None else str(text),
            options=tuple(
                (str(label), "" if value is None else str(value))
                for label, value in raw_options.items()
            ),
            correct_answer=data.get("correct_answer"),
        )

    def __repr__(self) -> str:
        """Concise representation for debugging."""
        preview = self.text if len(self.text) <= 30 else self.text[:27] + "..."
        return f"QuestionItem({preview!r}, options={''.join(self.labels)})"
