"""
Module: ingest.extraction

Purpose:
    Drive a vision model over page images and parse its JSON replies
    into QuestionItems. Callers inject any Extractor; ModelExtractor
    adapts a generative ModelClient to that contract and owns the
    prompts and the tolerant reply parsing.

Key Functions:
    - parse_extraction_response(): Reply text → list of wire dicts
    - collect_items(): Run an Extractor over all pages, in order
    - cleanup_latex(): Optional second pass tidying math delimiters

Key Classes:
    - Extractor: Protocol, page buffer in, QuestionItems out, never raises
    - ModelClient: Protocol for a generative model (prompt + content → text)
    - ModelExtractor: Extractor backed by a ModelClient

Dependencies:
    - json (std)
    - core.models.QuestionItem

Used By:
    - Upstream services feeding builder.build_paper()
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any, List, Protocol, Sequence, Union

from mcq_toolkit.core.models import QuestionItem
from mcq_toolkit.core.models.questions import MIN_OPTIONS
from mcq_toolkit.core.utils.serialization import serialize_items

logger = logging.getLogger(__name__)

EXTRACTION_PROMPT = """Extract all multiple-choice questions (MCQs) from this test page.
For each question, return a JSON object with:
- "question": full question text
- "options": object with keys A, B, C, D containing option text
- "correct_answer": if visible or inferable (otherwise null)

Important:
- Replace all mathematical expressions, equations, symbols, and formulas with LaTeX syntax
- Use \\( ... \\) for inline math
- Use \\[ ... \\] for display math equations
- Preserve all subscripts, superscripts, fractions, roots, integrals, etc. in LaTeX
- Examples:
  - 'E = mc²' becomes \\( E = mc^2 \\)
  - Fractions: 'a/b' becomes \\( \\frac{a}{b} \\)
  - Subscripts: 'H₂O' becomes \\( H_2O \\)

Return ONLY valid JSON array, no markdown or code blocks."""

CLEANUP_PROMPT = """Review this JSON array of MCQs and ensure all mathematical expressions are in correct LaTeX formatting.
Rules:
1. Convert any plain text math expressions to LaTeX if not already in delimiters
2. Inline math: \\( ... \\)
3. Display math: \\[ ... \\]
4. Fix any LaTeX syntax errors
5. Keep the order and wording of every question

Return the cleaned JSON array only, no markdown or explanations."""

_CODE_FENCE = re.compile(r"```(?:json)?", re.IGNORECASE)


class Extractor(Protocol):
    """
    Turns one page buffer into QuestionItems.

    Implementations return an empty list on failure instead of raising.
    """

    def extract(self, page: bytes) -> List[QuestionItem]:
        ...


class ModelClient(Protocol):
    """A generative model client: prompt plus page image or text in, reply text out."""

    def generate(self, prompt: str, content: Union[bytes, str]) -> str:
        ...


class ModelExtractor:
    """
    Extractor backed by a generative model.

    Sends EXTRACTION_PROMPT with the page, parses the reply and converts
    valid entries to QuestionItems. A failing model call yields no items.

    Example:
        >>> extractor = ModelExtractor(client)
        >>> items = collect_items(page_buffers, extractor)
    """

    def __init__(self, client: ModelClient, prompt: str = EXTRACTION_PROMPT) -> None:
        self.client = client
        self.prompt = prompt

    def extract(self, page: bytes) -> List[QuestionItem]:
        try:
            reply = self.client.generate(self.prompt, page)
        except Exception as e:
            logger.warning(f"Model call failed during extraction: {e}")
            return []
        return [QuestionItem.from_dict(entry) for entry in parse_extraction_response(reply)]


def parse_extraction_response(text: str) -> List[dict]:
    """
    Parse a model reply into question dicts.

    Markdown code fences are stripped, a single object is wrapped in a
    list, and entries without question text or with fewer than two
    options are dropped. Malformed JSON yields an empty list.

    Example:
        >>> parse_extraction_response('```json\\n{"question": "Q", "options": {"A": "1", "B": "2"}}\\n```')
        [{'question': 'Q', 'options': {'A': '1', 'B': '2'}}]
    """
    cleaned = _CODE_FENCE.sub("", text or "").strip()
    try:
        data = json.loads(cleaned)
    except json.JSONDecodeError as e:
        snippet = cleaned if len(cleaned) <= 300 else cleaned[:300] + "..."
        logger.warning(f"Extraction reply is not valid JSON ({e}): {snippet!r}")
        return []

    if not isinstance(data, list):
        data = [data]
    return [entry for entry in data if _is_question(entry)]


def collect_items(pages: Sequence[bytes], extractor: Extractor) -> List[QuestionItem]:
    """
    Extract questions from every page, concatenated in page order.

    A page that yields nothing contributes no items. An extractor that
    raises anyway is logged and skipped, and the remaining pages are
    still processed.
    """
    items: List[QuestionItem] = []
    for index, page in enumerate(pages):
        logger.info(f"Extracting questions from page {index + 1}/{len(pages)}")
        try:
            page_items = extractor.extract(page)
        except Exception as e:
            logger.warning(f"Extraction failed for page {index + 1}: {e}")
            continue
        if not page_items:
            logger.warning(f"No questions extracted from page {index + 1}")
            continue
        logger.debug(f"Page {index + 1}: {len(page_items)} question(s)")
        items.extend(page_items)

    logger.info(f"Extracted {len(items)} total questions")
    return items


def cleanup_latex(items: List[QuestionItem], client: ModelClient) -> List[QuestionItem]:
    """
    Ask the model to tidy math formatting across all items.

    Returns the original items unchanged if the call fails or the reply
    is not a JSON array.
    """
    if not items:
        return items

    payload = json.dumps(serialize_items(items), indent=2, ensure_ascii=False)
    try:
        reply = client.generate(CLEANUP_PROMPT, payload)
    except Exception as e:
        logger.warning(f"LaTeX cleanup failed, keeping original items: {e}")
        return items

    cleaned = _CODE_FENCE.sub("", reply or "").strip()
    try:
        data = json.loads(cleaned)
    except json.JSONDecodeError:
        logger.warning("LaTeX cleanup reply is not valid JSON, keeping original items")
        return items
    if not isinstance(data, list):
        return items

    return [
        QuestionItem.from_dict(entry)
        for entry in data
        if isinstance(entry, dict) and entry.get("question") and entry.get("options")
    ]


def _is_question(entry: Any) -> bool:
    if not isinstance(entry, dict) or not entry.get("question"):
        return False
    options = entry.get("options")
    return isinstance(options, dict) and len(options) >= MIN_OPTIONS
