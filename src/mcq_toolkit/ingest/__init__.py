"""
Module: ingest

Purpose:
    Front half of the pipeline: uploaded files → page images → model
    replies → QuestionItems.

Key Functions:
    - load_page_buffers(): Files to JPEG page buffers
    - collect_items(): Page buffers to QuestionItems via an Extractor
    - parse_extraction_response(): Tolerant reply parsing
"""

from .pages import IngestConfig, IngestError, load_page_buffers
from .extraction import (
    CLEANUP_PROMPT,
    EXTRACTION_PROMPT,
    Extractor,
    ModelClient,
    ModelExtractor,
    cleanup_latex,
    collect_items,
    parse_extraction_response,
)

__all__ = [
    "IngestConfig",
    "IngestError",
    "load_page_buffers",
    "CLEANUP_PROMPT",
    "EXTRACTION_PROMPT",
    "Extractor",
    "ModelClient",
    "ModelExtractor",
    "cleanup_latex",
    "collect_items",
    "parse_extraction_response",
]
