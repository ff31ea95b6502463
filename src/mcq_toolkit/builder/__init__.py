"""
Module: builder

Purpose:
    Building pipeline for generating MCQ test papers from extracted
    questions. Picks a density tier for the page budget, plans page
    breaks, assembles the document and renders it to PDF.

Key Functions:
    - build_paper(): Main entry point for paper generation
    - regenerate_paper(): Rebuild from an edited snapshot

Key Classes:
    - BuilderConfig: Configuration for building
    - BuildResult / BuildError: Build outcome

Dependencies:
    - reportlab: PDF generation
    - matplotlib: Math typesetting
    - mcq_toolkit.core.models: QuestionItem, TestMetadata

Used By:
    - mcq_toolkit.__main__: Command line interface
"""

from .config import BuilderConfig
from .controller import build_paper, regenerate_paper, BuildResult, BuildError

__all__ = [
    # Config
    "BuilderConfig",
    # Controller
    "build_paper",
    "regenerate_paper",
    "BuildResult",
    "BuildError",
]
