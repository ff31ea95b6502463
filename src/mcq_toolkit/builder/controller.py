"""
Module: builder.controller

Purpose:
    Orchestrate the complete paper building pipeline.
    Snapshot → Compose (classify, plan, assemble) → Render → Write

Key Functions:
    - build_paper(): Main entry point for building a paper
    - regenerate_paper(): Rebuild from an edited JSON snapshot

Key Classes:
    - BuildResult: Complete build result
    - BuildError: Exception for build failures

Dependencies:
    - builder.layout: Classification, break planning, assembly
    - builder.math: Math typesetting
    - builder.output: PDF rendering
    - core.utils.serialization: Snapshot files

Used By:
    - mcq_toolkit.__main__: Command line interface
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any, List, Optional, Sequence

from mcq_toolkit.core.models import QuestionItem, TestMetadata
from mcq_toolkit.core.models.questions import MIN_OPTIONS
from mcq_toolkit.core.utils.serialization import (
    SnapshotError,
    load_snapshot,
    save_snapshot,
    snapshot_paths,
)

from .config import BuilderConfig
from .layout import LayoutTier, PageBreakPlan, compose_paper
from .math import MathtextTypesetter, Typesetter
from .output.renderer import Renderer, RenderError, ReportLabRenderer, render_to_pdf

logger = logging.getLogger(__name__)


class BuildError(Exception):
    """Error during build pipeline."""
    pass


@dataclass(frozen=True)
class BuildResult:
    """
    Complete build result (immutable).

    Attributes:
        pdf_path: Path to generated PDF
        json_path: Path to item snapshot (None if not written)
        tier: Density tier the paper was laid out with
        break_plan: Page break plan
        question_count: Number of questions rendered
        page_count: Planned number of pages
        elapsed: Build time in seconds
        warnings: Any warnings during build

    Example:
        >>> result = build_paper(items, TestMetadata(subject="Physics"))
        >>> print(f"{result.question_count} questions, {result.tier.density_level.slug}")
    """

    pdf_path: Path
    json_path: Optional[Path]
    tier: LayoutTier
    break_plan: PageBreakPlan
    question_count: int
    page_count: int
    elapsed: float
    warnings: tuple[str, ...] = ()


def build_paper(
    items: Sequence[Any],
    metadata: Optional[TestMetadata] = None,
    config: Optional[BuilderConfig] = None,
    *,
    renderer: Optional[Renderer] = None,
    typesetter: Optional[Typesetter] = None,
) -> BuildResult:
    """
    Build a paper from start to finish.

    Pipeline:
    1. Coerce items and collect warnings for incomplete ones
    2. Write the JSON snapshot (before rendering, so edits can be retried)
    3. Compose the document (normalize, classify, plan, assemble)
    4. Render to PDF and write final_test_N.pdf

    Args:
        items: QuestionItems or wire-format dicts, in display order
        metadata: Header fields (defaults applied when None)
        config: Build configuration (defaults to BuilderConfig())
        renderer: PDF backend (defaults to ReportLabRenderer)
        typesetter: Math engine (defaults to MathtextTypesetter when
            config.typeset_math is set)

    Returns:
        BuildResult with paths and layout decisions

    Raises:
        BuildError: If the snapshot or PDF cannot be produced

    Example:
        >>> result = build_paper(items, config=BuilderConfig(output_dir=Path("out")))
        >>> result.pdf_path.name
        'final_test_36.pdf'
    """
    config = config or BuilderConfig()
    metadata = metadata or TestMetadata()
    warnings: List[str] = []
    start_time = time.perf_counter()

    questions = [_coerce(item, index, warnings) for index, item in enumerate(items)]
    logger.info(f"Starting build of {len(questions)} questions for {metadata.subject}")

    pdf_path, json_path = snapshot_paths(config.output_dir, len(questions))

    # 1. Snapshot
    written_json: Optional[Path] = None
    if config.write_snapshot:
        try:
            written_json = save_snapshot(questions, json_path)
        except OSError as e:
            raise BuildError(f"Failed to write snapshot {json_path}: {e}") from e
        logger.info(f"Wrote snapshot: {json_path}")

    # 2. Compose
    if typesetter is None and config.typeset_math:
        typesetter = MathtextTypesetter()

    try:
        document = compose_paper(
            questions,
            metadata,
            target_page_count=config.target_page_count,
            thresholds=config.thresholds,
            typesetter=typesetter,
            branding=config.branding,
        )
    except ValueError as e:
        raise BuildError(f"Layout failed: {e}") from e

    # 3. Render
    try:
        render_to_pdf(document, pdf_path, renderer or ReportLabRenderer())
    except RenderError as e:
        raise BuildError(str(e)) from e
    except OSError as e:
        raise BuildError(f"Failed to write PDF {pdf_path}: {e}") from e

    elapsed = time.perf_counter() - start_time
    logger.info(f"Paper generation completed in {elapsed:.2f}s: {pdf_path}")

    return BuildResult(
        pdf_path=pdf_path,
        json_path=written_json,
        tier=document.tier,
        break_plan=document.break_plan,
        question_count=document.question_count,
        page_count=document.break_plan.page_count,
        elapsed=elapsed,
        warnings=tuple(warnings),
    )


def regenerate_paper(
    snapshot_path: Path,
    metadata: Optional[TestMetadata] = None,
    config: Optional[BuilderConfig] = None,
    *,
    renderer: Optional[Renderer] = None,
    typesetter: Optional[Typesetter] = None,
) -> BuildResult:
    """
    Rebuild a paper from a (possibly hand-edited) JSON snapshot.

    Extraction is not repeated; the snapshot items are rendered as-is.

    Raises:
        BuildError: If the snapshot is unreadable, invalid or empty
    """
    try:
        items = load_snapshot(snapshot_path)
    except SnapshotError as e:
        raise BuildError(f"Failed to load snapshot: {e}") from e

    if not items:
        raise BuildError(f"No questions in snapshot {snapshot_path}")

    logger.info(f"Regenerating paper with {len(items)} questions from {snapshot_path}")
    return build_paper(items, metadata, config, renderer=renderer, typesetter=typesetter)


def _coerce(item: Any, index: int, warnings: List[str]) -> QuestionItem:
    """Convert one input item, recording a warning if it is incomplete."""
    if isinstance(item, QuestionItem):
        question = item
    elif isinstance(item, dict):
        question = QuestionItem.from_dict(item)
    else:
        warnings.append(f"Question {index + 1}: unrecognized item, rendered blank")
        return QuestionItem()

    if not question.is_valid:
        warnings.append(
            f"Question {index + 1}: missing text or fewer than "
            f"{MIN_OPTIONS} options"
        )
    return question
