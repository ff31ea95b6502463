"""
Command line entry point.

    python -m mcq_toolkit build extracted_data_36.json --out output --pages 2
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from mcq_toolkit import __version__
from mcq_toolkit.builder import BuilderConfig, BuildError, regenerate_paper
from mcq_toolkit.builder.layout import Branding
from mcq_toolkit.builder.output import (
    RemoteHtmlRenderer,
    RemoteRendererConfig,
    RenderError,
    ReportLabRenderer,
)
from mcq_toolkit.core.models import TestMetadata

logger = logging.getLogger("mcq_toolkit")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mcq_toolkit",
        description="MCQ test paper builder",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s build extracted_data_36.json --out output
  %(prog)s build edited.json --out output --pages 3 --subject Physics
  %(prog)s build edited.json --renderer remote   (needs PDFBOLT_API_KEY)
        """,
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    sub = parser.add_subparsers(dest="command", required=True)

    build = sub.add_parser("build", help="Render a paper from a JSON snapshot")
    build.add_argument("snapshot", type=Path, help="Question snapshot (JSON array)")
    build.add_argument("--out", type=Path, default=Path("output"), help="Output directory (default: output)")
    build.add_argument("--pages", type=int, default=2, help="Target page count (default: 2)")
    build.add_argument(
        "--renderer",
        choices=("reportlab", "remote"),
        default="reportlab",
        help="PDF backend (default: reportlab)",
    )
    build.add_argument("--no-math", action="store_true", help="Leave math spans un-typeset")
    build.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    meta = build.add_argument_group("paper metadata")
    meta.add_argument("--subject")
    meta.add_argument("--instructor")
    meta.add_argument("--class", dest="class_name")
    meta.add_argument("--date")
    meta.add_argument("--time")
    meta.add_argument("--max-marks")
    meta.add_argument("--min-marks")
    meta.add_argument("--logo", type=Path, help="Logo image for the header")
    return parser


def _metadata_from_args(args: argparse.Namespace) -> TestMetadata:
    return TestMetadata.from_dict({
        "subject": args.subject,
        "instructor": args.instructor,
        "class": args.class_name,
        "date": args.date,
        "time": args.time,
        "maxMarks": args.max_marks,
        "minMarks": args.min_marks,
    })


def main(argv: Optional[List[str]] = None) -> int:
    args = _build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s | %(levelname)s | %(message)s",
    )

    try:
        config = BuilderConfig(
            output_dir=args.out,
            target_page_count=args.pages,
            typeset_math=not args.no_math,
            branding=Branding(logo_path=args.logo),
        )
    except ValueError as e:
        logger.error(str(e))
        return 1

    try:
        if args.renderer == "remote":
            renderer = RemoteHtmlRenderer(RemoteRendererConfig.from_env())
        else:
            renderer = ReportLabRenderer()
    except RenderError as e:
        logger.error(str(e))
        return 1

    try:
        result = regenerate_paper(
            args.snapshot,
            _metadata_from_args(args),
            config,
            renderer=renderer,
        )
    except BuildError as e:
        logger.error(f"Build failed: {e}")
        return 1

    for warning in result.warnings:
        logger.warning(warning)
    logger.info(
        f"Wrote {result.pdf_path} ({result.question_count} questions, "
        f"{result.tier.density_level.slug}, {result.page_count} page(s))"
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
