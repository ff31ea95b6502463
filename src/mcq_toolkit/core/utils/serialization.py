"""
Snapshot Serialization

Every build writes the exact item list it rendered as a JSON snapshot
beside the PDF. The regenerate flow loads an edited snapshot and renders
again without re-running extraction.

Artifact names are derived from the item count only:
    final_test_{N}.pdf
    extracted_data_{N}.json
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Iterable, List, Tuple

from ..models.questions import QuestionItem
from ..schemas.validator import ValidationError, validate_snapshot

logger = logging.getLogger(__name__)

PDF_NAME_TEMPLATE = "final_test_{count}.pdf"
SNAPSHOT_NAME_TEMPLATE = "extracted_data_{count}.json"


class SnapshotError(Exception):
    """Error reading or writing a question snapshot."""
    pass


def snapshot_paths(output_dir: Path, count: int) -> Tuple[Path, Path]:
    """
    Return the co-located (pdf_path, json_path) pair for ``count`` items.

    Example:
        >>> snapshot_paths(Path("out"), 36)
        (PosixPath('out/final_test_36.pdf'), PosixPath('out/extracted_data_36.json'))
    """
    output_dir = Path(output_dir)
    return (
        output_dir / PDF_NAME_TEMPLATE.format(count=count),
        output_dir / SNAPSHOT_NAME_TEMPLATE.format(count=count),
    )


def serialize_items(items: Iterable[QuestionItem]) -> list[dict]:
    """Serialize items to the extraction wire format, preserving order."""
    return [item.to_dict() for item in items]


def deserialize_items(data: list, *, validate: bool = True) -> List[QuestionItem]:
    """
    Deserialize items from the extraction wire format.

    Args:
        data: List of question dicts
        validate: Whether to validate against the snapshot schema first

    Raises:
        SnapshotError: If validate=True and data is invalid
    """
    if validate:
        try:
            validate_snapshot(data)
        except ValidationError as e:
            raise SnapshotError(str(e)) from e
    return [QuestionItem.from_dict(entry) for entry in data]


def save_snapshot(items: Iterable[QuestionItem], path: Path) -> Path:
    """Write items as pretty-printed JSON, creating parent directories."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    payload = serialize_items(items)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(payload, f, indent=2, ensure_ascii=False)
    logger.debug(f"Wrote snapshot with {len(payload)} items to {path}")
    return path


def load_snapshot(path: Path, *, validate: bool = True) -> List[QuestionItem]:
    """
    Load items from a JSON snapshot.

    Raises:
        SnapshotError: If the file is missing, not JSON, or fails validation
    """
    path = Path(path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError as e:
        raise SnapshotError(f"Snapshot not found: {path}") from e
    except json.JSONDecodeError as e:
        raise SnapshotError(f"Snapshot is not valid JSON: {path}: {e}") from e

    items = deserialize_items(data, validate=validate)
    logger.info(f"Loaded {len(items)} items from {path}")
    return items
