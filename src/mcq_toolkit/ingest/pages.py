"""
Module: ingest.pages

Purpose:
    Turn uploaded source files (scanned pages or PDFs) into JPEG page
    buffers for the extraction service. PDFs are split into one image
    per page; images are re-encoded to RGB JPEG.

Key Functions:
    - load_page_buffers(): Validate and convert a batch of files

Key Classes:
    - IngestConfig: Upload limits and encoding settings
    - IngestError: Rejected or unreadable input

Dependencies:
    - fitz (PyMuPDF): PDF page rendering
    - PIL.Image: Image decoding and JPEG encoding

Used By:
    - ingest.extraction: collect_items()
"""

from __future__ import annotations

import io
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List, Sequence, Tuple

import fitz
from PIL import Image, UnidentifiedImageError

logger = logging.getLogger(__name__)

IMAGE_SUFFIXES = (".jpg", ".jpeg", ".png")
PDF_SUFFIX = ".pdf"


class IngestError(Exception):
    """Input file rejected or unreadable."""
    pass


@dataclass(frozen=True)
class IngestConfig:
    """
    Upload limits and page encoding settings (immutable).

    Attributes:
        max_file_size: Per-file size limit in bytes
        max_files: Maximum number of files per batch
        allowed_suffixes: Accepted file extensions (lowercase)
        dpi: Rendering resolution for PDF pages
        jpeg_quality: JPEG quality for every page buffer
    """

    max_file_size: int = 10 * 1024 * 1024
    max_files: int = 10
    allowed_suffixes: Tuple[str, ...] = IMAGE_SUFFIXES + (PDF_SUFFIX,)
    dpi: int = 200
    jpeg_quality: int = 90

    def __post_init__(self) -> None:
        """Validate configuration on construction."""
        if self.max_file_size <= 0:
            raise ValueError(f"max_file_size must be positive: {self.max_file_size}")
        if self.max_files <= 0:
            raise ValueError(f"max_files must be positive: {self.max_files}")
        if self.dpi <= 0:
            raise ValueError(f"dpi must be positive: {self.dpi}")
        if not 1 <= self.jpeg_quality <= 95:
            raise ValueError(f"jpeg_quality must be in 1..95: {self.jpeg_quality}")


def load_page_buffers(
    paths: Sequence[Path],
    config: IngestConfig = IngestConfig(),
) -> List[bytes]:
    """
    Validate uploaded files and convert them to JPEG page buffers.

    Pages are returned in file order, then page order within a PDF.

    Args:
        paths: Uploaded files
        config: Limits and encoding settings

    Returns:
        List of JPEG-encoded pages

    Raises:
        IngestError: If the batch is empty or too large, a file is missing,
            too big, of an unsupported type, or cannot be decoded
    """
    if not paths:
        raise IngestError("No files uploaded")
    if len(paths) > config.max_files:
        raise IngestError(f"Too many files: {len(paths)} > {config.max_files}")

    buffers: List[bytes] = []
    for raw_path in paths:
        path = Path(raw_path)
        _check_file(path, config)
        if path.suffix.lower() == PDF_SUFFIX:
            pages = _pdf_pages(path, config)
        else:
            pages = [_image_page(path, config)]
        logger.debug(f"{path.name}: {len(pages)} page(s)")
        buffers.extend(pages)

    logger.info(f"Loaded {len(buffers)} page(s) from {len(paths)} file(s)")
    return buffers


def _check_file(path: Path, config: IngestConfig) -> None:
    suffix = path.suffix.lower()
    if suffix not in config.allowed_suffixes:
        raise IngestError(f"Only JPG, PNG, and PDF files are allowed: {path.name}")
    if not path.is_file():
        raise IngestError(f"File not found: {path}")
    size = path.stat().st_size
    if size > config.max_file_size:
        raise IngestError(
            f"File too large: {path.name} is {size} bytes (limit {config.max_file_size})"
        )


def _encode_jpeg(image: Image.Image, quality: int) -> bytes:
    buf = io.BytesIO()
    image.convert("RGB").save(buf, format="JPEG", quality=quality)
    return buf.getvalue()


def _image_page(path: Path, config: IngestConfig) -> bytes:
    try:
        with Image.open(path) as image:
            return _encode_jpeg(image, config.jpeg_quality)
    except (UnidentifiedImageError, OSError) as e:
        raise IngestError(f"Cannot decode image {path.name}: {e}") from e


def _pdf_pages(path: Path, config: IngestConfig) -> List[bytes]:
    """Render each PDF page to an RGB JPEG."""
    matrix = fitz.Matrix(config.dpi / 72.0, config.dpi / 72.0)
    pages: List[bytes] = []
    try:
        with fitz.open(path) as doc:
            for page in doc:
                pix = page.get_pixmap(matrix=matrix, alpha=False, colorspace=fitz.csRGB)
                image = Image.frombytes("RGB", (pix.width, pix.height), pix.samples)
                pages.append(_encode_jpeg(image, config.jpeg_quality))
    except RuntimeError as e:
        raise IngestError(f"Cannot open PDF {path.name}: {e}") from e

    if not pages:
        raise IngestError(f"PDF has no pages: {path.name}")
    return pages
