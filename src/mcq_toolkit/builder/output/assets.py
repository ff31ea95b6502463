"""
Module: builder.output.assets

Purpose:
    Load header images for the output backends. A logo that cannot be
    read is dropped with a warning so the paper still renders.

Key Functions:
    - load_logo_png(): Read and downscale a logo to PNG bytes

Dependencies:
    - Pillow: Image decoding and resizing

Used By:
    - builder.output.renderer: ReportLab header
    - builder.output.html: HTML header
"""

from __future__ import annotations

import io
import logging
from pathlib import Path
from typing import Optional

from PIL import Image, UnidentifiedImageError

logger = logging.getLogger(__name__)

# Longest side in pixels; the logo prints at roughly 12 mm
LOGO_MAX_PX = 240


def load_logo_png(path: Optional[Path]) -> Optional[bytes]:
    """
    Read the image at ``path`` and return it as PNG bytes.

    Args:
        path: Logo file, or None

    Returns:
        PNG bytes, or None when there is no path or the file cannot be decoded

    Example:
        >>> png = load_logo_png(Path("assets/college_logo.jpg"))
    """
    if path is None:
        return None

    try:
        with Image.open(path) as img:
            img.load()
            logo = img.convert("RGBA")
    except (UnidentifiedImageError, OSError) as e:
        logger.warning(f"Skipping logo {path}: {e}")
        return None

    logo.thumbnail((LOGO_MAX_PX, LOGO_MAX_PX))
    buf = io.BytesIO()
    logo.save(buf, format="PNG")
    return buf.getvalue()
