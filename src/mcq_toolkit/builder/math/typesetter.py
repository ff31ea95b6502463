"""
Module: builder.math.typesetter

Purpose:
    Turn a single LaTeX math span into a rendered glyph image.
    The layout core only talks to the Typesetter protocol; the bundled
    implementation uses matplotlib's mathtext engine.

Key Classes:
    - Typesetter: Protocol for math engines
    - TypesetMath: Rendered span (PNG bytes + pixel size)
    - MathtextTypesetter: matplotlib mathtext implementation
    - TypesetError: Raised when a span cannot be typeset

Dependencies:
    - matplotlib: mathtext parsing and rasterization
    - PIL: Reading rendered image dimensions
"""

from __future__ import annotations

import io
import logging
from dataclasses import dataclass
from typing import Protocol, runtime_checkable

from matplotlib import mathtext
from matplotlib.font_manager import FontProperties
from PIL import Image

logger = logging.getLogger(__name__)

DEFAULT_MATH_DPI = 200
DEFAULT_MATH_FONT_SIZE_PT = 12.0


class TypesetError(Exception):
    """A math span has a syntax error or uses unsupported commands."""
    pass


@dataclass(frozen=True)
class TypesetMath:
    """
    A rendered math span.

    Attributes:
        png: PNG image bytes
        width_px: Image width in pixels
        height_px: Image height in pixels
        dpi: Resolution the image was rendered at
        font_size_pt: Font size the image was rendered at
    """

    png: bytes
    width_px: int
    height_px: int
    dpi: int = DEFAULT_MATH_DPI
    font_size_pt: float = DEFAULT_MATH_FONT_SIZE_PT

    def size_pt(self, target_font_size_pt: float) -> tuple[float, float]:
        """Display size in points when scaled to ``target_font_size_pt`` text."""
        scale = (72.0 / self.dpi) * (target_font_size_pt / self.font_size_pt)
        return self.width_px * scale, self.height_px * scale


@runtime_checkable
class Typesetter(Protocol):
    """Renders one LaTeX span, raising TypesetError on failure."""

    def typeset(self, latex: str, *, display: bool = False) -> TypesetMath:
        ...


class MathtextTypesetter:
    """
    Typesetter backed by matplotlib mathtext.

    mathtext covers the TeX subset used in school papers (fractions,
    roots, sub/superscripts, Greek letters, operators). Anything it
    cannot parse is reported as TypesetError so the caller can keep the
    span as literal text.

    Example:
        >>> math = MathtextTypesetter().typeset(r"x^2")
        >>> math.png[:4]
        b'\\x89PNG'
    """

    def __init__(
        self,
        *,
        dpi: int = DEFAULT_MATH_DPI,
        font_size_pt: float = DEFAULT_MATH_FONT_SIZE_PT,
    ) -> None:
        if dpi <= 0:
            raise ValueError(f"dpi must be positive: {dpi}")
        if font_size_pt <= 0:
            raise ValueError(f"font_size_pt must be positive: {font_size_pt}")
        self.dpi = dpi
        self.font_size_pt = font_size_pt

    def typeset(self, latex: str, *, display: bool = False) -> TypesetMath:
        """
        Render ``latex`` (without delimiters) to a PNG.

        Display spans are rendered 20% larger, mirroring TeX display style.

        Raises:
            TypesetError: On empty input or a mathtext parse error
        """
        if not latex.strip():
            raise TypesetError("Empty math span")

        font_size = self.font_size_pt * (1.2 if display else 1.0)
        buf = io.BytesIO()
        try:
            mathtext.math_to_image(
                f"${latex}$",
                buf,
                prop=FontProperties(size=font_size),
                dpi=self.dpi,
                format="png",
            )
        except (ValueError, RuntimeError) as e:
            raise TypesetError(f"Cannot typeset {latex!r}: {e}") from e

        png = buf.getvalue()
        with Image.open(io.BytesIO(png)) as img:
            width, height = img.size

        return TypesetMath(
            png=png,
            width_px=width,
            height_px=height,
            dpi=self.dpi,
            font_size_pt=self.font_size_pt,
        )
