"""
Module: builder.config

Purpose:
    Configuration dataclass for the paper building pipeline. Immutable
    configuration with validation on construction.

Key Classes:
    - BuilderConfig: Main configuration for building papers

Dependencies:
    - dataclasses (std)
    - pathlib (std)

Used By:
    - builder.controller: Main build controller
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from mcq_toolkit.common.thresholds import DENSITY_THRESHOLDS, DensityThresholds
from mcq_toolkit.builder.layout.models import Branding


@dataclass(frozen=True)
class BuilderConfig:
    """
    Configuration for building papers (immutable).

    Attributes:
        output_dir: Directory for final_test_N.pdf / extracted_data_N.json
        target_page_count: Page budget for the paper
        thresholds: Density boundaries and tier styles
        branding: Institution wording for header and footer
        typeset_math: Typeset math spans before rendering
        write_snapshot: Save the item snapshot next to the PDF

    Example:
        >>> config = BuilderConfig(output_dir=Path("output"), target_page_count=3)
    """

    output_dir: Path = Path("output")
    target_page_count: int = 2
    thresholds: DensityThresholds = DENSITY_THRESHOLDS
    branding: Branding = field(default_factory=Branding)
    typeset_math: bool = True
    write_snapshot: bool = True

    def __post_init__(self) -> None:
        """Validate configuration on construction."""
        if self.target_page_count < 1:
            raise ValueError(f"target_page_count must be >= 1: {self.target_page_count}")
        object.__setattr__(self, "output_dir", Path(self.output_dir))
