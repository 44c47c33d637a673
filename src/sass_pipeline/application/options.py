"""Typed option objects shared across pipeline stages."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from sass_pipeline.types import DEFAULT_OUTPUT_STYLE, OutputStyle

BANNER_TOP = "▼"
BANNER_BOTTOM = "▲"


@dataclass(frozen=True)
class TranspileOptions:
    """Compiler formatting configuration."""

    output_style: OutputStyle = DEFAULT_OUTPUT_STYLE


@dataclass(frozen=True)
class ReporterOptions:
    """Error report layout configuration."""

    banner_width: int = 0

    @property
    def top_banner(self) -> str:
        return BANNER_TOP * self.banner_width + "\n" if self.banner_width > 0 else ""

    @property
    def bottom_banner(self) -> str:
        return BANNER_BOTTOM * self.banner_width + "\n" if self.banner_width > 0 else ""


@dataclass(frozen=True)
class InjectOptions:
    """Stylesheet injection configuration."""

    css_base_path: Path | None = None
    relative: bool = False
