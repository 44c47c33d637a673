"""Application ports for clean architecture boundaries."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from typing import Protocol

from sass_pipeline.application.results import CompileOutput
from sass_pipeline.types import OutputStyle


class SassCompiler(Protocol):
    """Compile one stylesheet source file."""

    async def compile(
        self,
        source_path: Path,
        include_paths: Sequence[str],
        output_style: OutputStyle,
        source_map_filename: str | None = None,
    ) -> CompileOutput:
        """Compile ``source_path``; raise ``CompileError`` on rejection."""


class HtmlInjector(Protocol):
    """Insert stylesheet references into markup text."""

    def inject(self, html: str, hrefs: Sequence[str]) -> str | None:
        """Return amended markup, or ``None`` when there is no injection point."""
