"""Public file-based API (runs pipeline stages to completion)."""

from __future__ import annotations

import asyncio
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any, Optional, TextIO

from sass_pipeline.adapters.filesystem import collect, source_files, write_files
from sass_pipeline.application.pipeline import SassPipeline
from sass_pipeline.application.reporting import ErrorBuffer
from sass_pipeline.application.results import BuildResult
from sass_pipeline.infrastructure.config import load_build_config


def build_from_config(
    config_path: Optional[Path] = None,
    *,
    output: Optional[TextIO] = None,
    **overrides: Any,
) -> BuildResult:
    """Load a build configuration and run it."""
    config = load_build_config(config_path, **overrides)
    pipeline = SassPipeline(
        compiler_name=config.compiler,
        compiler_modules=config.compiler_modules,
    )
    return asyncio.run(pipeline.build(config, output=output))


async def _compile_files(
    pipeline: SassPipeline,
    sources: Sequence[str],
    output_dir: Path,
    libraries: Sequence[str],
    output_style: str,
    banner_width: int,
    output: Optional[TextIO],
) -> BuildResult:
    await collect(pipeline.libraries()(source_files(libraries, read=False)))
    buffer = ErrorBuffer()
    stream = pipeline.sass_reporter(banner_width, output, buffer)(
        pipeline.transpile(output_style)(source_files(sources, read=False))
    )
    written = await collect(write_files(stream, output_dir))
    return BuildResult(
        written=[record.path for record in written],
        failures=len(buffer.failed),
    )


def compile_files(
    sources: Sequence[str],
    output_dir: Path,
    *,
    libraries: Sequence[str] = (),
    include_paths: Sequence[str] = (),
    output_style: str = "compressed",
    banner_width: int = 0,
    compiler: str = "libsass",
    compiler_options: Optional[Mapping[str, Any]] = None,
    compiler_modules: Optional[Sequence[str]] = None,
    output: Optional[TextIO] = None,
) -> BuildResult:
    """Compile SCSS files matched by ``sources`` into ``output_dir``."""
    pipeline = SassPipeline(
        compiler_name=compiler,
        compiler_options=compiler_options,
        compiler_modules=list(compiler_modules or []),
    )
    pipeline.library_paths.add([str(Path(path).resolve()) for path in include_paths])
    return asyncio.run(
        _compile_files(
            pipeline,
            sources,
            output_dir,
            libraries,
            output_style,
            banner_width,
            output,
        )
    )


async def _inject_files(
    pipeline: SassPipeline,
    html: Sequence[str],
    output_dir: Path,
    css_base: Optional[Path],
    relative: bool,
) -> list[Path]:
    stream = pipeline.inject_app_css(css_base, relative)(source_files(html))
    return [record.path for record in await collect(write_files(stream, output_dir))]


def inject_css_files(
    html: Sequence[str],
    output_dir: Path,
    *,
    css_base: Optional[Path] = None,
    relative: bool = False,
) -> list[Path]:
    """Link sibling stylesheets into markup files and write them to ``output_dir``."""
    return asyncio.run(_inject_files(SassPipeline(), html, output_dir, css_base, relative))
