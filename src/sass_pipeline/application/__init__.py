"""Application-layer stages, options and pipeline composition."""

from __future__ import annotations

from sass_pipeline.application.libraries import LibraryPathSet
from sass_pipeline.application.options import (
    InjectOptions,
    ReporterOptions,
    TranspileOptions,
)
from sass_pipeline.application.pipeline import SassPipeline
from sass_pipeline.application.reporting import ErrorBuffer, format_compile_error
from sass_pipeline.application.results import BuildResult, CompileOutput

__all__ = [
    "BuildResult",
    "CompileOutput",
    "ErrorBuffer",
    "InjectOptions",
    "LibraryPathSet",
    "ReporterOptions",
    "SassPipeline",
    "TranspileOptions",
    "format_compile_error",
]
