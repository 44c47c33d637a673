"""Build-pipeline stages for compiling SCSS and linking the resulting CSS."""

from __future__ import annotations

from sass_pipeline.application.pipeline import SassPipeline
from sass_pipeline.records import CompileFailure, FileRecord

__version__ = "0.1.0"


def create_pipeline(*library_paths: str) -> SassPipeline:
    """Create a pipeline instance with its own library-path set.

    Parameters
    ----------
    *library_paths : str
        Explicit include directories added up front.

    Returns
    -------
    SassPipeline
        Object exposing ``libraries``, ``transpile``, ``sass_reporter`` and
        ``inject_app_css`` stage factories.
    """
    pipeline = SassPipeline()
    pipeline.library_paths.add(list(library_paths))
    return pipeline


__all__ = [
    "CompileFailure",
    "FileRecord",
    "SassPipeline",
    "create_pipeline",
    "__version__",
]
