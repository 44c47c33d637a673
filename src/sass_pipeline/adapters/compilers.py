"""Stylesheet compilers implementing the ``SassCompiler`` port."""

from __future__ import annotations

import asyncio
import functools
import logging
from collections.abc import Sequence
from pathlib import Path
from types import ModuleType

from sass_pipeline.application.results import CompileOutput
from sass_pipeline.errors import CompileError, DependencyError
from sass_pipeline.types import OutputStyle

logger = logging.getLogger(__name__)


def _import_libsass() -> ModuleType:
    try:
        import sass
    except ImportError as exc:
        raise DependencyError(
            "The libsass compiler requires the 'libsass' package."
        ) from exc
    return sass


class LibsassCompiler:
    """Compile SCSS with libsass.

    libsass blocks while compiling, so every call runs in the loop's default
    executor and is awaited before the next one starts.

    Parameters
    ----------
    precision : int | None, default=None
        Decimal precision for numbers in generated CSS.
    source_comments : bool, default=False
        Emit line-number comments into the CSS.
    """

    def __init__(self, precision: int | None = None, source_comments: bool = False) -> None:
        self._sass = _import_libsass()
        self.precision = precision
        self.source_comments = source_comments

    def _compile_sync(
        self,
        source_path: Path,
        include_paths: Sequence[str],
        output_style: OutputStyle,
        source_map_filename: str | None,
    ) -> CompileOutput:
        kwargs: dict[str, object] = {
            "filename": str(source_path),
            "include_paths": list(include_paths),
            "output_style": output_style,
            "source_comments": self.source_comments,
        }
        if self.precision is not None:
            kwargs["precision"] = self.precision
        if source_map_filename:
            kwargs["source_map_filename"] = source_map_filename
            kwargs["output_filename_hint"] = source_map_filename.removesuffix(".map")
        try:
            result = self._sass.compile(**kwargs)
        except self._sass.CompileError as exc:
            raise CompileError(str(exc)) from exc
        if isinstance(result, tuple):
            css, source_map = result
            return CompileOutput(css=css, source_map=source_map)
        return CompileOutput(css=result)

    async def compile(
        self,
        source_path: Path,
        include_paths: Sequence[str],
        output_style: OutputStyle,
        source_map_filename: str | None = None,
    ) -> CompileOutput:
        """Compile ``source_path`` off the event loop.

        Parameters
        ----------
        source_path : Path
            SCSS entry file.
        include_paths : Sequence[str]
            Directories searched for imported partials.
        output_style : OutputStyle
            libsass output style.
        source_map_filename : str | None, default=None
            Map file name; ``None`` disables map generation.

        Returns
        -------
        CompileOutput
            CSS text and, when requested, the raw source map.

        Raises
        ------
        CompileError
            If libsass rejects the source.
        """
        logger.debug(
            "libsass compile %s (style=%s, map=%s, include_paths=%s)",
            source_path,
            output_style,
            source_map_filename,
            list(include_paths),
        )
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(
            None,
            functools.partial(
                self._compile_sync,
                source_path,
                include_paths,
                output_style,
                source_map_filename,
            ),
        )
