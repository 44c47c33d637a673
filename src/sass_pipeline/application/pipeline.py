"""Pipeline instance tying the four stages to one library-path set."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any, TextIO

from pydantic import ValidationError

from sass_pipeline.adapters.filesystem import collect, source_files, write_files
from sass_pipeline.adapters.injectors import MarkerInjector
from sass_pipeline.application.injection import inject_css
from sass_pipeline.application.libraries import LibraryPathSet, collect_libraries
from sass_pipeline.application.options import InjectOptions, ReporterOptions, TranspileOptions
from sass_pipeline.application.ports import HtmlInjector, SassCompiler
from sass_pipeline.application.reporting import ErrorBuffer, report_errors
from sass_pipeline.application.results import BuildResult
from sass_pipeline.application.transpile import transpile
from sass_pipeline.errors import ConfigError
from sass_pipeline.schemas import BuildConfig, InjectConfig, ReporterConfig, TranspileConfig
from sass_pipeline.types import LibraryPathLike, RecordStream, Stage, StrPath

logger = logging.getLogger(__name__)


class SassPipeline:
    """One build pipeline: library collection, compilation, reporting and injection.

    Every stage factory returns a callable that takes a record stream and
    returns the transformed stream, so stages compose by nesting::

        pipeline = SassPipeline()
        await collect(pipeline.libraries()(source_files(["lib/**/*.scss"])))
        stream = pipeline.sass_reporter(80)(pipeline.transpile()(source_files(["src/*.scss"])))

    The transpiler reads whatever library paths have been collected when each
    file is compiled. Callers composing stages by hand must drain the library
    stream before the first source reaches ``transpile``; ``build`` does so.

    Parameters
    ----------
    compiler : SassCompiler | None, optional
        Compiler adapter; built from the plugin registry on first use when
        omitted.
    injector : HtmlInjector | None, optional
        Markup injector; ``MarkerInjector`` when omitted.
    library_paths : LibraryPathSet | None, optional
        Shared include-path set; a fresh one per pipeline when omitted.
    compiler_name : str, default="libsass"
        Plugin used to build the default compiler.
    compiler_options : Mapping[str, Any] | None, optional
        Options for that plugin.
    compiler_modules : list[str] | None, optional
        Extra plugin modules to load before resolving ``compiler_name``.
    """

    def __init__(
        self,
        compiler: SassCompiler | None = None,
        injector: HtmlInjector | None = None,
        library_paths: LibraryPathSet | None = None,
        *,
        compiler_name: str = "libsass",
        compiler_options: Mapping[str, Any] | None = None,
        compiler_modules: list[str] | None = None,
    ) -> None:
        self._compiler = compiler
        self._injector = injector or MarkerInjector()
        self.library_paths = library_paths if library_paths is not None else LibraryPathSet()
        self._compiler_name = compiler_name
        self._compiler_options = dict(compiler_options or {})
        self._compiler_modules = list(compiler_modules or [])

    @property
    def compiler(self) -> SassCompiler:
        if self._compiler is None:
            from sass_pipeline.plugins.registry import create_default_registry

            registry = create_default_registry(extra_modules=self._compiler_modules)
            self._compiler = registry.create(self._compiler_name, self._compiler_options)
        return self._compiler

    def libraries(self, *paths: LibraryPathLike) -> Stage:
        """Add explicit library paths now and return the base-collecting stage.

        Parameters
        ----------
        *paths : str | Sequence
            Library directories, or nested sequences of them.
        """
        self.library_paths.add(list(paths))

        def stage(stream: RecordStream):
            return collect_libraries(stream, self.library_paths)

        return stage

    def transpile(self, output_style: str | None = None) -> Stage:
        """Return the compile stage.

        Parameters
        ----------
        output_style : str | None, optional
            One of ``nested``, ``expanded``, ``compact`` or ``compressed``
            (the default).

        Raises
        ------
        ConfigError
            If ``output_style`` is not supported.
        """
        try:
            config = TranspileConfig.model_validate(
                {} if output_style is None else {"output_style": output_style}
            )
        except ValidationError as exc:
            raise ConfigError(f"Invalid transpile options: {exc}") from exc
        options = TranspileOptions(output_style=config.output_style)

        def stage(stream: RecordStream):
            return transpile(stream, self.compiler, self.library_paths, options)

        return stage

    def sass_reporter(
        self,
        banner_width: int | None = None,
        output: TextIO | None = None,
        buffer: ErrorBuffer | None = None,
    ) -> Stage:
        """Return the error-reporting stage.

        Parameters
        ----------
        banner_width : int | None, optional
            Width of the banner lines around the report; 0 or ``None`` for none.
        output : TextIO | None, optional
            Report destination, standard output when omitted.
        buffer : ErrorBuffer | None, optional
            Collects the formatted diagnostics for the caller.
        """
        try:
            config = ReporterConfig(banner_width=banner_width or 0)
        except ValidationError as exc:
            raise ConfigError(f"Invalid reporter options: {exc}") from exc
        options = ReporterOptions(banner_width=config.banner_width)

        def stage(stream: RecordStream):
            return report_errors(stream, options, output, buffer)

        return stage

    def inject_app_css(self, css_base_path: StrPath | None = None, relative: bool = False) -> Stage:
        """Return the stage linking sibling stylesheets into markup files.

        Parameters
        ----------
        css_base_path : StrPath | None, optional
            Root of the stylesheet tree; each markup file's base when omitted.
        relative : bool, default=False
            Link with paths relative to the markup file.
        """
        try:
            config = InjectConfig(
                css_base_path=None if css_base_path is None else Path(css_base_path),
                relative=relative,
            )
        except ValidationError as exc:
            raise ConfigError(f"Invalid injection options: {exc}") from exc
        options = InjectOptions(css_base_path=config.css_base_path, relative=config.relative)

        def stage(stream: RecordStream):
            return inject_css(stream, self._injector, options)

        return stage

    async def build(self, config: BuildConfig, output: TextIO | None = None) -> BuildResult:
        """Run a configured build end to end.

        Library collection finishes before compilation starts. Compiled files
        are written beneath ``config.output_dir``; markup files, when
        configured, are linked against that directory (or ``config.css_base``)
        and written beneath ``config.html_output_dir``.

        Returns
        -------
        BuildResult
            Written and injected paths plus the number of reported failures.
        """
        result = BuildResult(strict=config.strict)
        self.library_paths.add(config.include_paths)
        await collect(
            self.libraries()(source_files(config.libraries, cwd=config.root, read=False))
        )
        logger.debug("include paths: %s", self.library_paths.snapshot())

        buffer = ErrorBuffer()
        compiled = self.sass_reporter(config.banner_width, output, buffer)(
            self.transpile(config.output_style)(
                source_files(config.sources, cwd=config.root, read=False)
            )
        )
        async for record in write_files(compiled, config.output_dir):
            result.written.append(record.path)
        result.failures = len(buffer.failed)

        if config.html:
            css_base = config.css_base or config.output_dir
            html_out = config.html_output_dir or config.output_dir
            injected = self.inject_app_css(css_base, config.relative_links)(
                source_files(config.html, cwd=config.root)
            )
            async for record in write_files(injected, html_out):
                result.injected.append(record.path)
        return result
