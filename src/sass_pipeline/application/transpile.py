"""Compile stage: SCSS records in, CSS and source-map records out."""

from __future__ import annotations

import logging

from sass_pipeline.application.libraries import LibraryPathSet
from sass_pipeline.application.options import TranspileOptions
from sass_pipeline.application.ports import SassCompiler
from sass_pipeline.errors import CompileError
from sass_pipeline.records import CompileFailure, FileRecord
from sass_pipeline.sourcemap import sanitize_source_map
from sass_pipeline.types import RecordIterator, RecordStream

logger = logging.getLogger(__name__)


async def compile_record(
    record: FileRecord,
    compiler: SassCompiler,
    libraries: LibraryPathSet,
    options: TranspileOptions,
) -> list[FileRecord]:
    """Compile one source record.

    The compiler runs twice, strictly in sequence: first without a source map,
    then with one. Some compiler builds abort the host process on certain
    errors when a map is requested, so the first call surfaces those errors
    beforehand. The map file is placed in the record's ``cwd`` because
    compilers write map ``sources`` relative to it.

    Parameters
    ----------
    record : FileRecord
        Source stylesheet; only its path is used, not its contents.
    compiler : SassCompiler
        Compiler adapter.
    libraries : LibraryPathSet
        Shared include paths, read at call time.
    options : TranspileOptions
        Output formatting.

    Returns
    -------
    list[FileRecord]
        ``[css, map]`` on success, ``[CompileFailure]`` otherwise.
    """
    map_name = str(record.cwd / f"{record.stem}.css.map")
    try:
        await compiler.compile(
            record.path,
            include_paths=libraries.snapshot(),
            output_style=options.output_style,
            source_map_filename=None,
        )
        output = await compiler.compile(
            record.path,
            include_paths=libraries.snapshot(),
            output_style=options.output_style,
            source_map_filename=map_name,
        )
    except CompileError as exc:
        logger.debug("compile failed for %s: %s", record.path, exc.error_text)
        return [CompileFailure.for_source(record, exc.error_text)]

    logger.debug("compiled %s", record.path)
    source_map = sanitize_source_map(output.source_map or "{}", record.cwd)
    return [
        record.derive(".css", output.css),
        record.derive(".css.map", source_map),
    ]


async def transpile(
    stream: RecordStream,
    compiler: SassCompiler,
    libraries: LibraryPathSet,
    options: TranspileOptions | None = None,
) -> RecordIterator:
    """Compile every record of ``stream``, emitting CSS and map records alternately."""
    options = options or TranspileOptions()
    async for record in stream:
        for output in await compile_record(record, compiler, libraries, options):
            yield output
