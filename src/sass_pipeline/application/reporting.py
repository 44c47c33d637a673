"""Compile-error reporting stage."""

from __future__ import annotations

import logging
import re
import sys
from pathlib import Path
from typing import TextIO

from sass_pipeline.application.options import ReporterOptions
from sass_pipeline.records import CompileFailure, FileRecord
from sass_pipeline.types import RecordIterator, RecordStream

logger = logging.getLogger(__name__)

SOURCE_STRING = "source string"
STDIN = "stdin"

# "<file>:<line>: error: <message>" as printed by older libsass bindings.
_LEGACY_ERROR = re.compile(r"(.*):(\d+):\s*error:\s*(.*)")
# "Error: <message>\n  on line <line>:<column> of <file>" as printed by libsass.
_LIBSASS_ERROR = re.compile(
    r"Error:\s*(?P<message>.*?)\s*\n\s*on line (?P<line>\d+)(?::(?P<column>\d+))? of (?P<file>[^\r\n,]+)",
    re.DOTALL,
)


def is_error_marker(record: FileRecord) -> bool:
    """Return ``True`` for placeholder records left by failed compiles."""
    return (
        isinstance(record, CompileFailure)
        and record.is_null
        and bool(record.error_text)
        and record.source is not None
    )


def format_compile_error(error_text: str, source: FileRecord) -> str:
    """Format raw compiler output as ``<path>:<line>:<column>: <message>``.

    Parameters
    ----------
    error_text : str
        Diagnostic text raised by the compiler.
    source : FileRecord
        Record that was being compiled; its path stands in for in-memory
        sources.

    Returns
    -------
    str
        One-line diagnostic. Text in an unrecognised shape is reported against
        ``source`` at line 0 so it is never lost.
    """
    legacy = _LEGACY_ERROR.search(error_text)
    if legacy:
        token, line, message = legacy.groups()
        if token == SOURCE_STRING:
            location = str(source.path)
        else:
            location = str(Path(f"{token}.scss").resolve())
        return f"{location}:{line}:0: {message}"

    modern = _LIBSASS_ERROR.search(error_text)
    if modern:
        token = modern.group("file").strip()
        location = str(source.path) if token == STDIN else str(Path(token).resolve())
        column = modern.group("column") or "0"
        message = " ".join(modern.group("message").split())
        return f"{location}:{modern.group('line')}:{column}: {message}"

    logger.warning("unrecognised compiler error for %s: %r", source.path, error_text)
    lines = [line.strip() for line in error_text.splitlines() if line.strip()]
    return f"{source.path}:0:0: {lines[0] if lines else 'unknown compiler error'}"


class ErrorBuffer:
    """Ordered unique diagnostics collected over one stream.

    ``len()`` counts distinct messages; ``failed`` lists every source that
    failed, even when several share one message.
    """

    def __init__(self) -> None:
        self._messages: list[str] = []
        self.failed: list[Path] = []

    def add(self, message: str, source: Path | None = None) -> None:
        if source is not None:
            self.failed.append(source)
        if message not in self._messages:
            self._messages.append(message)

    @property
    def messages(self) -> list[str]:
        return list(self._messages)

    def __len__(self) -> int:
        return len(self._messages)

    def render(self, options: ReporterOptions) -> str:
        """Render the report block, or an empty string when nothing was buffered."""
        if not self._messages:
            return ""
        body = "\n".join(f"{message}\n" for message in self._messages)
        return f"{options.top_banner}\n{body}\n{options.bottom_banner}"


async def report_errors(
    stream: RecordStream,
    options: ReporterOptions | None = None,
    output: TextIO | None = None,
    buffer: ErrorBuffer | None = None,
) -> RecordIterator:
    """Drop failed-compile markers from ``stream`` and print their diagnostics at the end.

    Parameters
    ----------
    stream : RecordStream
        Output of the transpile stage.
    options : ReporterOptions | None, optional
        Banner layout.
    output : TextIO | None, optional
        Destination for the report; standard output when omitted.
    buffer : ErrorBuffer | None, optional
        Buffer to collect into, exposed so callers can count failures.
    """
    options = options or ReporterOptions()
    buffer = buffer if buffer is not None else ErrorBuffer()
    async for record in stream:
        if is_error_marker(record):
            message = format_compile_error(record.error_text, record.source)
            buffer.add(message, record.source.path)
        else:
            yield record

    report = buffer.render(options)
    if report:
        out = output or sys.stdout
        out.write(report)
        out.flush()
