"""File-record sources and sinks backed by the local filesystem."""

from __future__ import annotations

import glob
import logging
from collections.abc import Iterable, Sequence
from pathlib import Path

from sass_pipeline.records import FileRecord
from sass_pipeline.types import RecordIterator, RecordStream, StrPath

logger = logging.getLogger(__name__)

_MAGIC = frozenset("*?[")


def glob_base(pattern: StrPath) -> Path:
    """Return the leading directory of ``pattern`` that holds no glob magic.

    ``src/styles/**/*.scss`` gives ``src/styles``; a literal file path gives
    its parent directory.
    """
    path = Path(pattern)
    parts: list[str] = []
    for part in path.parts:
        if _MAGIC.intersection(part):
            return Path(*parts) if parts else Path(".")
        parts.append(part)
    return path.parent


def expand_patterns(patterns: Sequence[StrPath], cwd: Path | None = None) -> list[tuple[Path, Path]]:
    """Expand glob patterns into ``(path, base)`` pairs.

    Patterns starting with ``!`` exclude earlier matches. Results keep pattern
    order, are sorted within one pattern, and hold each path once.

    Parameters
    ----------
    patterns : Sequence[StrPath]
        Glob patterns; ``**`` matches recursively.
    cwd : Path | None, optional
        Directory relative patterns are anchored at; the process cwd when
        omitted.

    Returns
    -------
    list[tuple[Path, Path]]
        Absolute file paths with the base of the pattern that matched them.
    """
    root = (cwd or Path.cwd()).resolve()
    matches: dict[Path, Path] = {}
    for raw in patterns:
        text = str(raw)
        negated = text.startswith("!")
        anchored = root / (text[1:] if negated else text)
        found = sorted(
            Path(item).resolve()
            for item in glob.glob(str(anchored), recursive=True)
            if Path(item).is_file()
        )
        if negated:
            for path in found:
                matches.pop(path, None)
            continue
        base = glob_base(anchored).resolve()
        for path in found:
            matches.setdefault(path, base)
    return list(matches.items())


async def source_files(
    patterns: Sequence[StrPath],
    cwd: Path | None = None,
    read: bool = True,
) -> RecordIterator:
    """Yield a record for every file matched by ``patterns``.

    Parameters
    ----------
    patterns : Sequence[StrPath]
        Glob patterns, see ``expand_patterns``.
    cwd : Path | None, optional
        Working directory recorded on each file and used to anchor patterns.
    read : bool, default=True
        Load file contents; otherwise records carry ``None``.
    """
    root = (cwd or Path.cwd()).resolve()
    for path, base in expand_patterns(patterns, root):
        contents = path.read_bytes() if read else None
        yield FileRecord(path=path, base=base, cwd=root, contents=contents)


async def iterate(records: Iterable[FileRecord]) -> RecordIterator:
    """Turn an in-memory sequence of records into a stream."""
    for record in records:
        yield record


async def write_files(stream: RecordStream, out_dir: Path) -> RecordIterator:
    """Write records with contents beneath ``out_dir`` and forward them re-based.

    Null records are forwarded untouched.
    """
    target = out_dir.resolve()
    async for record in stream:
        if record.is_null:
            yield record
            continue
        written = record.rebase(target)
        written.path.parent.mkdir(parents=True, exist_ok=True)
        written.path.write_bytes(record.contents or b"")
        logger.debug("wrote %s", written.path)
        yield written


async def collect(stream: RecordStream) -> list[FileRecord]:
    """Drain ``stream`` into a list."""
    return [record async for record in stream]
