"""Shared type aliases for pipeline stages."""

from __future__ import annotations

from collections.abc import AsyncIterable, AsyncIterator, Callable, Sequence
from os import PathLike
from typing import Literal

from sass_pipeline.records import FileRecord

OutputStyle = Literal["nested", "expanded", "compact", "compressed"]

OUTPUT_STYLES: tuple[str, ...] = ("nested", "expanded", "compact", "compressed")
DEFAULT_OUTPUT_STYLE: OutputStyle = "compressed"

type StrPath = str | PathLike[str]
type LibraryPathLike = str | Sequence["LibraryPathLike"]

type RecordStream = AsyncIterable[FileRecord]
type RecordIterator = AsyncIterator[FileRecord]

type Stage = Callable[[RecordStream], RecordIterator]
