"""Library search-path accumulation."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from os import PathLike

from sass_pipeline.types import RecordIterator, RecordStream

logger = logging.getLogger(__name__)


class LibraryPathSet:
    """Ordered unique collection of include directories.

    The set is shared by reference between the library collector and the
    transpiler of one pipeline, so paths added later are visible to later
    compiles only.
    """

    def __init__(self, *values: object) -> None:
        self._paths: list[str] = []
        self._seen: set[str] = set()
        for value in values:
            self.add(value)

    def add(self, value: object) -> None:
        """Add a path, or a nested sequence of paths, uniquely.

        Parameters
        ----------
        value : object
            A path string, a path-like object, or a list/tuple of such values
            nested to any depth. Other values are ignored.
        """
        if isinstance(value, (list, tuple)):
            for item in value:
                self.add(item)
            return
        if isinstance(value, PathLike):
            value = str(value)
        if isinstance(value, str) and value not in self._seen:
            self._seen.add(value)
            self._paths.append(value)
            logger.debug("library path added: %s", value)

    def snapshot(self) -> list[str]:
        """Return the current paths in first-seen order."""
        return list(self._paths)

    def __contains__(self, value: object) -> bool:
        return value in self._seen

    def __iter__(self) -> Iterator[str]:
        return iter(self.snapshot())

    def __len__(self) -> int:
        return len(self._paths)

    def __repr__(self) -> str:
        return f"LibraryPathSet({self._paths!r})"


async def collect_libraries(stream: RecordStream, libraries: LibraryPathSet) -> RecordIterator:
    """Record each file's base directory in ``libraries`` and forward the file."""
    async for record in stream:
        libraries.add(str(record.base))
        yield record
