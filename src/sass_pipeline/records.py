"""File records flowing between pipeline stages."""

from __future__ import annotations

from dataclasses import dataclass, replace
from pathlib import Path


@dataclass(frozen=True)
class FileRecord:
    """One file in flight.

    Parameters
    ----------
    path : Path
        Absolute path identifying the file.
    base : Path
        Directory against which ``relative`` is computed.
    cwd : Path
        Working directory the record was created under.
    contents : bytes | None, default=None
        File contents, ``None`` for records that carry no data.
    """

    path: Path
    base: Path
    cwd: Path
    contents: bytes | None = None

    @property
    def relative(self) -> Path:
        """Path of the file relative to ``base``."""
        return self.path.relative_to(self.base)

    @property
    def dirname(self) -> Path:
        return self.path.parent

    @property
    def stem(self) -> str:
        return self.path.stem

    @property
    def is_null(self) -> bool:
        return self.contents is None

    def text(self, encoding: str = "utf-8") -> str:
        """Decode contents, reading from disk for null records."""
        if self.contents is None:
            return self.path.read_text(encoding=encoding)
        return self.contents.decode(encoding)

    def derive(self, suffix: str, contents: bytes | str | None) -> FileRecord:
        """Build a sibling record ``<dirname>/<stem><suffix>``.

        Parameters
        ----------
        suffix : str
            Extension for the new file, including the dot.
        contents : bytes | str | None
            Contents for the new file; strings are UTF-8 encoded.

        Returns
        -------
        FileRecord
            Record sharing ``base`` and ``cwd`` with this one.
        """
        if isinstance(contents, str):
            contents = contents.encode("utf-8")
        return FileRecord(
            path=self.dirname / f"{self.stem}{suffix}",
            base=self.base,
            cwd=self.cwd,
            contents=contents,
        )

    def with_contents(self, contents: bytes | str) -> FileRecord:
        if isinstance(contents, str):
            contents = contents.encode("utf-8")
        return replace(self, contents=contents)

    def rebase(self, base: Path) -> FileRecord:
        """Move the record under a new base, keeping its relative path."""
        return replace(self, path=base / self.relative, base=base)


@dataclass(frozen=True, kw_only=True)
class CompileFailure(FileRecord):
    """Placeholder ``.css`` record for a source the compiler rejected."""

    source: FileRecord
    error_text: str

    @classmethod
    def for_source(cls, source: FileRecord, error_text: str) -> CompileFailure:
        return cls(
            path=source.dirname / f"{source.stem}.css",
            base=source.base,
            cwd=source.cwd,
            source=source,
            error_text=error_text,
        )
