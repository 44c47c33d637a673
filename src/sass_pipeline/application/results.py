"""Application-layer result objects."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path


@dataclass(frozen=True)
class CompileOutput:
    """Successful compiler output."""

    css: str
    source_map: str | None = None


@dataclass
class BuildResult:
    """Structured outcome of a full pipeline build."""

    written: list[Path] = field(default_factory=list)
    injected: list[Path] = field(default_factory=list)
    failures: int = 0
    strict: bool = False

    @property
    def ok(self) -> bool:
        return self.failures == 0
