"""Shared pytest configuration, marker assignment and pipeline test doubles."""

from __future__ import annotations

import json
from collections.abc import Callable, Sequence
from pathlib import Path

import pytest

from sass_pipeline.application.results import CompileOutput
from sass_pipeline.errors import CompileError
from sass_pipeline.records import FileRecord


def pytest_collection_modifyitems(
    config: pytest.Config, items: list[pytest.Item]
) -> None:
    """Attach suite markers based on test file path."""
    del config
    for item in items:
        path = Path(str(item.fspath))
        parts = set(path.parts)
        if "e2e_tests" in parts:
            item.add_marker(pytest.mark.e2e)
        elif "integration_tests" in parts:
            item.add_marker(pytest.mark.integration)
        elif "unit_tests" in parts:
            item.add_marker(pytest.mark.unit)


class FakeCompiler:
    """In-memory ``SassCompiler`` recording every call.

    ``failures`` maps a source file name to the error text raised for it;
    ``map_failures`` does the same for the source-map call only.
    """

    def __init__(
        self,
        failures: dict[str, str] | None = None,
        map_failures: dict[str, str] | None = None,
    ) -> None:
        self.failures = failures or {}
        self.map_failures = map_failures or {}
        self.calls: list[tuple[Path, list[str], str, str | None]] = []

    async def compile(
        self,
        source_path: Path,
        include_paths: Sequence[str],
        output_style: str,
        source_map_filename: str | None = None,
    ) -> CompileOutput:
        self.calls.append((source_path, list(include_paths), output_style, source_map_filename))
        if source_path.name in self.failures:
            raise CompileError(self.failures[source_path.name])
        if source_map_filename and source_path.name in self.map_failures:
            raise CompileError(self.map_failures[source_path.name])
        css = f"/* {source_path.stem} */"
        if not source_map_filename:
            return CompileOutput(css=css)
        source_map = {
            "version": 3,
            "file": source_map_filename.removesuffix(".map"),
            "sources": [str(source_path), "../lib/_vars.scss"],
            "sourcesContent": ["a{}", "$x: 1;"],
            "names": [],
            "mappings": "AAAA",
        }
        return CompileOutput(css=css, source_map=json.dumps(source_map))


@pytest.fixture
def fake_compiler() -> Callable[..., FakeCompiler]:
    """Factory for ``FakeCompiler`` instances."""
    return FakeCompiler


@pytest.fixture
def make_record(tmp_path: Path) -> Callable[..., FileRecord]:
    """Factory building records rooted at ``tmp_path``."""

    def _make(
        relative: str,
        base: str = "src",
        contents: bytes | None = None,
        cwd: Path | None = None,
    ) -> FileRecord:
        base_path = tmp_path / base
        return FileRecord(
            path=base_path / relative,
            base=base_path,
            cwd=cwd or tmp_path,
            contents=contents,
        )

    return _make
