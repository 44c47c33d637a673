"""Integration tests running the stages against the real libsass compiler."""

from __future__ import annotations

import asyncio
import io
import json
from pathlib import Path

import pytest

from sass_pipeline import create_pipeline
from sass_pipeline.adapters.filesystem import collect, source_files, write_files
from sass_pipeline.application.reporting import ErrorBuffer

pytest.importorskip("sass")


@pytest.fixture
def project(tmp_path: Path) -> Path:
    root = tmp_path.resolve()
    (root / "lib").mkdir()
    (root / "lib" / "_vars.scss").write_text("$brand: #336699;\n", encoding="utf-8")
    (root / "src" / "pages").mkdir(parents=True)
    (root / "src" / "main.scss").write_text(
        '@import "vars";\nbody { color: $brand; }\n', encoding="utf-8"
    )
    (root / "src" / "pages" / "about.scss").write_text(
        "h1 { margin: 0; }\n", encoding="utf-8"
    )
    return root


async def _run(project: Path, output: io.StringIO, buffer: ErrorBuffer) -> list[Path]:
    pipeline = create_pipeline()
    await collect(pipeline.libraries()(source_files(["lib/**/*.scss"], cwd=project)))
    stream = pipeline.sass_reporter(20, output, buffer)(
        pipeline.transpile("compressed")(source_files(["src/**/*.scss"], cwd=project))
    )
    written = await collect(write_files(stream, project / "dist"))
    return [record.path for record in written]


def test_compiles_with_library_imports_and_clean_maps(project: Path) -> None:
    output = io.StringIO()
    buffer = ErrorBuffer()

    written = asyncio.run(_run(project, output, buffer))

    dist = project / "dist"
    assert sorted(path.relative_to(dist).as_posix() for path in written) == [
        "main.css",
        "main.css.map",
        "pages/about.css",
        "pages/about.css.map",
    ]
    css = (dist / "main.css").read_text(encoding="utf-8")
    assert css.startswith("body{color:")
    assert "$brand" not in css
    source_map = json.loads((dist / "main.css.map").read_text(encoding="utf-8"))
    assert "file" not in source_map
    assert "sourcesContent" not in source_map
    assert sorted(source_map["sources"]) == ["lib/_vars.scss", "src/main.scss"]
    assert len(buffer) == 0
    assert output.getvalue() == ""


def test_reports_syntax_errors_and_continues(project: Path) -> None:
    (project / "src" / "broken.scss").write_text("a { color: ; \n", encoding="utf-8")
    output = io.StringIO()
    buffer = ErrorBuffer()

    written = asyncio.run(_run(project, output, buffer))

    names = {path.name for path in written}
    assert "main.css" in names
    assert "broken.css" not in names
    assert len(buffer) == 1
    report = output.getvalue()
    assert "broken.scss:" in report
    assert report.startswith("▼" * 20)
    assert report.rstrip("\n").endswith("▲" * 20)


def test_map_sources_do_not_depend_on_process_directory(
    project: Path, tmp_path_factory: pytest.TempPathFactory, monkeypatch: pytest.MonkeyPatch
) -> None:
    """Sources stay relative to the project when compiling from elsewhere."""
    monkeypatch.chdir(tmp_path_factory.mktemp("elsewhere"))

    asyncio.run(_run(project, io.StringIO(), ErrorBuffer()))

    source_map = json.loads((project / "dist" / "main.css.map").read_text(encoding="utf-8"))
    sources = source_map["sources"]
    assert sorted(sources) == ["lib/_vars.scss", "src/main.scss"]
    for entry in sources:
        assert "../" not in entry
        assert str(project).lstrip("/") not in entry
