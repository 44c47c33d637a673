"""Unit tests for the transpile stage."""

from __future__ import annotations

import asyncio
import json

from sass_pipeline.adapters.filesystem import collect, iterate
from sass_pipeline.application.libraries import LibraryPathSet
from sass_pipeline.application.options import TranspileOptions
from sass_pipeline.application.transpile import transpile
from sass_pipeline.records import CompileFailure


def _run(records, compiler, libraries=None, options=None):
    libraries = libraries if libraries is not None else LibraryPathSet()
    return asyncio.run(collect(transpile(iterate(records), compiler, libraries, options)))


def test_success_emits_css_then_sanitised_map(make_record, fake_compiler, tmp_path) -> None:
    """A successful compile yields ``<stem>.css`` followed by ``<stem>.css.map``."""
    source = make_record("theme/main.scss")
    css, source_map = _run([source], fake_compiler())

    assert css.path == source.dirname / "main.css"
    assert source_map.path == source.dirname / "main.css.map"
    assert css.base == source_map.base == source.base
    assert css.contents == b"/* main */"

    parsed = json.loads(source_map.contents)
    assert "file" not in parsed
    assert "sourcesContent" not in parsed
    for entry in parsed["sources"]:
        assert str(tmp_path) not in entry
        assert "../" not in entry
    assert parsed["sources"] == ["/src/theme/main.scss", "lib/_vars.scss"]


def test_plain_compile_runs_before_source_map_call(make_record, fake_compiler, tmp_path) -> None:
    """The compiler is called without a map first, then with one placed in cwd."""
    compiler = fake_compiler()
    _run([make_record("theme/main.scss")], compiler, options=TranspileOptions("expanded"))
    assert [call[3] for call in compiler.calls] == [None, str(tmp_path / "main.css.map")]
    assert {call[2] for call in compiler.calls} == {"expanded"}


def test_default_output_style_is_compressed(make_record, fake_compiler) -> None:
    compiler = fake_compiler()
    _run([make_record("main.scss")], compiler)
    assert compiler.calls[0][2] == "compressed"


def test_plain_compile_failure_emits_single_marker(make_record, fake_compiler) -> None:
    """A failing compile yields one null record with both side fields."""
    source = make_record("broken.scss")
    compiler = fake_compiler(failures={"broken.scss": "broken:3: error: bad"})
    (marker,) = _run([source], compiler)

    assert isinstance(marker, CompileFailure)
    assert marker.is_null
    assert marker.path.name == "broken.css"
    assert marker.source == source
    assert marker.error_text == "broken:3: error: bad"
    assert len(compiler.calls) == 1


def test_map_call_failure_emits_single_marker(make_record, fake_compiler) -> None:
    """Errors from the second call are handled like first-call errors."""
    compiler = fake_compiler(map_failures={"main.scss": "late"})
    (marker,) = _run([make_record("main.scss")], compiler)
    assert isinstance(marker, CompileFailure)
    assert marker.error_text == "late"


def test_failure_does_not_stop_the_stream(make_record, fake_compiler) -> None:
    """Later files still compile after an error."""
    compiler = fake_compiler(failures={"a.scss": "nope"})
    out = _run([make_record("a.scss"), make_record("b.scss")], compiler)
    assert [record.path.name for record in out] == ["a.css", "b.css", "b.css.map"]


def test_include_paths_read_at_call_time(make_record, fake_compiler) -> None:
    """Paths added after a compile are only seen by later compiles."""
    compiler = fake_compiler()
    libraries = LibraryPathSet("/lib/one")

    async def scenario() -> None:
        stream = transpile(
            iterate([make_record("a.scss"), make_record("b.scss")]),
            compiler,
            libraries,
        )
        await anext(stream)
        libraries.add("/lib/two")
        await collect(stream)

    asyncio.run(scenario())
    assert compiler.calls[0][1] == ["/lib/one"]
    assert compiler.calls[-1][1] == ["/lib/one", "/lib/two"]
