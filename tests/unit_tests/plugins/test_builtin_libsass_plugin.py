"""Unit tests for the built-in libsass compiler plugin."""

from __future__ import annotations

import types

import pytest

from sass_pipeline.adapters import compilers
from sass_pipeline.adapters.compilers import LibsassCompiler
from sass_pipeline.errors import PluginError
from sass_pipeline.plugins.builtins import LibsassPlugin


@pytest.fixture(autouse=True)
def _stub_libsass(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(compilers, "_import_libsass", lambda: types.ModuleType("sass"))


def test_create_with_defaults() -> None:
    compiler = LibsassPlugin().create({})
    assert isinstance(compiler, LibsassCompiler)
    assert compiler.precision is None
    assert compiler.source_comments is False


def test_create_with_options() -> None:
    compiler = LibsassPlugin().create({"precision": 8, "source_comments": True})
    assert compiler.precision == 8
    assert compiler.source_comments is True


@pytest.mark.parametrize(
    "options",
    [{"precision": -1}, {"precision": "8"}, {"source_comments": "yes"}],
)
def test_create_rejects_invalid_options(options: dict[str, object]) -> None:
    with pytest.raises(PluginError, match="Invalid libsass plugin options"):
        LibsassPlugin().create(options)
