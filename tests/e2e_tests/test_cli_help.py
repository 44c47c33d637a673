"""End-to-end smoke tests for the installed CLI."""

from __future__ import annotations

import subprocess
from pathlib import Path

import pytest

import sass_pipeline


def test_package_import_smoke() -> None:
    assert sass_pipeline.__version__


def test_cli_help_smoke() -> None:
    """Ensure the installed CLI entrypoint responds to --help."""
    result = subprocess.run(
        ["sass-pipeline", "--help"],
        capture_output=True,
        text=True,
        check=False,
    )

    assert result.returncode == 0, result.stderr
    assert "Compile SCSS to CSS" in result.stdout


def test_cli_build_without_config_fails_cleanly(tmp_path: Path) -> None:
    result = subprocess.run(
        ["sass-pipeline", "build"],
        capture_output=True,
        text=True,
        check=False,
        cwd=tmp_path,
    )

    assert result.returncode == 2
    assert "ConfigError" in result.stderr


def test_cli_build_roundtrip(tmp_path: Path) -> None:
    """Run a configured build with injection through the public CLI."""
    pytest.importorskip("sass")
    (tmp_path / "styles").mkdir()
    (tmp_path / "styles" / "app.scss").write_text("p { color: red; }\n", encoding="utf-8")
    (tmp_path / "index.html").write_text(
        "<head>\n  <!-- inject:css -->\n  <!-- endinject -->\n</head>\n", encoding="utf-8"
    )
    (tmp_path / "sass-pipeline.toml").write_text(
        'sources = ["styles/*.scss"]\n'
        'output-dir = "public"\n'
        'html = ["index.html"]\n',
        encoding="utf-8",
    )

    result = subprocess.run(
        ["sass-pipeline", "build"],
        capture_output=True,
        text=True,
        check=False,
        cwd=tmp_path,
    )

    assert result.returncode == 0, result.stderr
    assert (tmp_path / "public" / "app.css").is_file()
    assert (tmp_path / "public" / "app.css.map").is_file()
    page = (tmp_path / "public" / "index.html").read_text(encoding="utf-8")
    assert '<link rel="stylesheet" href="/app.css">' in page
