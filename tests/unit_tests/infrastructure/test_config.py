"""Unit tests for build configuration discovery and loading."""

from __future__ import annotations

from pathlib import Path

import pytest

from sass_pipeline.errors import ConfigError
from sass_pipeline.infrastructure.config import find_config, load_build_config

STANDALONE = """
sources = ["src/**/*.scss", "!src/**/_*.scss"]
libraries = ["lib/**/*.scss"]
include-paths = ["vendor"]
output-dir = "dist/css"
output-style = "expanded"
banner-width = 40
html = ["site/*.html"]
"""


@pytest.fixture
def project(tmp_path: Path) -> Path:
    root = tmp_path.resolve()
    (root / "nested" / "deeper").mkdir(parents=True)
    return root


def test_find_config_walks_upwards(project: Path) -> None:
    (project / "sass-pipeline.toml").write_text(STANDALONE, encoding="utf-8")
    assert find_config(project / "nested" / "deeper") == project / "sass-pipeline.toml"


def test_find_config_prefers_standalone_over_pyproject(project: Path) -> None:
    (project / "pyproject.toml").write_text('[tool.sass-pipeline]\nsources = ["a.scss"]\n')
    (project / "sass-pipeline.toml").write_text(STANDALONE, encoding="utf-8")
    assert find_config(project).name == "sass-pipeline.toml"


def test_find_config_skips_pyproject_without_table(project: Path) -> None:
    (project / "nested" / "pyproject.toml").write_text('[project]\nname = "x"\n')
    (project / "pyproject.toml").write_text('[tool.sass-pipeline]\nsources = ["a.scss"]\n')
    assert find_config(project / "nested") == project / "pyproject.toml"


def test_find_config_missing_raises(project: Path) -> None:
    with pytest.raises(ConfigError, match="No sass-pipeline.toml"):
        find_config(project / "nested" / "deeper")


def test_load_standalone_resolves_paths(project: Path) -> None:
    path = project / "sass-pipeline.toml"
    path.write_text(STANDALONE, encoding="utf-8")

    config = load_build_config(path)

    assert config.root == project
    assert config.sources == [f"{project}/src/**/*.scss", f"!{project}/src/**/_*.scss"]
    assert config.libraries == [f"{project}/lib/**/*.scss"]
    assert config.include_paths == [f"{project}/vendor"]
    assert config.output_dir == project / "dist" / "css"
    assert config.html_output_dir == project / "dist" / "css"
    assert config.output_style == "expanded"
    assert config.banner_width == 40
    assert config.strict is False


def test_load_pyproject_table_with_root(project: Path) -> None:
    path = project / "pyproject.toml"
    path.write_text(
        '[tool.sass-pipeline]\nroot = "nested"\nsources = ["main.scss"]\n',
        encoding="utf-8",
    )
    config = load_build_config(path)
    assert config.root == project / "nested"
    assert config.sources == [f"{project}/nested/main.scss"]
    assert config.output_dir == project / "nested" / "build" / "css"


def test_overrides_replace_file_values_and_skip_none(project: Path) -> None:
    path = project / "sass-pipeline.toml"
    path.write_text(STANDALONE, encoding="utf-8")
    config = load_build_config(path, output_style="compact", banner_width=None, strict=True)
    assert config.output_style == "compact"
    assert config.banner_width == 40
    assert config.strict is True


@pytest.mark.parametrize(
    ("body", "match"),
    [
        ("sources = [", "Invalid TOML"),
        ("sources = []", "Invalid build configuration"),
        ('sources = ["a.scss"]\noutput-style = "loud"', "Invalid build configuration"),
        ('sources = ["a.scss"]\nunknown = 1', "Invalid build configuration"),
        ('sources = ["a.scss"]\nbanner-width = -1', "Invalid build configuration"),
    ],
)
def test_invalid_configuration_raises(project: Path, body: str, match: str) -> None:
    path = project / "sass-pipeline.toml"
    path.write_text(body, encoding="utf-8")
    with pytest.raises(ConfigError, match=match):
        load_build_config(path)


def test_pyproject_without_table_raises(project: Path) -> None:
    path = project / "pyproject.toml"
    path.write_text('[project]\nname = "x"\n', encoding="utf-8")
    with pytest.raises(ConfigError, match="no \\[tool.sass-pipeline\\] table"):
        load_build_config(path)


def test_missing_file_raises(project: Path) -> None:
    with pytest.raises(ConfigError, match="not found"):
        load_build_config(project / "absent.toml")
