"""Build configuration loading from TOML files."""

from __future__ import annotations

import logging
import tomllib
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from sass_pipeline.errors import ConfigError
from sass_pipeline.schemas import BuildConfig

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "sass-pipeline.toml"
PYPROJECT_FILENAME = "pyproject.toml"
PYPROJECT_TABLE = ("tool", "sass-pipeline")


def find_config(start: Path | None = None) -> Path:
    """Locate the nearest configuration file at or above ``start``.

    A standalone ``sass-pipeline.toml`` wins over a ``pyproject.toml`` in the
    same directory; a ``pyproject.toml`` only counts when it holds a
    ``[tool.sass-pipeline]`` table.

    Raises
    ------
    ConfigError
        If no configuration is found.
    """
    origin = (start or Path.cwd()).resolve()
    for directory in (origin, *origin.parents):
        candidate = directory / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
        pyproject = directory / PYPROJECT_FILENAME
        if pyproject.is_file() and _pyproject_table(_read_toml(pyproject)) is not None:
            return pyproject
    raise ConfigError(
        f"No {CONFIG_FILENAME} or [tool.sass-pipeline] table found from {origin}."
    )


def _read_toml(path: Path) -> dict[str, Any]:
    try:
        return tomllib.loads(path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"Invalid TOML in {path}: {exc}") from exc


def _pyproject_table(document: dict[str, Any]) -> dict[str, Any] | None:
    table: Any = document
    for key in PYPROJECT_TABLE:
        if not isinstance(table, dict) or key not in table:
            return None
        table = table[key]
    return table if isinstance(table, dict) else None


def load_build_config(path: Path | None = None, **overrides: Any) -> BuildConfig:
    """Load and validate a build configuration.

    Parameters
    ----------
    path : Path | None, optional
        Configuration file; discovered with ``find_config`` when omitted.
    **overrides : Any
        Values replacing those read from the file (``None`` values are
        ignored).

    Returns
    -------
    BuildConfig
        Configuration with paths anchored at the file's directory.

    Raises
    ------
    ConfigError
        If the file is missing, unreadable or fails validation.
    """
    config_path = path or find_config()
    if not config_path.is_file():
        raise ConfigError(f"Configuration file not found: {config_path}")

    document = _read_toml(config_path)
    if config_path.name == PYPROJECT_FILENAME:
        table = _pyproject_table(document)
        if table is None:
            raise ConfigError(f"{config_path} has no [tool.sass-pipeline] table.")
        document = table

    payload = {key.replace("-", "_"): value for key, value in document.items()}
    payload["root"] = config_path.parent / str(payload.get("root", "."))
    payload.update({key: value for key, value in overrides.items() if value is not None})
    try:
        config = BuildConfig.model_validate(payload)
    except ValidationError as exc:
        raise ConfigError(f"Invalid build configuration in {config_path}: {exc}") from exc
    logger.debug("loaded build configuration from %s", config_path)
    return config.resolved()
