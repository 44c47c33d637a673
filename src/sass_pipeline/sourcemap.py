"""Source-map sanitisation for compiler-emitted maps."""

from __future__ import annotations

import json
import re
from collections.abc import Mapping
from pathlib import PurePath
from typing import Any

from sass_pipeline.errors import SourceMapError

# Matches "/", "\" and the JSON-escaped "\\" form of a Windows separator.
_SEPARATOR = r"(?:\\\\|\\|/)"
# "../" or "..\\" as it appears in JSON text.
_PARENT_DIR = r"\.\.(?:/|\\\\)"
_STRIPPED_KEYS = ("file", "sourcesContent")


def cwd_pattern(cwd: str | PurePath) -> re.Pattern[str]:
    """Build the pattern removing ``cwd`` prefixes and ``../`` artefacts.

    Parameters
    ----------
    cwd : str | PurePath
        Working directory whose absolute prefix must not leak into the map.

    Returns
    -------
    re.Pattern[str]
        Pattern matching the working directory in any separator style, or a
        relative parent-directory segment.
    """
    parts = [part for part in re.split(r"[\\/]", str(cwd)) if part]
    if not parts:
        return re.compile(_PARENT_DIR)
    # Optional, so a prefix whose leading separator went with a "../" still matches.
    prefix = f"{_SEPARATOR}?" if str(cwd)[:1] in {"/", "\\"} else ""
    escaped = prefix + _SEPARATOR.join(re.escape(part) for part in parts)
    return re.compile(f"{escaped}|{_PARENT_DIR}")


def _normalize_sources(source_map: dict[str, Any]) -> None:
    sources = source_map.get("sources")
    if isinstance(sources, list):
        source_map["sources"] = [
            item.replace("\\", "/") if isinstance(item, str) else item
            for item in sources
        ]


def dump_source_map(source_map: Mapping[str, Any]) -> str:
    """Serialise a parsed source map with stable two-space indentation."""
    return json.dumps(source_map, indent=2, ensure_ascii=False)


def sanitize_source_map(raw: str, cwd: str | PurePath) -> str:
    """Strip machine-specific paths and inlined sources from a source map.

    Parameters
    ----------
    raw : str
        Source-map JSON text as emitted by the compiler.
    cwd : str | PurePath
        Working directory of the compiled file.

    Returns
    -------
    str
        Pretty-printed JSON without ``file`` or ``sourcesContent`` keys whose
        ``sources`` are root-relative and use forward slashes.

    Raises
    ------
    SourceMapError
        If the stripped text is not a JSON object.
    """
    pattern = cwd_pattern(cwd)
    stripped, count = pattern.subn("", raw)
    # Removing "../" can join the neighbours into a new match ("....//").
    while count:
        stripped, count = pattern.subn("", stripped)
    try:
        source_map = json.loads(stripped)
    except json.JSONDecodeError as exc:
        raise SourceMapError(f"Compiler emitted an unreadable source map: {exc}") from exc
    if not isinstance(source_map, dict):
        raise SourceMapError("Source map must be a JSON object.")
    for key in _STRIPPED_KEYS:
        source_map.pop(key, None)
    _normalize_sources(source_map)
    return dump_source_map(source_map)
