#!/usr/bin/env python3
"""Example plugin compiling through the Dart Sass command-line executable.

Load it with ``--compiler-module examples/dart_sass_plugin.py --compiler dart-sass``
or ``compiler-modules = ["examples/dart_sass_plugin.py"]`` in the build
configuration.
"""

from __future__ import annotations

import asyncio
import json
import os
import shutil
import tempfile
from collections.abc import Mapping, Sequence
from pathlib import Path
from urllib.parse import urlparse
from urllib.request import url2pathname

from sass_pipeline.application.results import CompileOutput
from sass_pipeline.errors import CompileError, DependencyError, PluginError

# Dart Sass only knows these two; the libsass-only styles fall back to expanded.
_STYLES = {
    "nested": "expanded",
    "expanded": "expanded",
    "compact": "expanded",
    "compressed": "compressed",
}


def _relocate_sources(raw: str, map_dir: Path) -> str:
    """Rewrite absolute ``file:`` URLs in ``sources`` relative to where the map belongs."""
    source_map = json.loads(raw)
    source_map["sources"] = [
        Path(os.path.relpath(url2pathname(urlparse(source).path), map_dir)).as_posix()
        if source.startswith("file:")
        else source
        for source in source_map.get("sources", [])
    ]
    return json.dumps(source_map)


class DartSassCompiler:
    """Run ``sass`` once per file in a scratch directory."""

    def __init__(self, executable: str) -> None:
        self.executable = executable

    async def compile(
        self,
        source_path: Path,
        include_paths: Sequence[str],
        output_style: str,
        source_map_filename: str | None = None,
    ) -> CompileOutput:
        with tempfile.TemporaryDirectory(prefix="dart-sass-") as scratch:
            map_name = Path(source_map_filename or "out.css.map").name
            target = Path(scratch) / map_name.removesuffix(".map")
            args = [
                f"--style={_STYLES.get(output_style, 'expanded')}",
                "--source-map" if source_map_filename else "--no-source-map",
                "--source-map-urls=absolute",
                *(f"--load-path={path}" for path in include_paths),
                str(source_path),
                str(target),
            ]
            process = await asyncio.create_subprocess_exec(
                self.executable,
                *args,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
            _, stderr = await process.communicate()
            if process.returncode != 0:
                raise CompileError(stderr.decode("utf-8", errors="replace"))

            css = target.read_text(encoding="utf-8")
            map_path = target.with_name(f"{target.name}.map")
            source_map = None
            if source_map_filename:
                source_map = _relocate_sources(
                    map_path.read_text(encoding="utf-8"), Path(source_map_filename).parent
                )
        return CompileOutput(css=css, source_map=source_map)


class DartSassPlugin:
    """Compile with the first ``sass`` executable on ``PATH`` (or ``executable``)."""

    name = "dart-sass"

    def create(self, options: Mapping[str, object]) -> DartSassCompiler:
        executable = options.get("executable", "sass")
        if not isinstance(executable, str):
            raise PluginError("dart-sass option 'executable' must be a string.")
        resolved = shutil.which(executable)
        if resolved is None:
            raise DependencyError(f"Dart Sass executable '{executable}' not found on PATH.")
        return DartSassCompiler(resolved)


PLUGIN = DartSassPlugin()
