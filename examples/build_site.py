#!/usr/bin/env python3
"""Compose the pipeline stages by hand for a small site.

Layout expected next to this script::

    lib/_theme.scss        partials imported by the pages
    styles/**/*.scss       stylesheets to compile
    pages/**/*.html        pages holding an ``<!-- inject:css -->`` block

Output goes to ``public/``.
"""

from __future__ import annotations

import asyncio
from pathlib import Path

from sass_pipeline import create_pipeline
from sass_pipeline.adapters.filesystem import collect, source_files, write_files
from sass_pipeline.application.reporting import ErrorBuffer

HERE = Path(__file__).resolve().parent
PUBLIC = HERE / "public"


async def main() -> int:
    pipeline = create_pipeline()

    # Include paths must be complete before the first file reaches transpile.
    await collect(pipeline.libraries()(source_files(["lib/**/*.scss"], cwd=HERE, read=False)))

    errors = ErrorBuffer()
    compiled = pipeline.sass_reporter(banner_width=60, buffer=errors)(
        pipeline.transpile("expanded")(source_files(["styles/**/*.scss"], cwd=HERE, read=False))
    )
    written = await collect(write_files(compiled, PUBLIC))

    pages = pipeline.inject_app_css(css_base_path=PUBLIC)(
        source_files(["pages/**/*.html"], cwd=HERE)
    )
    injected = await collect(write_files(pages, PUBLIC))

    print(f"wrote {len(written)} stylesheet file(s), injected {len(injected)} page(s)")
    return 1 if len(errors) else 0


if __name__ == "__main__":
    raise SystemExit(asyncio.run(main()))
