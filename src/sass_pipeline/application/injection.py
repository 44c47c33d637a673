"""Stylesheet injection stage for markup files."""

from __future__ import annotations

import logging
import os
from pathlib import Path

from sass_pipeline.application.options import InjectOptions
from sass_pipeline.application.ports import HtmlInjector
from sass_pipeline.errors import InjectionError
from sass_pipeline.records import FileRecord
from sass_pipeline.types import RecordIterator, RecordStream

logger = logging.getLogger(__name__)


def stylesheet_directory(record: FileRecord, css_base_path: Path | None = None) -> tuple[Path, Path]:
    """Locate the directory holding stylesheets for a markup file.

    The markup file's directory, taken relative to its base, is applied to the
    CSS base.

    Returns
    -------
    tuple[Path, Path]
        The CSS base and the directory to search.
    """
    html_dir = record.dirname.resolve()
    html_base = record.base.resolve()
    css_base = css_base_path.resolve() if css_base_path else html_base
    try:
        return css_base, css_base / html_dir.relative_to(html_base)
    except ValueError:
        return css_base, html_dir


def stylesheet_hrefs(
    record: FileRecord,
    css_base_path: Path | None = None,
    relative: bool = False,
) -> list[str]:
    """List link targets for the ``*.css`` files next to a markup file.

    Parameters
    ----------
    record : FileRecord
        Markup file.
    css_base_path : Path | None, optional
        Root of the stylesheet tree; the markup base when omitted.
    relative : bool, default=False
        Emit paths relative to the markup file instead of root-relative ones.

    Returns
    -------
    list[str]
        Forward-slash link targets, sorted by file name.
    """
    css_base, css_dir = stylesheet_directory(record, css_base_path)
    stylesheets = sorted(path for path in css_dir.glob("*.css") if path.is_file())
    if relative:
        html_dir = record.dirname.resolve()
        return [Path(os.path.relpath(path, html_dir)).as_posix() for path in stylesheets]
    return ["/" + path.relative_to(css_base).as_posix() for path in stylesheets]


async def inject_css(
    stream: RecordStream,
    injector: HtmlInjector,
    options: InjectOptions | None = None,
) -> RecordIterator:
    """Reference the stylesheets found beside each markup file of ``stream``.

    Raises
    ------
    InjectionError
        If a markup file is not valid UTF-8.
    """
    options = options or InjectOptions()
    async for record in stream:
        hrefs = stylesheet_hrefs(record, options.css_base_path, options.relative)
        try:
            markup = record.text()
        except UnicodeDecodeError as exc:
            raise InjectionError(f"Cannot read {record.path} as UTF-8 markup: {exc}") from exc
        amended = injector.inject(markup, hrefs)
        if amended is None:
            logger.warning("no stylesheet injection point in %s", record.path)
            yield record
            continue
        logger.debug("injected %d stylesheet(s) into %s", len(hrefs), record.path)
        yield record.with_contents(amended)
