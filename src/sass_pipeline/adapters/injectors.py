"""Markup injectors implementing the ``HtmlInjector`` port."""

from __future__ import annotations

import html
import re
from collections.abc import Sequence

DEFAULT_START_TAG = "<!-- inject:css -->"
DEFAULT_END_TAG = "<!-- endinject -->"
LINK_TEMPLATE = '<link rel="stylesheet" href="{href}">'


class MarkerInjector:
    """Replace the text between a start and end comment with link tags.

    Every injection block of a document is rewritten; content already between
    the markers is discarded, so injecting twice gives the same result.

    Parameters
    ----------
    start_tag : str, default="<!-- inject:css -->"
        Opening marker.
    end_tag : str, default="<!-- endinject -->"
        Closing marker.
    template : str, default='<link rel="stylesheet" href="{href}">'
        Format string for one stylesheet reference.
    """

    def __init__(
        self,
        start_tag: str = DEFAULT_START_TAG,
        end_tag: str = DEFAULT_END_TAG,
        template: str = LINK_TEMPLATE,
    ) -> None:
        self.start_tag = start_tag
        self.end_tag = end_tag
        self.template = template
        self._pattern = re.compile(
            rf"(?P<indent>[ \t]*)(?P<start>{re.escape(start_tag)})"
            rf"(?P<body>.*?)(?P<end>{re.escape(end_tag)})",
            re.DOTALL,
        )

    def render_tags(self, hrefs: Sequence[str]) -> list[str]:
        return [self.template.format(href=html.escape(href, quote=True)) for href in hrefs]

    def inject(self, html_text: str, hrefs: Sequence[str]) -> str | None:
        """Rewrite every injection block of ``html_text``.

        Returns
        -------
        str | None
            Amended markup, or ``None`` when the document has no markers.
        """
        tags = self.render_tags(hrefs)

        def _replace(match: re.Match[str]) -> str:
            indent = match.group("indent")
            lines = [f"{indent}{match.group('start')}"]
            lines.extend(f"{indent}{tag}" for tag in tags)
            lines.append(f"{indent}{match.group('end')}")
            return "\n".join(lines)

        amended, count = self._pattern.subn(_replace, html_text)
        return amended if count else None
