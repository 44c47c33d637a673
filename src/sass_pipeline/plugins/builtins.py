"""Built-in compiler plugins."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from sass_pipeline.adapters.compilers import LibsassCompiler
from sass_pipeline.errors import PluginError


class LibsassPluginOptions(BaseModel):
    """Validated options for the built-in libsass plugin."""

    model_config = ConfigDict(extra="ignore", strict=True)

    precision: int | None = Field(default=None, ge=0)
    source_comments: bool = False


class LibsassPlugin:
    """Compile through the libsass bindings."""

    name = "libsass"

    def create(self, options: Mapping[str, Any]) -> LibsassCompiler:
        """Build a ``LibsassCompiler`` from validated options.

        Raises
        ------
        PluginError
            If the options are invalid.
        """
        try:
            parsed = LibsassPluginOptions.model_validate(dict(options))
        except ValidationError as exc:
            raise PluginError(f"Invalid libsass plugin options: {exc}") from exc
        return LibsassCompiler(
            precision=parsed.precision,
            source_comments=parsed.source_comments,
        )
