"""Plugin protocol for stylesheet compiler backends."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Protocol, runtime_checkable

from sass_pipeline.application.ports import SassCompiler

PluginOptions = Mapping[str, Any]


@runtime_checkable
class CompilerPlugin(Protocol):
    """Protocol implemented by compiler plugins."""

    name: str

    def create(self, options: PluginOptions) -> SassCompiler:
        """Build a compiler instance.

        Parameters
        ----------
        options : Mapping[str, Any]
            Raw plugin options.

        Returns
        -------
        SassCompiler
            Compiler ready for the transpile stage.
        """
