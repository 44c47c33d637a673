"""Exception hierarchy shared across pipeline stages and the CLI."""

from __future__ import annotations


class SassPipelineError(Exception):
    """Base error for all pipeline failures."""

    exit_code = 1


class ConfigError(SassPipelineError):
    """Invalid stage options or build configuration."""

    exit_code = 2


class CompileError(SassPipelineError):
    """The stylesheet compiler rejected a source file.

    Parameters
    ----------
    error_text : str
        Raw diagnostic text produced by the compiler.
    """

    exit_code = 3

    def __init__(self, error_text: str) -> None:
        super().__init__(error_text)
        self.error_text = error_text


class SourceMapError(SassPipelineError):
    """A compiler-emitted source map could not be sanitised."""

    exit_code = 4


class InjectionError(SassPipelineError):
    """Stylesheet links could not be injected into a markup file."""

    exit_code = 5


class PluginError(SassPipelineError):
    """Compiler plugin registration or resolution failed."""

    exit_code = 6


class DependencyError(SassPipelineError):
    """An optional third-party dependency is not installed."""

    exit_code = 7
