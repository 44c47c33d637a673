"""Pydantic schemas for runtime validation of stage options and build config."""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator

from sass_pipeline.types import DEFAULT_OUTPUT_STYLE, OutputStyle


class TranspileConfig(BaseModel):
    """Validated options for the transpile stage."""

    model_config = ConfigDict(extra="forbid")

    output_style: OutputStyle = DEFAULT_OUTPUT_STYLE


class ReporterConfig(BaseModel):
    """Validated options for the error reporter stage."""

    model_config = ConfigDict(extra="forbid")

    banner_width: int = Field(default=0, ge=0)


class InjectConfig(BaseModel):
    """Validated options for the stylesheet injection stage."""

    model_config = ConfigDict(extra="forbid")

    css_base_path: Path | None = None
    relative: bool = False


class CompilerResolutionConfig(BaseModel):
    """Validated input for compiler plugin resolution."""

    model_config = ConfigDict(extra="forbid")

    name: str = "libsass"
    options: dict[str, object] = Field(default_factory=dict)

    @field_validator("name")
    @classmethod
    def _validate_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("compiler name cannot be empty.")
        return value


class BuildConfig(BaseModel):
    """Declarative description of a full stylesheet build.

    Relative paths are resolved against ``root`` by ``resolved()``.
    """

    model_config = ConfigDict(extra="forbid")

    root: Path = Field(default_factory=Path.cwd)
    libraries: list[str] = Field(default_factory=list)
    include_paths: list[str] = Field(default_factory=list)
    sources: list[str] = Field(min_length=1)
    output_dir: Path = Path("build/css")
    output_style: OutputStyle = DEFAULT_OUTPUT_STYLE
    banner_width: int = Field(default=0, ge=0)
    html: list[str] = Field(default_factory=list)
    css_base: Path | None = None
    html_output_dir: Path | None = None
    relative_links: bool = False
    compiler: str = "libsass"
    compiler_modules: list[str] = Field(default_factory=list)
    strict: bool = False

    @field_validator("libraries", "include_paths", "sources", "html")
    @classmethod
    def _validate_patterns(cls, value: list[str]) -> list[str]:
        if any(not item.strip() for item in value):
            raise ValueError("path and glob entries cannot be empty.")
        return value

    def resolved(self) -> BuildConfig:
        """Return a copy with every relative path anchored at ``root``."""
        root = self.root.resolve()

        def anchor(value: str) -> str:
            negated = value.startswith("!")
            path = Path(value[1:] if negated else value)
            if not path.is_absolute():
                path = root / path
            return f"!{path}" if negated else str(path)

        css_base = self.css_base
        if css_base is not None and not css_base.is_absolute():
            css_base = root / css_base
        output_dir = self.output_dir if self.output_dir.is_absolute() else root / self.output_dir
        html_output_dir = self.html_output_dir or output_dir
        if not html_output_dir.is_absolute():
            html_output_dir = root / html_output_dir
        return self.model_copy(
            update={
                "root": root,
                "libraries": [anchor(item) for item in self.libraries],
                "include_paths": [anchor(item) for item in self.include_paths],
                "sources": [anchor(item) for item in self.sources],
                "html": [anchor(item) for item in self.html],
                "output_dir": output_dir,
                "css_base": css_base,
                "html_output_dir": html_output_dir,
            }
        )
