#!/usr/bin/env python3
"""
sass_pipeline.cli.cli

Typer-based CLI for compiling SCSS, reporting compile errors and linking the
generated stylesheets into HTML pages.

Examples
--------
Run the build described by ``sass-pipeline.toml`` (or ``[tool.sass-pipeline]``
in ``pyproject.toml``):

    sass-pipeline build

Compile ad hoc, with a library directory for imported partials:

    sass-pipeline compile "src/**/*.scss" --out build/css --library "lib/**/*.scss"

Link stylesheets into pages:

    sass-pipeline inject "site/**/*.html" --out build/site --css-base build/css
"""

from __future__ import annotations

import logging
import sys
import traceback
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

import typer

from sass_pipeline.errors import PluginError, SassPipelineError
from sass_pipeline.types import OUTPUT_STYLES

app = typer.Typer(
    name="sass-pipeline",
    help="Compile SCSS to CSS, report compile errors and inject stylesheet links.",
    no_args_is_help=True,
)

OUTPUT_STYLE_HELP = f"Output style: {', '.join(OUTPUT_STYLES)}."
BANNER_HELP = "Width of the banner around the error report (0 for none)."
COMPILER_MODULE_HELP = "Compiler plugin module import path or file path (repeatable)."


# -----------------------------
# Dependency checks / utilities
# -----------------------------
@dataclass(frozen=True)
class MissingDep:
    """Represent a missing dependency."""

    import_name: str
    dist_name: str
    purpose: str


def _is_importable(module: str) -> bool:
    """Check whether a module can be resolved.

    Parameters
    ----------
    module : str
        Module name to resolve.

    Returns
    -------
    bool
        ``True`` if the module can be imported, otherwise ``False``.
    """
    try:
        import importlib.util

        return importlib.util.find_spec(module) is not None
    except (ImportError, ValueError):
        return False


def _require_deps(missing: Sequence[MissingDep]) -> None:
    """Raise a Typer error if any required deps are missing."""
    not_found = [d for d in missing if not _is_importable(d.import_name)]
    if not not_found:
        return

    details = "\n".join(
        f"- Missing '{d.import_name}' ({d.purpose}). Install: pip install {d.dist_name}"
        for d in not_found
    )
    raise typer.BadParameter(f"Missing dependencies for this command.\n\n{details}\n")


def _require_compiler(compiler: str) -> None:
    if compiler == "libsass":
        _require_deps([MissingDep("sass", "libsass", "libsass stylesheet compilation")])


def _print_pipeline_error(exc: Exception, debug: bool) -> int:
    """Print a user-friendly pipeline error.

    Parameters
    ----------
    exc : Exception
        Exception raised while running the pipeline.
    debug : bool
        Whether to include traceback details.

    Returns
    -------
    int
        Process exit code.
    """
    typer.echo(f"✗ {type(exc).__name__}: {exc}", err=True)
    if debug:
        typer.echo("\nTraceback:", err=True)
        typer.echo("".join(traceback.format_exception(type(exc), exc, exc.__traceback__)), err=True)
    code = getattr(exc, "exit_code", None)
    if isinstance(code, int) and code > 0:
        return code
    return 1


def _parse_compiler_options(option_items: list[str] | None) -> dict[str, object]:
    """Parse repeatable KEY=VALUE compiler plugin options."""
    parsed: dict[str, object] = {}
    for item in option_items or []:
        if "=" not in item:
            raise typer.BadParameter(
                f"Invalid option entry '{item}'. Use KEY=VALUE format."
            )
        key, raw_value = item.split("=", 1)
        key = key.strip()
        if not key:
            raise typer.BadParameter("Option key cannot be empty.")
        parsed[key] = _coerce_option_value(raw_value)
    return parsed


def _coerce_option_value(raw: str) -> object:
    """Best-effort coercion for CLI key/value options."""
    lowered = raw.lower()
    if lowered in {"true", "false"}:
        return lowered == "true"
    try:
        return int(raw)
    except ValueError:
        return raw


def _validate_output_style(value: str) -> str:
    if value not in OUTPUT_STYLES:
        raise typer.BadParameter(f"Unknown output style '{value}'. {OUTPUT_STYLE_HELP}")
    return value


# -----------------------------
# Global options
# -----------------------------
@app.callback()
def _main(
    ctx: typer.Context,
    debug: bool = typer.Option(False, "--debug", help="Show full tracebacks on error."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log per-file progress."),
) -> None:
    """Initialize shared CLI state and logging."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )
    ctx.obj = {"debug": debug}


# -----------------------------
# Commands
# -----------------------------
@app.command("build")
def build_cmd(
    ctx: typer.Context,
    config: Path | None = typer.Option(
        None,
        "--config",
        "-c",
        exists=True,
        dir_okay=False,
        readable=True,
        help="sass-pipeline.toml or pyproject.toml; discovered upwards when omitted.",
    ),
    output_style: str | None = typer.Option(
        None, "--output-style", help=OUTPUT_STYLE_HELP
    ),
    banner_width: int | None = typer.Option(
        None, "--banner-width", min=0, help=BANNER_HELP
    ),
    strict: bool = typer.Option(
        False, "--strict", help="Exit non-zero when any file fails to compile."
    ),
) -> None:
    """Run the configured build: libraries, compile, report, write, inject."""
    debug: bool = bool(ctx.obj.get("debug", False))
    if output_style is not None:
        _validate_output_style(output_style)

    try:
        from sass_pipeline.api import build_from_config

        overrides: dict[str, object] = {
            "output_style": output_style,
            "banner_width": banner_width,
        }
        if strict:
            overrides["strict"] = True
        result = build_from_config(config, **overrides)
    except SassPipelineError as exc:
        raise typer.Exit(code=_print_pipeline_error(exc, debug))
    except Exception as exc:
        # Unexpected crash: still show a clean message; debug prints traceback.
        raise typer.Exit(code=_print_pipeline_error(exc, debug))

    typer.echo(f"✓ Wrote {len(result.written)} file(s), injected {len(result.injected)} page(s)")
    if result.failures:
        typer.echo(f"✗ {result.failures} compile error(s)", err=True)
        if result.strict:
            raise typer.Exit(code=3)


@app.command("compile")
def compile_cmd(
    ctx: typer.Context,
    sources: list[str] = typer.Argument(..., help="SCSS files or glob patterns."),
    out: Path = typer.Option(..., "--out", "-o", help="Directory for .css and .css.map files."),
    library: list[str] | None = typer.Option(
        None,
        "--library",
        help="Glob of library files whose base directories become include paths (repeatable).",
    ),
    include_path: list[str] | None = typer.Option(
        None, "--include-path", "-I", help="Explicit include directory (repeatable)."
    ),
    output_style: str = typer.Option(
        "compressed", "--output-style", help=OUTPUT_STYLE_HELP
    ),
    banner_width: int = typer.Option(0, "--banner-width", min=0, help=BANNER_HELP),
    compiler: str = typer.Option("libsass", "--compiler", help="Compiler plugin name."),
    compiler_module: list[str] | None = typer.Option(
        None, "--compiler-module", help=COMPILER_MODULE_HELP
    ),
    option: list[str] | None = typer.Option(
        None, "--option", help="Compiler plugin option KEY=VALUE (repeatable)."
    ),
    strict: bool = typer.Option(
        False, "--strict", help="Exit non-zero when any file fails to compile."
    ),
) -> None:
    """Compile SCSS sources into CSS plus sanitised source maps."""
    debug: bool = bool(ctx.obj.get("debug", False))
    _validate_output_style(output_style)
    _require_compiler(compiler)
    compiler_options = _parse_compiler_options(option)

    try:
        from sass_pipeline.api import compile_files

        result = compile_files(
            sources,
            out,
            libraries=library or [],
            include_paths=include_path or [],
            output_style=output_style,
            banner_width=banner_width,
            compiler=compiler,
            compiler_options=compiler_options,
            compiler_modules=compiler_module,
        )
    except SassPipelineError as exc:
        raise typer.Exit(code=_print_pipeline_error(exc, debug))
    except Exception as exc:
        raise typer.Exit(code=_print_pipeline_error(exc, debug))

    typer.echo(f"✓ Wrote {len(result.written)} file(s) to {out}")
    if result.failures and strict:
        raise typer.Exit(code=3)


@app.command("inject")
def inject_cmd(
    ctx: typer.Context,
    html: list[str] = typer.Argument(..., help="HTML files or glob patterns."),
    out: Path = typer.Option(..., "--out", "-o", help="Directory for the amended pages."),
    css_base: Path | None = typer.Option(
        None,
        "--css-base",
        help="Root of the stylesheet tree; defaults to each page's base directory.",
    ),
    relative: bool = typer.Option(
        False, "--relative", help="Link stylesheets relative to the page."
    ),
) -> None:
    """Link the stylesheets beside each page into its inject:css block."""
    debug: bool = bool(ctx.obj.get("debug", False))

    try:
        from sass_pipeline.api import inject_css_files

        written = inject_css_files(html, out, css_base=css_base, relative=relative)
    except SassPipelineError as exc:
        raise typer.Exit(code=_print_pipeline_error(exc, debug))
    except Exception as exc:
        raise typer.Exit(code=_print_pipeline_error(exc, debug))

    typer.echo(f"✓ Injected {len(written)} page(s) into {out}")


@app.command("doctor")
def doctor_cmd(
    compiler_module: list[str] | None = typer.Option(
        None, "--compiler-module", help=COMPILER_MODULE_HELP
    ),
) -> None:
    """Print installed toolchain versions and registered compilers."""
    import importlib.metadata as metadata

    typer.echo(f"Python: {sys.version.split()[0]}")
    for dist in ("libsass", "pydantic", "typer"):
        try:
            typer.echo(f"{dist}: {metadata.version(dist)}")
        except metadata.PackageNotFoundError:
            typer.echo(f"{dist}: <not installed>")

    from sass_pipeline.plugins.registry import create_default_registry

    try:
        registry = create_default_registry(extra_modules=compiler_module)
    except PluginError as exc:
        typer.echo(f"compilers: <unavailable: {exc}>")
        return
    typer.echo(f"compilers: {', '.join(registry.names())}")


if __name__ == "__main__":
    app()
