"""Compiler plugin registry and discovery helpers."""

from __future__ import annotations

import importlib
import importlib.util
from collections.abc import Iterable, Mapping
from pathlib import Path
from types import ModuleType
from typing import Any

from pydantic import ValidationError

from sass_pipeline.application.ports import SassCompiler
from sass_pipeline.errors import PluginError
from sass_pipeline.plugins.base import CompilerPlugin
from sass_pipeline.plugins.builtins import LibsassPlugin
from sass_pipeline.schemas import CompilerResolutionConfig


class CompilerRegistry:
    """Registry for compiler plugins."""

    def __init__(self) -> None:
        self._plugins: dict[str, CompilerPlugin] = {}

    def register(self, plugin: CompilerPlugin) -> None:
        """Register plugin instance by unique name.

        Parameters
        ----------
        plugin : CompilerPlugin
            Plugin instance to register.

        Raises
        ------
        PluginError
            If plugin does not provide a valid name.
        """
        name = getattr(plugin, "name", "").strip()
        if not name:
            raise PluginError("Plugin must define a non-empty 'name'.")
        self._plugins[name] = plugin

    def names(self) -> list[str]:
        """Return registered plugin names, sorted."""
        return sorted(self._plugins.keys())

    def get(self, name: str) -> CompilerPlugin:
        """Get plugin by name.

        Raises
        ------
        PluginError
            If plugin name is not registered.
        """
        try:
            return self._plugins[name]
        except KeyError as exc:
            raise PluginError(
                f"Unknown compiler '{name}'. Available compilers: {', '.join(self.names())}"
            ) from exc

    def create(self, name: str = "libsass", options: Mapping[str, Any] | None = None) -> SassCompiler:
        """Resolve a plugin by name and build its compiler.

        Parameters
        ----------
        name : str, default="libsass"
            Registered plugin name.
        options : Mapping[str, Any] | None, optional
            Raw plugin options.

        Returns
        -------
        SassCompiler
            Compiler produced by the plugin.

        Raises
        ------
        PluginError
            If the request is invalid or the plugin is unknown.
        """
        try:
            payload = CompilerResolutionConfig(name=name, options=dict(options or {}))
        except ValidationError as exc:
            raise PluginError(f"Invalid compiler resolution options: {exc}") from exc
        return self.get(payload.name).create(payload.options)

    def load_module(self, module_or_path: str) -> None:
        """Load plugin providers from module name or file path.

        .. warning::
            This method executes code from the specified module. Only load plugins
            from trusted sources.
        """
        module = _import_module_or_path(module_or_path)
        _register_from_module(module, self)


def _import_module_or_path(module_or_path: str) -> ModuleType:
    """Import module by import path or filesystem path.

    Parameters
    ----------
    module_or_path : str
        Python module path or local file path. Must be from a trusted source.

    Returns
    -------
    ModuleType
        Imported module object.

    Raises
    ------
    PluginError
        If import cannot be completed.
    """
    candidate = Path(module_or_path)
    if candidate.exists():
        spec = importlib.util.spec_from_file_location(candidate.stem, candidate)
        if spec is None or spec.loader is None:
            raise PluginError(f"Unable to load plugin module from {candidate}.")
        module = importlib.util.module_from_spec(spec)
        spec.loader.exec_module(module)
        return module

    try:
        return importlib.import_module(module_or_path)
    except Exception as exc:
        raise PluginError(
            f"Unable to import plugin module '{module_or_path}': {exc}"
        ) from exc


def _register_from_module(module: ModuleType, registry: CompilerRegistry) -> None:
    """Register plugin definitions found in module."""
    if hasattr(module, "register_plugins"):
        module.register_plugins(registry)
        return

    plugins_obj = getattr(module, "PLUGINS", None)
    if plugins_obj is not None:
        for plugin in plugins_obj:
            registry.register(plugin)
        return

    plugin_obj = getattr(module, "PLUGIN", None)
    if plugin_obj is not None:
        registry.register(plugin_obj)
        return

    raise PluginError(
        "Plugin module must expose register_plugins(registry), PLUGINS, or PLUGIN."
    )


def create_default_registry(
    extra_modules: Iterable[str] | None = None,
) -> CompilerRegistry:
    """Create a registry holding the built-in libsass plugin plus ``extra_modules``."""
    registry = CompilerRegistry()
    registry.register(LibsassPlugin())
    for module in extra_modules or []:
        registry.load_module(module)
    return registry
