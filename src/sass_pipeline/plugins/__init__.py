"""Plugin interfaces and registry for stylesheet compiler backends."""

from .base import CompilerPlugin
from .registry import CompilerRegistry, create_default_registry

__all__ = ["CompilerPlugin", "CompilerRegistry", "create_default_registry"]
