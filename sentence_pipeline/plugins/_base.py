"""Plugin contract.

A plugin is anything callable as ``plugin(text) -> text``. Plugin modules
expose a module-level ``register(registry)`` function that makes plain
``registry.register(name, factory)`` calls; discovery invokes it once.

Modules whose name starts with an underscore (like this one) are helpers
and are never loaded as plugin definitions.
"""
from __future__ import annotations

from typing import Protocol, runtime_checkable, TYPE_CHECKING

if TYPE_CHECKING:  # pragma: no cover
    from ..registry import PluginRegistry


@runtime_checkable
class TextPlugin(Protocol):  # pragma: no cover - protocol definition
    def __call__(self, text: str) -> str:
        ...


class PluginModule(Protocol):  # pragma: no cover - protocol definition
    def register(self, registry: "PluginRegistry") -> None:
        """Register plugin factories into the provided registry."""
        ...
