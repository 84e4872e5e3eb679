"""Name -> plugin registry.

A registry is an explicit object built once at startup (see
``discovery.build_registry``) and handed to the pipeline. Registration
happens through plain ``register`` calls made by each plugin module's
``register(registry)`` function.
"""
from __future__ import annotations

import logging
from typing import Callable, Dict, Iterator, List, Set

from .errors import InvalidPlugin, NameConflict, RegistryFrozen, UnknownPlugin
from .plugins._base import TextPlugin

logger = logging.getLogger(__name__)

PluginFactory = Callable[[], TextPlugin]


class PluginRegistry:
    """Owns the name -> plugin mapping and guarantees name uniqueness."""

    def __init__(self) -> None:
        self._plugins: Dict[str, TextPlugin] = {}
        self._frozen = False
        # module names already loaded by discovery, so each loads once
        self.loaded_modules: Set[str] = set()

    def register(self, name: str, factory: PluginFactory) -> TextPlugin:
        """Instantiate ``factory`` once and store it under ``name``.

        The conflict check runs before the factory is called, so a failed
        registration leaves the registry untouched.
        """
        if self._frozen:
            raise RegistryFrozen(f"Cannot register '{name}': registry is frozen")
        if not isinstance(name, str) or not name:
            raise InvalidPlugin(f"Plugin name must be a non-empty string, got {name!r}")
        if name in self._plugins:
            raise NameConflict(name)
        plugin = factory()
        if not callable(plugin):
            raise InvalidPlugin(f"Factory for '{name}' returned non-callable {type(plugin).__name__}")
        self._plugins[name] = plugin
        logger.debug("Registered plugin '%s' (%s)", name, type(plugin).__name__)
        return plugin

    def resolve(self, name: str) -> TextPlugin:
        try:
            return self._plugins[name]
        except KeyError:
            raise UnknownPlugin(name) from None

    def names(self) -> List[str]:
        return sorted(self._plugins)

    def freeze(self) -> "PluginRegistry":
        self._frozen = True
        return self

    @property
    def frozen(self) -> bool:
        return self._frozen

    def __contains__(self, name: object) -> bool:
        return name in self._plugins

    def __len__(self) -> int:
        return len(self._plugins)

    def __iter__(self) -> Iterator[str]:
        return iter(self.names())
