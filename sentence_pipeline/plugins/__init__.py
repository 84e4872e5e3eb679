"""Builtin text plugins.

Each public module defines one or more string -> string transforms and a
``register(registry)`` function. ``BUILTIN_PLUGINS`` in
``sentence_pipeline.discovery`` lists the modules loaded by default.
"""
from ._base import PluginModule, TextPlugin

__all__ = ["PluginModule", "TextPlugin"]
