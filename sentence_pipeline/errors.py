"""Error taxonomy for registry, discovery and pipeline runs.

Everything raised on purpose by this package derives from PipelineError so
callers (the CLI, scripts) can catch a single type.
"""
from __future__ import annotations


class PipelineError(Exception):
    """Base class for all sentence_pipeline failures."""


class NameConflict(PipelineError):
    """Raised when a plugin name is registered twice."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Plugin name '{name}' is already registered")


class UnknownPlugin(PipelineError):
    """Raised when a chain references a name with no registered plugin."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"No plugin registered with name '{name}'")


class InvalidPlugin(PipelineError):
    """Raised when a factory produces something that is not callable."""


class RegistryFrozen(PipelineError):
    """Raised on registration after the registry has been frozen."""


class IOFailure(PipelineError):
    """Input missing/unreadable or output unwritable."""


class OutputExists(IOFailure):
    """Output file already present and overwriting was disabled."""


class ConfigError(PipelineError):
    """Malformed or incomplete processing configuration."""
