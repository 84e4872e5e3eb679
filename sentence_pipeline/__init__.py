from .registry import PluginRegistry
from .discovery import build_registry, discover
from .pipeline import Pipeline, process_line, process_stream, resolve_chain, run
from .config import ProcessingRequest, load_config
from . import errors  # re-export module so callers can catch errors.PipelineError

__all__ = [
    "PluginRegistry",
    "build_registry",
    "discover",
    "Pipeline",
    "process_line",
    "process_stream",
    "resolve_chain",
    "run",
    "ProcessingRequest",
    "load_config",
    "errors",
]
__version__ = "0.1.0"
