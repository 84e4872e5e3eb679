"""Plugin discovery: load every eligible plugin definition exactly once.

Sources understood by ``discover``:
  * dotted module / package names (``"sentence_pipeline.plugins.text"``)
  * already-imported module objects
  * filesystem directories containing ``*.py`` plugin files

Modules and files whose name starts with ``_`` are helpers and are never
loaded as plugin definitions. Every loaded definition must expose a
module-level ``register(registry)`` function.

Builtins come from the static ``BUILTIN_PLUGINS`` table, third-party
packages can hook in through the ``sentence_pipeline.plugins`` entry-point
group, and extra directories may be listed in ``SENTENCE_PIPELINE_PATH``.
"""
from __future__ import annotations

import importlib
import importlib.metadata
import importlib.util
import logging
import os
import pkgutil
import sys
from pathlib import Path
from types import ModuleType
from typing import Iterable, List, Mapping, Optional, Union

from .errors import InvalidPlugin
from .registry import PluginRegistry
from .utils import calculate_checksum

logger = logging.getLogger(__name__)

RESERVED_PREFIX = "_"
ENTRY_POINT_GROUP = "sentence_pipeline.plugins"
PATH_ENV_VAR = "SENTENCE_PIPELINE_PATH"

BUILTIN_PLUGINS = (
    "sentence_pipeline.plugins.replace_tags",
    "sentence_pipeline.plugins.replace_urls",
    "sentence_pipeline.plugins.replace_emails",
    "sentence_pipeline.plugins.text",
    "sentence_pipeline.plugins.strip_markup",
)

Source = Union[str, Path, ModuleType]


def is_eligible(name: str) -> bool:
    return not name.startswith(RESERVED_PREFIX)


def _looks_like_path(source: str) -> bool:
    return os.sep in source or "/" in source or source.startswith((".", "~"))


def _call_register(registry: PluginRegistry, module: ModuleType, key: str) -> bool:
    register = getattr(module, "register", None)
    if not callable(register):
        logger.warning("Plugin module %s has no register(registry) function; skipped", key)
        return False
    register(registry)
    logger.debug("Loaded plugin module %s", key)
    return True


def _load_module(registry: PluginRegistry, module: ModuleType) -> int:
    key = module.__name__
    if key in registry.loaded_modules:
        return 0
    registry.loaded_modules.add(key)
    return int(_call_register(registry, module, key))


def _load_package(registry: PluginRegistry, package: ModuleType) -> int:
    loaded = 0
    for info in sorted(pkgutil.iter_modules(package.__path__), key=lambda m: m.name):
        if not is_eligible(info.name):
            continue
        full_name = f"{package.__name__}.{info.name}"
        if full_name in registry.loaded_modules:
            continue
        try:
            module = importlib.import_module(full_name)
        except Exception as e:
            raise InvalidPlugin(f"Failed to import plugin module {full_name}: {e}") from e
        if info.ispkg:
            loaded += _load_package(registry, module)
        else:
            loaded += _load_module(registry, module)
    return loaded


def _module_name_for_file(path: Path) -> str:
    digest = calculate_checksum(data=str(path))[:10]
    return f"sentence_pipeline_ext_{digest}_{path.stem}"


def _load_file(registry: PluginRegistry, path: Path) -> int:
    key = str(path)
    if key in registry.loaded_modules:
        return 0
    module_name = _module_name_for_file(path)
    spec = importlib.util.spec_from_file_location(module_name, path)
    if spec is None or spec.loader is None:
        raise InvalidPlugin(f"Cannot load plugin file {path}")
    module = importlib.util.module_from_spec(spec)
    sys.modules[module_name] = module
    try:
        spec.loader.exec_module(module)  # type: ignore[attr-defined]
    except Exception as e:
        sys.modules.pop(module_name, None)
        raise InvalidPlugin(f"Failed to load plugin file {path}: {e}") from e
    registry.loaded_modules.add(key)
    return int(_call_register(registry, module, key))


def _load_directory(registry: PluginRegistry, directory: Path) -> int:
    loaded = 0
    for path in sorted(directory.glob("*.py")):
        if not is_eligible(path.name):
            continue
        loaded += _load_file(registry, path.resolve())
    return loaded


def discover(registry: PluginRegistry, sources: Iterable[Source]) -> int:
    """Load plugin definitions from ``sources`` into ``registry``.

    Returns the number of modules whose ``register`` was called. Already
    loaded modules are skipped, so repeated discovery is a no-op. A
    ``NameConflict`` raised by a plugin stops discovery immediately.
    """
    loaded = 0
    for source in sources:
        if isinstance(source, ModuleType):
            module = source
        elif isinstance(source, Path) or os.path.isdir(str(source)) or _looks_like_path(str(source)):
            directory = Path(source).expanduser()
            if not directory.is_dir():
                raise InvalidPlugin(f"Plugin directory not found: {directory}")
            loaded += _load_directory(registry, directory)
            continue
        else:
            try:
                module = importlib.import_module(str(source))
            except (ImportError, TypeError, ValueError) as e:
                raise InvalidPlugin(f"Failed to import plugin source {source}: {e}") from e
        short_name = module.__name__.rsplit(".", 1)[-1]
        if hasattr(module, "__path__"):
            loaded += _load_package(registry, module)
        elif is_eligible(short_name):
            loaded += _load_module(registry, module)
        else:
            logger.debug("Skipping reserved helper module %s", module.__name__)
    logger.info("Discovery loaded %d plugin module(s); %d plugin(s) registered", loaded, len(registry))
    return loaded


def discover_entry_points(registry: PluginRegistry, group: str = ENTRY_POINT_GROUP) -> int:
    """Load plugins advertised by installed distributions.

    Each entry point may resolve to a ``register(registry)`` callable or to a
    module exposing one.
    """
    loaded = 0
    for ep in importlib.metadata.entry_points(group=group):
        key = f"entry_point:{ep.name}"
        if key in registry.loaded_modules:
            continue
        target = ep.load()
        registry.loaded_modules.add(key)
        if isinstance(target, ModuleType):
            loaded += int(_call_register(registry, target, key))
        elif callable(target):
            target(registry)
            loaded += 1
        else:
            raise InvalidPlugin(f"Entry point {ep.name} is neither a module nor a callable")
    return loaded


def env_plugin_dirs(environ: Optional[Mapping[str, str]] = None) -> List[Path]:
    environ = os.environ if environ is None else environ
    raw = environ.get(PATH_ENV_VAR, "")
    return [Path(p).expanduser() for p in raw.split(os.pathsep) if p.strip()]


def build_registry(
    extra_sources: Iterable[Source] = (),
    entry_points: bool = True,
    environ: Optional[Mapping[str, str]] = None,
) -> PluginRegistry:
    """Build, populate and freeze a registry ready to hand to the pipeline."""
    registry = PluginRegistry()
    discover(registry, BUILTIN_PLUGINS)
    discover(registry, [*env_plugin_dirs(environ), *extra_sources])
    if entry_points:
        discover_entry_points(registry)
    return registry.freeze()
