"""Processing request configuration.

Config files are JSON::

    {
      "input": "corpus/sentences.txt",
      "processors": ["replace_tags", "replace_urls"],
      "output": "corpus/sentences.txt.processed",   # optional
      "overwrite": true,                             # optional
      "workers": 1                                   # optional
    }

Relative paths resolve against the directory holding the config file.
Validation happens here, before any input or output file is touched.
"""
from __future__ import annotations

import json
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Mapping, Optional, Sequence, Tuple

from .errors import ConfigError

REQUIRED_FIELDS = ("input", "processors")


@dataclass(frozen=True)
class ProcessingRequest:
    input: Path
    processors: Tuple[str, ...]
    output: Optional[Path] = None
    overwrite: bool = True
    workers: int = 1

    def with_overrides(
        self,
        input: Optional[str] = None,
        processors: Optional[Sequence[str]] = None,
        output: Optional[str] = None,
        overwrite: Optional[bool] = None,
        workers: Optional[int] = None,
    ) -> "ProcessingRequest":
        changes: dict[str, Any] = {}
        if input is not None:
            changes["input"] = Path(input)
        if processors is not None:
            changes["processors"] = _validate_processors(processors)
        if output is not None:
            changes["output"] = Path(output)
        if overwrite is not None:
            changes["overwrite"] = overwrite
        if workers is not None:
            changes["workers"] = _validate_workers(workers)
        return replace(self, **changes)


def parse_processors(raw: str) -> Tuple[str, ...]:
    """Split a comma-separated chain ("a, b,c") into names."""
    return tuple(s.strip() for s in raw.split(",") if s.strip())


def _validate_processors(value: Any) -> Tuple[str, ...]:
    if isinstance(value, str) or not isinstance(value, (list, tuple)):
        raise ConfigError(f"'processors' must be a list of plugin names, got {type(value).__name__}")
    bad = [v for v in value if not isinstance(v, str) or not v.strip()]
    if bad:
        raise ConfigError(f"'processors' entries must be non-empty strings: {bad!r}")
    return tuple(v.strip() for v in value)


def _validate_workers(value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise ConfigError(f"'workers' must be a positive integer, got {value!r}")
    return value


def _resolve(base_dir: Optional[Path], raw: Any, field: str) -> Path:
    if not isinstance(raw, str) or not raw.strip():
        raise ConfigError(f"'{field}' must be a non-empty path string")
    p = Path(raw).expanduser()
    if base_dir is not None and not p.is_absolute():
        p = base_dir / p
    return p


def request_from_mapping(data: Mapping[str, Any], base_dir: Optional[Path] = None) -> ProcessingRequest:
    if not isinstance(data, Mapping):
        raise ConfigError(f"Configuration must be a JSON object, got {type(data).__name__}")
    missing = [f for f in REQUIRED_FIELDS if f not in data]
    if missing:
        raise ConfigError(f"Missing required config field(s): {missing}")
    output = data.get("output")
    overwrite = data.get("overwrite", True)
    if not isinstance(overwrite, bool):
        raise ConfigError(f"'overwrite' must be true or false, got {overwrite!r}")
    return ProcessingRequest(
        input=_resolve(base_dir, data["input"], "input"),
        processors=_validate_processors(data["processors"]),
        output=_resolve(base_dir, output, "output") if output is not None else None,
        overwrite=overwrite,
        workers=_validate_workers(data.get("workers", 1)),
    )


def load_config(path: str | Path) -> ProcessingRequest:
    p = Path(path)
    try:
        data = json.loads(p.read_text(encoding="utf-8"))
    except FileNotFoundError as e:
        raise ConfigError(f"Config file not found: {p}") from e
    except json.JSONDecodeError as e:
        raise ConfigError(f"Invalid JSON in config file {p}: {e}") from e
    return request_from_mapping(data, base_dir=p.resolve().parent)
