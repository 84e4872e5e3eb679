"""Line-by-line processing pipeline.

A chain is an ordered list of plugin names resolved through a
PluginRegistry. Every input line has its trailing line break stripped, is
passed through each plugin in order, and is written to the output with a
single ``\\n`` appended.

Output location convention: ``<input path>.processed``.

The chain is resolved before any file is opened, so an unknown plugin name
never leaves an output file behind, and an output path pointing at the
input file itself is refused. Input that turns out not to be valid UTF-8
part-way through removes the partial output; a write failure part-way
through closes both files but leaves the partial output in place.
"""
from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from itertools import islice
from pathlib import Path
from typing import Iterable, Iterator, List, Optional, Sequence, Tuple, Union
import logging

from tqdm import tqdm

from .errors import IOFailure, OutputExists
from .plugins._base import TextPlugin
from .registry import PluginRegistry

logger = logging.getLogger(__name__)

PROCESSED_SUFFIX = ".processed"
# lines handed to the thread pool at once when workers > 1
BATCH_SIZE = 256

PathLike = Union[str, Path]


@dataclass(frozen=True)
class RunResult:
    input: Path
    output: Path
    processors: Tuple[str, ...]
    lines: int


def output_path_for(input_path: PathLike) -> Path:
    p = Path(input_path)
    return p.with_name(p.name + PROCESSED_SUFFIX)


def resolve_chain(registry: PluginRegistry, names: Sequence[str]) -> List[TextPlugin]:
    """Look up every name in order; the first unknown one raises UnknownPlugin."""
    return [registry.resolve(name) for name in names]


def process_line(line: str, chain: Sequence[TextPlugin]) -> str:
    for plugin in chain:
        line = plugin(line)
    return line


def _strip_eol(line: str) -> str:
    if line.endswith("\r\n"):
        return line[:-2]
    if line.endswith("\n") or line.endswith("\r"):
        return line[:-1]
    return line


def process_stream(lines: Iterable[str], chain: Sequence[TextPlugin], workers: int = 1) -> Iterator[str]:
    """Yield each input line transformed by ``chain``, in input order.

    Single forward pass: ``lines`` is consumed lazily and the generator is
    not restartable. With ``workers > 1`` lines are transformed on a thread
    pool one batch at a time; output order still matches input order.
    """
    if workers <= 1:
        for line in lines:
            yield process_line(_strip_eol(line), chain)
        return

    it = iter(lines)
    with ThreadPoolExecutor(max_workers=workers) as pool:
        while True:
            batch = [_strip_eol(line) for line in islice(it, BATCH_SIZE)]
            if not batch:
                break
            yield from pool.map(lambda s: process_line(s, chain), batch)


def _progress(stream: Iterator[str], path: Path) -> Iterator[str]:
    return iter(tqdm(stream, desc=path.name, unit="line"))


def run(
    registry: PluginRegistry,
    input_path: PathLike,
    chain_names: Sequence[str],
    output_path: Optional[PathLike] = None,
    *,
    overwrite: bool = True,
    workers: int = 1,
    progress: bool = False,
) -> RunResult:
    """Resolve ``chain_names``, then stream ``input_path`` into its output file."""
    chain = resolve_chain(registry, chain_names)
    src = Path(input_path)
    dst = Path(output_path) if output_path is not None else output_path_for(src)

    if not src.is_file():
        raise IOFailure(f"Input file not found: {src}")
    if dst.exists() and dst.samefile(src):
        raise IOFailure(f"Output path is the input file itself: {dst}")
    if dst.exists():
        if not overwrite:
            raise OutputExists(f"Output file already exists: {dst}")
        logger.warning("Overwriting existing output %s", dst)

    count = 0
    logger.info("Processing %s with chain %s", src, list(chain_names) or "[]")
    try:
        with open(src, "r", encoding="utf-8", newline="") as fin:
            with open(dst, "w", encoding="utf-8", newline="") as fout:
                stream = process_stream(fin, chain, workers=workers)
                if progress:
                    stream = _progress(stream, src)
                for out in stream:
                    fout.write(out)
                    fout.write("\n")
                    count += 1
    except UnicodeDecodeError as e:
        dst.unlink(missing_ok=True)
        raise IOFailure(f"Input is not valid UTF-8: {src} ({e})") from e
    except OSError as e:
        raise IOFailure(f"I/O error while processing {src} -> {dst}: {e}") from e
    logger.info("Wrote %d lines to %s", count, dst)
    return RunResult(input=src, output=dst, processors=tuple(chain_names), lines=count)


class Pipeline:
    """A chain resolved once against a registry, reusable across inputs."""

    def __init__(self, registry: PluginRegistry, processors: Sequence[str]):
        self.registry = registry
        self.processors = tuple(processors)
        self.chain = resolve_chain(registry, self.processors)

    def process_line(self, line: str) -> str:
        return process_line(line, self.chain)

    def process_stream(self, lines: Iterable[str], workers: int = 1) -> Iterator[str]:
        return process_stream(lines, self.chain, workers=workers)

    def run(self, input_path: PathLike, output_path: Optional[PathLike] = None, **kwargs) -> RunResult:
        return run(self.registry, input_path, self.processors, output_path, **kwargs)


def run_request(registry: PluginRegistry, request, progress: bool = False) -> RunResult:
    """Run a config.ProcessingRequest."""
    return run(
        registry,
        request.input,
        request.processors,
        request.output,
        overwrite=request.overwrite,
        workers=request.workers,
        progress=progress,
    )
