import json
import hashlib
import logging
from logging.handlers import RotatingFileHandler
import os
from datetime import datetime, timezone
from typing import Optional, Dict, Union, Any

LOG_FILE_ENV_VAR = "SENTENCE_PIPELINE_LOG"
LOG_FILE_PATH = "sentence_pipeline.log"


def setup_logging(verbose: bool = False, log_file: Optional[str] = None) -> None:
    """Configure root logging with console and rotating file handlers.

    ``log_file`` falls back to $SENTENCE_PIPELINE_LOG, then sentence_pipeline.log.
    An empty string disables the file handler.
    """
    level = logging.DEBUG if verbose else logging.INFO
    logger = logging.getLogger()
    logger.setLevel(level)

    # Clear existing handlers to honor verbosity changes
    for h in list(logger.handlers):
        logger.removeHandler(h)

    fmt = logging.Formatter(
        fmt="%(asctime)s - %(levelname)s - %(name)s - %(message)s"
    )

    ch = logging.StreamHandler()
    ch.setLevel(level)
    ch.setFormatter(fmt)
    logger.addHandler(ch)

    if log_file is None:
        log_file = os.getenv(LOG_FILE_ENV_VAR, LOG_FILE_PATH)
    if log_file:
        fh = RotatingFileHandler(log_file, maxBytes=1_000_000, backupCount=3, encoding="utf-8")
        fh.setLevel(level)
        fh.setFormatter(fmt)
        logger.addHandler(fh)


def calculate_checksum(
    file_path: Optional[Union[str, os.PathLike]] = None,
    data: Optional[Union[bytes, str]] = None,
    algorithm: str = "sha256",
) -> str:
    """Hex digest of a file (read in 64 KiB blocks) or of in-memory text/bytes."""
    digest = hashlib.new(algorithm)
    if file_path is not None:
        with open(file_path, "rb") as f:
            for block in iter(lambda: f.read(65536), b""):
                digest.update(block)
    elif data is not None:
        digest.update(data.encode("utf-8") if isinstance(data, str) else data)
    else:
        raise ValueError("Either file_path or data must be provided")
    return digest.hexdigest()


def build_run_summary(result: Any) -> Dict[str, Any]:
    """Describe a finished run (a pipeline.RunResult) as a JSON-ready dict."""
    return {
        "generated_at": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
        "input": str(result.input),
        "output": str(result.output),
        "processors": list(result.processors),
        "lines": result.lines,
        "input_checksum": calculate_checksum(file_path=str(result.input)),
        "output_checksum": calculate_checksum(file_path=str(result.output)),
    }


def save_run_summary(summary: Dict[str, Any], path: str) -> None:
    """Save run summary to file."""
    with open(path, "w", encoding="utf-8") as f:
        json.dump(summary, f, indent=2)
