import argparse
import logging
import sys

from .config import ProcessingRequest, load_config, parse_processors
from .discovery import build_registry
from .errors import PipelineError
from .pipeline import run_request
from .utils import build_run_summary, save_run_summary, setup_logging


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sentence-pipeline",
        description="Apply a chain of text plugins to every line of a UTF-8 file (writes <input>.processed)",
    )
    parser.add_argument("--config", type=str, help="JSON config file with 'input' and 'processors'")
    parser.add_argument("--input", type=str, help="Input text file, one sentence per line (overrides config)")
    parser.add_argument(
        "--processors",
        type=str,
        help="Comma-separated plugin names applied left to right (use --list-plugins to see all)",
    )
    parser.add_argument("--output", type=str, help="Output path (default: <input>.processed)")
    parser.add_argument(
        "--plugin-dir",
        action="append",
        default=[],
        metavar="DIR",
        help="Extra directory of plugin files to load (repeatable; files starting with '_' are skipped)",
    )
    parser.add_argument("--no-entry-points", action="store_true", help="Do not load plugins from installed entry points")
    parser.add_argument("--workers", type=int, help="Number of worker threads for line processing")
    parser.add_argument("--no-clobber", action="store_true", help="Fail instead of overwriting an existing output file")
    parser.add_argument("--summary", type=str, help="Write a JSON run summary (line count, checksums) to this path")
    parser.add_argument("--progress", action="store_true", help="Show a progress bar while processing")
    parser.add_argument("--list-plugins", action="store_true", help="List available plugin names and exit")
    parser.add_argument("--verbose", action="store_true", help="Enable verbose logging")
    return parser


def _build_request(parser: argparse.ArgumentParser, args: argparse.Namespace) -> ProcessingRequest:
    processors = parse_processors(args.processors) if args.processors is not None else None
    if args.config:
        request = load_config(args.config)
    else:
        if not args.input or processors is None:
            parser.error("either --config or both --input and --processors are required")
        request = ProcessingRequest(input=args.input, processors=())
    return request.with_overrides(
        input=args.input,
        processors=processors,
        output=args.output,
        overwrite=False if args.no_clobber else None,
        workers=args.workers,
    )


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(verbose=args.verbose)
    logger = logging.getLogger(__name__)

    try:
        registry = build_registry(extra_sources=args.plugin_dir, entry_points=not args.no_entry_points)
        if args.list_plugins:
            print("Available plugins:")
            for name in registry.names():
                print(f"  - {name}")
            return 0
        request = _build_request(parser, args)
        unknown = [p for p in request.processors if p not in registry]
        if unknown:
            parser.error(f"Unknown plugin(s): {unknown}. Use --list-plugins to view valid names.")
        result = run_request(registry, request, progress=args.progress)
        if args.summary:
            save_run_summary(build_run_summary(result), args.summary)
            logger.info("Run summary saved to %s", args.summary)
    except PipelineError as e:
        logger.error("%s", e)
        print(f"error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
