#!/usr/bin/env python
"""Cleanup helper to remove pipeline outputs so a directory can be reprocessed.

Usage:
    python scripts/cleanup_outputs.py --output ./data --logs

Flags:
  --output/-o PATH   Directory holding processed files (default: ./data)
  --logs             Also remove sentence_pipeline.log and its rotated copies
  --yes              Do not prompt for confirmation (non-interactive)

Removes (if present): *.processed, *.summary.json, optionally the log files.
"""
from __future__ import annotations
import argparse
from pathlib import Path
import sys

GLOB_TARGETS = [
    '*.processed',
    '*.summary.json',
]

LOG_GLOB = 'sentence_pipeline.log*'


def main(argv: list[str] | None = None) -> int:
    ap = argparse.ArgumentParser(description='Remove sentence pipeline outputs.')
    ap.add_argument('--output','-o', default='data', help='Directory holding processed files (default: data)')
    ap.add_argument('--logs', action='store_true', help='Also remove log files in that directory')
    ap.add_argument('--yes', action='store_true', help='Skip confirmation prompt')
    args = ap.parse_args(argv)

    root = Path(args.output).resolve()
    if not root.exists():
        print(f"Output directory {root} does not exist", file=sys.stderr)
        return 1

    patterns = list(GLOB_TARGETS)
    if args.logs:
        patterns.append(LOG_GLOB)
    existing = sorted({p for pattern in patterns for p in root.glob(pattern) if p.is_file()})
    if not existing:
        print('Nothing to remove.')
        return 0

    print('Will remove:')
    for p in existing:
        print('  -', p)
    if not args.yes:
        resp = input('Proceed? [y/N] ').strip().lower()
        if resp not in {'y','yes'}:
            print('Aborted.')
            return 1

    for p in existing:
        p.unlink()
    print(f"Removed {len(existing)} files. Done.")
    return 0

if __name__ == '__main__':  # pragma: no cover
    raise SystemExit(main())
