from __future__ import annotations

"""Validate processed outputs against their inputs.

Checks performed for every ``*.processed`` file matched:
    * Source file (same path without the suffix) exists
    * Output is valid UTF-8
    * Output line count equals input line count
    * Output ends with a single line break (when non-empty)

Prints a JSON report. Exit code 0 on success, 1 if any errors.
"""

import json
import glob
import sys
from pathlib import Path

SUFFIX = ".processed"


def count_lines(path: Path) -> int:
    with open(path, 'r', encoding='utf-8', newline='') as f:
        return sum(1 for _ in f)


def validate_output(path: Path):
    errors = []
    if not path.name.endswith(SUFFIX):
        return [f"Not a processed file (missing {SUFFIX} suffix)"]
    source = path.with_name(path.name[:-len(SUFFIX)])
    if not source.exists():
        return [f"Source file missing: {source.name}"]
    try:
        out_lines = count_lines(path)
    except UnicodeDecodeError as e:
        return [f"Output is not valid UTF-8: {e}"]
    try:
        in_lines = count_lines(source)
    except UnicodeDecodeError as e:
        return [f"Source is not valid UTF-8: {e}"]
    if in_lines != out_lines:
        errors.append(f"Line count mismatch: input={in_lines} output={out_lines}")
    data = path.read_bytes()
    if data and not data.endswith(b"\n"):
        errors.append("Output does not end with a line break")
    return errors


def main(argv: list[str] | None = None):
    if argv is None:
        argv = sys.argv
    pattern = argv[1] if len(argv) > 1 else f'data/*{SUFFIX}'
    paths = [Path(p) for p in sorted(glob.glob(pattern))]
    report = []
    total_errors = 0
    for p in paths:
        errs = validate_output(p)
        if errs:
            total_errors += len(errs)
        report.append({'file': p.name, 'errors': errs})
    print(json.dumps(report, indent=2))
    return 1 if total_errors else 0


if __name__ == '__main__':  # pragma: no cover
    raise SystemExit(main(sys.argv))
