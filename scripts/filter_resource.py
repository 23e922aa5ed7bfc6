#!/usr/bin/env python3
"""
Filter a single resource file outside of a build.

Usage:
  python3 scripts/filter_resource.py --in <resource> --out <output> [--lenient] KEY=VALUE [KEY=VALUE ...]

Replaces ${KEY} placeholders with the provided values using the same engine
as the build. In strict mode (default) an undefined placeholder is an error;
with --lenient it is left unchanged.
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from buildorch.exceptions import BuildError
from buildorch.properties import parse_property_args
from buildorch.variables import PropertyNamespace, SubstitutionEngine


def main(argv: list[str]) -> int:
    ap = argparse.ArgumentParser(description="Substitute ${KEY} placeholders in a resource file")
    ap.add_argument("--in", dest="src", required=True, help="Path to resource file")
    ap.add_argument("--out", dest="dst", required=True, help="Path to output file")
    ap.add_argument("--charset", default="utf-8", help="Filtering charset")
    ap.add_argument("--lenient", action="store_true", help="Leave undefined placeholders untouched")
    ap.add_argument("kv", nargs="*", help="KEY=VALUE pairs used for substitution")
    args = ap.parse_args(argv)

    src_path = Path(args.src)
    dst_path = Path(args.dst)

    if not src_path.exists():
        print(f"Resource not found: {src_path}", file=sys.stderr)
        return 2

    try:
        values = parse_property_args(args.kv)
    except ValueError as e:
        print(str(e), file=sys.stderr)
        return 2

    try:
        text = src_path.read_text(encoding=args.charset)
    except (OSError, UnicodeDecodeError) as e:
        print(f"Failed to read resource: {e}", file=sys.stderr)
        return 1

    try:
        rendered = SubstitutionEngine().apply(
            text,
            PropertyNamespace.compose([values]),
            strict=not args.lenient,
            file_path=str(src_path)
        )
    except BuildError as e:
        print(f"Substitution error: {e}", file=sys.stderr)
        return 2

    try:
        dst_path.parent.mkdir(parents=True, exist_ok=True)
        dst_path.write_text(rendered, encoding=args.charset)
    except OSError as e:
        print(f"Failed to write output: {e}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
