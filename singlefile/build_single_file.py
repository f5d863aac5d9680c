#!/usr/bin/env python3
from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import List, Optional


ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from singlefile.bundler import build_single_file
from singlefile.config import DEFAULT_CONFIG_NAME, load_config
from singlefile.errors import SingleFileBuildError


def _parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description=(
            "Bundle a WebGL build (loader, framework, wasm and data files) into "
            "a single self-contained HTML document."
        )
    )
    parser.add_argument(
        "build_dir",
        nargs="?",
        default=None,
        help="Build directory holding index.html and the Build folder.",
    )
    parser.add_argument(
        "--output",
        default=None,
        help="Path of the bundled document (default: rewrite index.html in place).",
    )
    parser.add_argument(
        "--config",
        default=None,
        help=f"JSON config file (default: ./{DEFAULT_CONFIG_NAME} when present).",
    )
    parser.add_argument(
        "--build-folder",
        default=None,
        help="Name of the subfolder holding the generated build files.",
    )
    parser.add_argument(
        "--host-document",
        default=None,
        help="Name of the host HTML document inside the build directory.",
    )
    parser.add_argument(
        "--build-command",
        nargs=argparse.REMAINDER,
        default=None,
        help=(
            "External build command to run first; everything after this flag "
            "is passed through. Bundling only happens if it succeeds."
        ),
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        help=(
            "Fail instead of warning on ambiguous build files or document "
            "patterns that cannot be found."
        ),
    )
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> None:
    args = _parse_args(argv)

    try:
        config = load_config(Path(args.config) if args.config else None)
        config = config.with_overrides(
            build_dir=Path(args.build_dir).resolve() if args.build_dir else None,
            output_path=Path(args.output).resolve() if args.output else None,
            build_folder=args.build_folder,
            host_document=args.host_document,
            build_command=args.build_command or None,
            strict=True if args.strict else None,
        )
        result = build_single_file(config)
    except SingleFileBuildError as exc:
        print(f"error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    if result.build_report is not None:
        print(f"Build succeeded: {result.build_report.total_size} bytes")
    print(f"Single file build created at: {result.output_path}")
    print(f"- loader: {result.artifacts.loader.name} (inlined)")
    for payload in result.payloads:
        print(f"- {payload.role.label}: {payload.size} bytes ({payload.media_type})")
    print(f"- document: {result.bytes_written} bytes")
    for message in result.warnings:
        print(f"- warning: {message}")


if __name__ == "__main__":
    main()
