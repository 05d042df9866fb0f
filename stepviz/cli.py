"""Command-line entry point: analyze, transpile and trace a source file."""

from __future__ import annotations

import argparse
import json
import logging
import sys

from . import constants
from .api import (
    VisualizationStatus,
    analyze_source,
    instrument_source,
    transpile_source,
    visualize,
)
from .languages import SUPPORTED_LANGUAGES, UnsupportedLanguageError
from .run_types import RunConfig

DEMO_SOURCE = """\
let x = 1;
for (let i = 0; i < 2; i++) {
  x = x * 2;
}
"""


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="stepviz", description="Step-by-step program visualizer")
    parser.add_argument("file", nargs="?",
                        help="Source file to visualize")
    parser.add_argument("--language", "-l", default=constants.HOST_LANGUAGE,
                        choices=SUPPORTED_LANGUAGES,
                        help=f"Source language (default: {constants.HOST_LANGUAGE})")
    parser.add_argument("--max-steps", "-n", type=int, default=1000,
                        help="Maximum captured steps (default: 1000)")
    parser.add_argument("--transpile-only", action="store_true",
                        help="Only print the HostLang program")
    parser.add_argument("--analyze-only", action="store_true",
                        help="Only print the structure report")
    parser.add_argument("--instrumented", action="store_true",
                        help="Print the program with its capture points")
    parser.add_argument("--verbose", "-v", action="store_true",
                        help="Log pipeline stages and every captured step")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if not args.file:
        source = DEMO_SOURCE
        print("No file provided. Using built-in demo:\n")
        print(source)
    else:
        with open(args.file) as f:
            source = f.read()

    if args.analyze_only:
        print("═══ Structure ═══")
        print(json.dumps(analyze_source(source, args.language).model_dump(mode="json"), indent=2))
        return 0

    try:
        if args.transpile_only:
            print("═══ HostLang ═══")
            print(transpile_source(source, args.language))
            return 0
        if args.instrumented:
            print("═══ Instrumented ═══")
            print(instrument_source(source, args.language).listing())
            return 0
    except UnsupportedLanguageError as exc:
        print(str(exc), file=sys.stderr)
        return 2

    report = analyze_source(source, args.language)
    print(f"═══ Complexity: {report.complexity.value} ═══")
    result = visualize(source, args.language, config=RunConfig(max_steps=args.max_steps))
    print("\n═══ Trace ═══")
    print(json.dumps(result.to_dict(), indent=2))
    return 0 if result.status in (VisualizationStatus.OK, VisualizationStatus.EMPTY) else 1


if __name__ == "__main__":
    sys.exit(main())
