from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from .config import ConfigError, RuleOptions, load_options, options_from_mapping
from .fixer import generate_fix_preview
from .linter import lint_paths
from .models import LintResult

LOG_FORMAT = "%(asctime)s %(levelname)s %(message)s"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="autotestid",
        description="Require data-testid on interactive JSX elements and suggest stable ids",
    )
    parser.add_argument("paths", nargs="*", default=["."], help="Files or directories to lint")
    parser.add_argument("--config", default=None, help="JSON file with require-testid options")
    parser.add_argument("--pattern", default=None, help="Test id pattern, e.g. '{page}-{purpose}-{element}'")
    parser.add_argument(
        "--elements",
        action="append",
        default=None,
        help="Native element that requires data-testid (repeatable)",
    )
    parser.add_argument(
        "--custom-components",
        action="append",
        default=None,
        help="Custom component that requires a dataTestId prop (repeatable)",
    )
    parser.add_argument(
        "--exclude",
        action="append",
        default=None,
        help="File pattern to skip, '*' matches anything (repeatable)",
    )
    parser.add_argument("--fix", action="store_true", help="Insert suggested ids into the source files")
    parser.add_argument("--diff", action="store_true", help="Print the suggested changes as a unified diff")
    parser.add_argument("--format", choices=["text", "json"], default="text")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    return parser


def configure_logging(verbose: bool = False) -> logging.Logger:
    logger = logging.getLogger("autotestid")
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
    return logger


def resolve_options(args: argparse.Namespace) -> RuleOptions:
    options = load_options(args.config) if args.config else RuleOptions()
    overrides: dict[str, object] = {}
    if args.pattern is not None:
        overrides["pattern"] = args.pattern
    if args.elements is not None:
        overrides["elements"] = list(args.elements)
    if args.custom_components is not None:
        overrides["customComponents"] = list(args.custom_components)
    if args.exclude is not None:
        overrides["exclude"] = list(args.exclude)
    return options_from_mapping(overrides, base=options) if overrides else options


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logger = configure_logging(args.verbose)

    try:
        options = resolve_options(args)
    except ConfigError as exc:
        parser.error(str(exc))

    results = lint_paths([Path(item) for item in args.paths], options, fix=args.fix)
    remaining = sum(len(result.findings) for result in results if not result.fixed)
    logger.debug("Linted %s file(s), %s finding(s) remaining", len(results), remaining)

    if args.format == "json":
        print(json.dumps(_json_report(results, remaining), indent=2, ensure_ascii=True))
    else:
        _print_text_report(results, show_diff=args.diff)

    return 1 if remaining else 0


def _json_report(results: list[LintResult], remaining: int) -> dict[str, object]:
    return {
        "findings": [finding.to_dict() for result in results for finding in result.findings],
        "summary": {
            "files": len(results),
            "skipped": sum(1 for result in results if result.skipped),
            "fixed_files": sum(1 for result in results if result.fixed),
            "findings": sum(len(result.findings) for result in results),
            "remaining": remaining,
        },
    }


def _print_text_report(results: list[LintResult], show_diff: bool) -> None:
    for result in results:
        for finding in result.findings:
            status = "fixed" if result.fixed else "suggested"
            print(
                f"{finding.file_path}:{finding.line}:{finding.column}  "
                f"{finding.message}  [{finding.rule}]  ({status}: {finding.suggested_id})"
            )
        if show_diff and result.findings and result.source is not None:
            preview = generate_fix_preview(
                Path(result.file_path),
                result.source,
                [finding.fix for finding in result.findings],
            )
            if preview.diff_text:
                print(preview.diff_text, end="" if preview.diff_text.endswith("\n") else "\n")


if __name__ == "__main__":
    raise SystemExit(main())
