from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, Iterator

from .config import RuleOptions
from .fixer import apply_fix_preview, generate_fix_preview, read_source
from .jsx_parser import parse_jsx_elements
from .models import LintResult
from .rule import RequireTestIdRule

logger = logging.getLogger("autotestid.linter")

JS_TS_EXTENSIONS = {".js", ".jsx", ".ts", ".tsx", ".mjs", ".cjs"}
SKIPPED_DIRECTORIES = {"node_modules", ".git", "dist", "build"}


def lint_source(source: str, file_path: str, options: RuleOptions | None = None) -> LintResult:
    rule = RequireTestIdRule(options)
    if rule.is_excluded(file_path):
        return LintResult(file_path=file_path, source=source, fixed_source=source, skipped=True, message="excluded")

    findings = rule.check(parse_jsx_elements(source), file_path)
    preview = generate_fix_preview(Path(file_path), source, [finding.fix for finding in findings])
    return LintResult(
        file_path=file_path,
        findings=findings,
        source=source,
        fixed_source=preview.updated_source,
    )


def lint_file(
    path: Path,
    options: RuleOptions | None = None,
    *,
    fix: bool = False,
) -> LintResult:
    file_path = path.as_posix()
    try:
        source = read_source(path)
    except (UnicodeDecodeError, OSError) as exc:
        logger.warning("Could not read %s: %s", file_path, exc)
        return LintResult(file_path=file_path, skipped=True, message=f"unreadable: {exc}")

    result = lint_source(source, file_path, options)
    if result.skipped or not fix or not result.changed:
        return result

    preview = generate_fix_preview(path, source, [finding.fix for finding in result.findings])
    ok, message = apply_fix_preview(preview)
    result.message = message
    if ok:
        result.fixed = True
        logger.info("%s", message)
    else:
        logger.warning("Could not fix %s: %s", file_path, message)
    return result


def lint_paths(
    paths: Iterable[Path],
    options: RuleOptions | None = None,
    *,
    fix: bool = False,
) -> list[LintResult]:
    results: list[LintResult] = []
    for file_path in iter_source_files(paths):
        results.append(lint_file(file_path, options, fix=fix))
    return results


def iter_source_files(paths: Iterable[Path]) -> Iterator[Path]:
    seen: set[Path] = set()
    for root in paths:
        if root.is_file():
            candidates: Iterable[Path] = [root]
        elif root.is_dir():
            candidates = sorted(
                path for path in root.rglob("*") if not SKIPPED_DIRECTORIES.intersection(path.relative_to(root).parts)
            )
        else:
            logger.warning("Path does not exist: %s", root)
            continue

        for candidate in candidates:
            if not candidate.is_file() or candidate.suffix.lower() not in JS_TS_EXTENSIONS:
                continue
            if candidate in seen:
                continue
            seen.add(candidate)
            yield candidate
