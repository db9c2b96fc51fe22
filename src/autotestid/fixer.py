from __future__ import annotations

from dataclasses import dataclass
from difflib import unified_diff
import os
from pathlib import Path
import tempfile
from typing import Iterable

from .models import Fix


@dataclass(frozen=True, slots=True)
class FixPreview:
    ok: bool
    target_file: Path
    message: str
    diff_text: str
    original_source: str | None
    updated_source: str | None
    fix_count: int = 0


def apply_fixes(source: str, fixes: Iterable[Fix]) -> str:
    unique: dict[int, Fix] = {}
    for fix in fixes:
        if fix.offset < 0 or fix.offset > len(source):
            continue
        unique.setdefault(fix.offset, fix)

    updated = source
    # Highest offset first so earlier offsets stay valid.
    for offset in sorted(unique, reverse=True):
        updated = updated[:offset] + unique[offset].text + updated[offset:]
    return updated


def generate_fix_preview(target_file: Path, source: str, fixes: Iterable[Fix]) -> FixPreview:
    fix_list = list(fixes)
    if not fix_list:
        return FixPreview(
            ok=False,
            target_file=target_file,
            message="Nothing to fix.",
            diff_text="",
            original_source=source,
            updated_source=source,
        )

    updated = apply_fixes(source, fix_list)
    diff_text = "".join(
        unified_diff(
            source.splitlines(keepends=True),
            updated.splitlines(keepends=True),
            fromfile=str(target_file),
            tofile=str(target_file),
        )
    )
    return FixPreview(
        ok=True,
        target_file=target_file,
        message=f"Preview generated for {len(fix_list)} fix(es); no files written.",
        diff_text=diff_text,
        original_source=source,
        updated_source=updated,
        fix_count=len(fix_list),
    )


def apply_fix_preview(preview: FixPreview) -> tuple[bool, str]:
    if not preview.ok or preview.updated_source is None or preview.original_source is None:
        return False, "No preview to apply."

    target_file = preview.target_file
    try:
        current_source = read_source(target_file)
    except OSError as exc:
        return False, f"Could not read target file before apply: {exc}"

    if current_source != preview.original_source:
        return False, "Target file changed after preview. Re-run the linter before applying fixes."

    temp_path: Path | None = None
    try:
        fd, temp_name = tempfile.mkstemp(
            prefix=f".{target_file.name}.",
            suffix=".autotestid",
            dir=str(target_file.parent),
        )
        temp_path = Path(temp_name)
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as handle:
            handle.write(preview.updated_source)
            handle.flush()
            os.fsync(handle.fileno())
        temp_path.replace(target_file)
    except OSError as exc:
        if temp_path is not None:
            temp_path.unlink(missing_ok=True)
        return False, f"Could not write fixes to {target_file}: {exc}"
    return True, f"Applied {preview.fix_count} fix(es) to {target_file}"


def read_source(path: Path) -> str:
    with path.open("r", encoding="utf-8", newline="") as handle:
        return handle.read()

