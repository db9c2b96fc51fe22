from pathlib import Path

from autotestid.fixer import apply_fix_preview, apply_fixes, generate_fix_preview, read_source
from autotestid.models import Fix


def test_apply_fixes_inserts_from_the_end() -> None:
    source = "<a><b>"
    fixes = [Fix(offset=2, text=' x="1"'), Fix(offset=5, text=' y="2"')]

    assert apply_fixes(source, fixes) == '<a x="1"><b y="2">'


def test_apply_fixes_ignores_duplicate_and_out_of_range_offsets() -> None:
    source = "<a>"
    fixes = [Fix(offset=2, text=" one"), Fix(offset=2, text=" two"), Fix(offset=99, text=" nope")]

    assert apply_fixes(source, fixes) == "<a one>"


def test_preview_without_fixes_is_not_applicable(tmp_path: Path) -> None:
    preview = generate_fix_preview(tmp_path / "A.jsx", "<a/>", [])

    assert not preview.ok
    assert apply_fix_preview(preview) == (False, "No preview to apply.")


def test_preview_diff_and_apply(tmp_path: Path) -> None:
    target = tmp_path / "Page.jsx"
    source = "const a = <button>Go</button>;\n"
    target.write_text(source, encoding="utf-8")

    preview = generate_fix_preview(target, source, [Fix(offset=17, text=' data-testid="page-go-button"')])
    assert preview.ok
    assert '+const a = <button data-testid="page-go-button">Go</button>;' in preview.diff_text
    assert target.read_text(encoding="utf-8") == source

    ok, message = apply_fix_preview(preview)
    assert ok, message
    assert target.read_text(encoding="utf-8") == 'const a = <button data-testid="page-go-button">Go</button>;\n'
    assert list(tmp_path.iterdir()) == [target]


def test_apply_refuses_when_file_changed(tmp_path: Path) -> None:
    target = tmp_path / "Page.jsx"
    target.write_text("<button>Go</button>", encoding="utf-8")
    preview = generate_fix_preview(target, "<button>Go</button>", [Fix(offset=7, text=' data-testid="x"')])

    target.write_text("<button>Stop</button>", encoding="utf-8")
    ok, message = apply_fix_preview(preview)

    assert not ok
    assert "changed after preview" in message


def test_line_endings_are_preserved(tmp_path: Path) -> None:
    target = tmp_path / "Page.jsx"
    target.write_bytes(b"<div>\r\n<button>Go</button>\r\n</div>\r\n")
    source = read_source(target)

    preview = generate_fix_preview(target, source, [Fix(offset=source.index("<button") + 7, text=' data-testid="x"')])
    ok, _ = apply_fix_preview(preview)

    assert ok
    assert target.read_bytes() == b'<div>\r\n<button data-testid="x">Go</button>\r\n</div>\r\n'
