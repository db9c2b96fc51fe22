from pathlib import Path

import pytest

from autotestid.config import RuleOptions
from autotestid.linter import iter_source_files, lint_file, lint_paths, lint_source

FIXTURES = Path(__file__).parent / "fixtures" / "real_world"


@pytest.mark.parametrize(
    ("fixture", "file_name"),
    [
        ("navigation", "Navigation.jsx"),
        ("modal", "ConfirmDialog.jsx"),
        ("search", "SearchPage.jsx"),
        ("data_table", "UserTable.jsx"),
    ],
)
def test_real_world_components_are_fixed(fixture: str, file_name: str) -> None:
    source = (FIXTURES / f"{fixture}.jsx").read_text(encoding="utf-8")
    expected = (FIXTURES / f"{fixture}_fixed.jsx").read_text(encoding="utf-8")

    result = lint_source(source, f"src/components/{file_name}")

    assert result.findings
    assert result.fixed_source == expected
    assert lint_source(expected, f"src/components/{file_name}").findings == []


def test_lint_source_skips_excluded_files() -> None:
    result = lint_source("<button>Go</button>", "src/Login.test.jsx", RuleOptions(exclude=("*.test.jsx",)))

    assert result.skipped
    assert result.findings == []
    assert result.fixed_source == "<button>Go</button>"


def test_lint_file_with_fix_writes_ids(tmp_path: Path) -> None:
    target = tmp_path / "LoginPage.jsx"
    target.write_text("export const Login = () => <button onClick={submit}>Sign In</button>;\n", encoding="utf-8")

    result = lint_file(target, fix=True)

    assert result.fixed
    assert len(result.findings) == 1
    assert target.read_text(encoding="utf-8") == (
        'export const Login = () => <button data-testid="login-page-sign-in-button" onClick={submit}>Sign In</button>;\n'
    )
    assert lint_file(target).findings == []


def test_lint_file_without_fix_leaves_file_untouched(tmp_path: Path) -> None:
    target = tmp_path / "Form.jsx"
    source = "const f = <form><input name=\"email\" /></form>;\n"
    target.write_text(source, encoding="utf-8")

    result = lint_file(target)

    assert not result.fixed
    assert [finding.suggested_id for finding in result.findings] == ["form-form-form", "form-email-input"]
    assert target.read_text(encoding="utf-8") == source


def test_unreadable_file_is_skipped(tmp_path: Path) -> None:
    target = tmp_path / "Binary.jsx"
    target.write_bytes(b"\xff\xfe\x00<button>")

    result = lint_file(target)

    assert result.skipped
    assert result.message.startswith("unreadable")


def test_iter_source_files_filters_and_skips_vendor_directories(tmp_path: Path) -> None:
    (tmp_path / "src").mkdir()
    (tmp_path / "src" / "App.jsx").write_text("", encoding="utf-8")
    (tmp_path / "src" / "util.ts").write_text("", encoding="utf-8")
    (tmp_path / "src" / "styles.css").write_text("", encoding="utf-8")
    (tmp_path / "node_modules" / "lib").mkdir(parents=True)
    (tmp_path / "node_modules" / "lib" / "index.js").write_text("", encoding="utf-8")

    found = list(iter_source_files([tmp_path, tmp_path / "src" / "App.jsx"]))

    assert found == [tmp_path / "src" / "App.jsx", tmp_path / "src" / "util.ts"]


def test_lint_paths_collects_results(tmp_path: Path) -> None:
    (tmp_path / "A.jsx").write_text("<a href=\"/docs\">Docs</a>", encoding="utf-8")
    (tmp_path / "B.jsx").write_text("<span>plain</span>", encoding="utf-8")

    results = lint_paths([tmp_path])

    assert [len(result.findings) for result in results] == [1, 0]
    assert results[0].findings[0].suggested_id == "a-docs-a"
