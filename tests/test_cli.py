import json
from pathlib import Path

import pytest

from autotestid.cli import build_parser, main


def test_cli_exit_codes(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    clean = tmp_path / "Clean.jsx"
    clean.write_text('<button data-testid="clean-ok-button">Ok</button>', encoding="utf-8")
    dirty = tmp_path / "Dirty.jsx"
    dirty.write_text("<button>Ok</button>", encoding="utf-8")

    assert main([str(clean)]) == 0
    assert main([str(dirty)]) == 1
    out = capsys.readouterr().out
    assert 'Interactive element "button" should have data-testid attribute' in out
    assert "(suggested: dirty-ok-button)" in out
    assert "[require-testid]" in out

    assert main([str(dirty), "--fix"]) == 0
    assert 'data-testid="dirty-ok-button"' in dirty.read_text(encoding="utf-8")


def test_cli_json_report(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    target = tmp_path / "Card.jsx"
    target.write_text('<Button label="Save" />', encoding="utf-8")

    assert main([str(target), "--custom-components", "Button", "--format", "json"]) == 1
    report = json.loads(capsys.readouterr().out)

    assert report["summary"]["findings"] == 1
    assert report["findings"][0]["attribute"] == "dataTestId"
    assert report["findings"][0]["rule"] == "require-testid"
    assert report["findings"][0]["suggested_id"] == "save"


def test_cli_rejects_bad_configuration(tmp_path: Path) -> None:
    config_path = tmp_path / "autotestid.json"
    config_path.write_text('{"elemnts": ["button"]}', encoding="utf-8")

    with pytest.raises(SystemExit) as excinfo:
        main([str(tmp_path), "--config", str(config_path)])
    assert excinfo.value.code == 2


def test_list_options_do_not_consume_paths() -> None:
    args = build_parser().parse_args(
        ["--exclude", "*.test.jsx", "src", "--elements", "button", "--elements", "a", "--custom-components", "Card"]
    )

    assert args.paths == ["src"]
    assert args.exclude == ["*.test.jsx"]
    assert args.elements == ["button", "a"]
    assert args.custom_components == ["Card"]


def test_exclude_followed_by_path_lints_that_path(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    src = tmp_path / "src"
    src.mkdir()
    (src / "Login.test.jsx").write_text("<button>Go</button>", encoding="utf-8")
    (src / "Login.jsx").write_text("<button>Go</button>", encoding="utf-8")
    (tmp_path / "Outside.jsx").write_text("<button>Stop</button>", encoding="utf-8")

    assert main(["--exclude", "*.test.jsx", str(src), "--format", "json"]) == 1
    report = json.loads(capsys.readouterr().out)

    assert report["summary"]["files"] == 2
    assert report["summary"]["skipped"] == 1
    assert [finding["suggested_id"] for finding in report["findings"]] == ["login-go-button"]
