from __future__ import annotations

import tomllib
from datetime import date
from pathlib import Path

import pytest
import yaml

import daykit.cli
from daykit.cli import build_parser, main

DAY_TEMPLATES = {
    "Cargo.toml": '[package]\nname = "{package_name}"\nversion = "0.1.0"\n',
    "src/lib.rs": "pub fn part1() \\{}\n",
    "src/main.rs": "const DAY: u8 = {day};\n",
}


@pytest.fixture
def config_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    path = tmp_path / "config" / "config.yaml"
    monkeypatch.setenv("DAYKIT_CONFIG", str(path))
    monkeypatch.chdir(tmp_path)
    return path


def _run(argv: list[str]) -> int:
    with pytest.raises(SystemExit) as exc:
        main(argv)
    code = exc.value.code
    return 0 if code is None else int(code)


def _write_templates(template_dir: Path) -> None:
    for name, text in DAY_TEMPLATES.items():
        path = template_dir / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")


def test_parser_smoke() -> None:
    parser = build_parser()
    args = parser.parse_args(["init", "-y", "2023", "-d", "7", "--skip-get-input"])
    assert args.year == 2023
    assert args.day == 7
    assert args.skip_get_input is True
    assert args.skip_create_crate is False

    args = parser.parse_args(["-vv", "init-year", "--implementation", "aoc"])
    assert args.verbose == 2
    assert args.implementation == Path("aoc")
    assert args.input_files is None


def test_parser_rejects_out_of_range_day() -> None:
    with pytest.raises(SystemExit) as exc:
        build_parser().parse_args(["url", "-d", "26"])
    assert exc.value.code == 2


def test_url_command(capsys: pytest.CaptureFixture[str]) -> None:
    assert _run(["url", "-y", "2023", "-d", "7"]) == 0
    assert capsys.readouterr().out.strip() == "https://adventofcode.com/2023/day/7"


class _December26(date):
    @classmethod
    def today(cls) -> date:
        return cls(2023, 12, 26)


def test_default_day_outside_event_is_rejected(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    monkeypatch.setattr(daykit.cli, "date", _December26)

    assert _run(["url"]) == 2
    assert "day 26" in capsys.readouterr().err

    assert _run(["url", "-d", "25"]) == 0
    assert capsys.readouterr().out.strip() == "https://adventofcode.com/2023/day/25"


def test_config_path_and_show(config_file: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert _run(["config", "path"]) == 0
    assert capsys.readouterr().out.strip() == str(config_file)

    assert _run(["config", "show"]) == 1
    assert "No configuration file" in capsys.readouterr().err

    assert _run(["config", "set", "--session", "abc"]) == 0
    assert _run(["config", "show"]) == 0
    assert "session: abc" in capsys.readouterr().out


def test_config_show_unreadable_file(config_file: Path, capsys: pytest.CaptureFixture[str]) -> None:
    config_file.mkdir(parents=True)

    assert _run(["config", "show"]) == 2
    assert "ERROR: Failed to read config file" in capsys.readouterr().err


def test_config_set_and_clear(config_file: Path, tmp_path: Path) -> None:
    assert _run(["config", "set", "-y", "2023", "--implementation", "aoc2023", "--input-files", "in"]) == 0

    payload = yaml.safe_load(config_file.read_text(encoding="utf-8"))
    assert payload["paths"][2023] == {
        "input_files": str(tmp_path / "in"),
        "implementation": str(tmp_path / "aoc2023"),
    }

    assert _run(["config", "clear", "-y", "2023", "--input-files"]) == 0
    payload = yaml.safe_load(config_file.read_text(encoding="utf-8"))
    assert payload["paths"][2023] == {"implementation": str(tmp_path / "aoc2023")}


def test_config_set_rejects_bad_values(config_file: Path, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert _run(["config", "set", "--session", ""]) == 2
    assert "session key must not be empty" in capsys.readouterr().err

    (tmp_path / "a_file").write_text("x", encoding="utf-8")
    assert _run(["config", "set", "--implementation", "a_file"]) == 2
    assert not config_file.exists()


def test_broken_config_is_reported(config_file: Path, capsys: pytest.CaptureFixture[str]) -> None:
    config_file.parent.mkdir(parents=True)
    config_file.write_text("- not a mapping\n", encoding="utf-8")

    assert _run(["init", "-y", "2023", "-d", "1", "--skip-get-input"]) == 2
    assert "ERROR:" in capsys.readouterr().err


def test_init_year_then_init_day(config_file: Path, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    _write_templates(tmp_path / "templates")
    impl = tmp_path / "aoc2023"

    rc = _run(
        [
            "init-year",
            "-y",
            "2023",
            "--implementation",
            str(impl),
            "--input-files",
            str(impl / "inputs"),
            "--day-templates",
            str(tmp_path / "templates"),
        ]
    )
    assert rc == 0
    assert config_file.exists()
    assert (impl / ".gitignore").read_text(encoding="utf-8") == "/target/\ninputs/\n"
    capsys.readouterr()

    assert _run(["init", "-y", "2023", "-d", "7", "--skip-get-input"]) == 0
    assert "day07" in capsys.readouterr().out

    manifest = tomllib.loads((impl / "Cargo.toml").read_text(encoding="utf-8"))
    assert manifest["workspace"]["members"] == ["day07"]
    assert (impl / "day07" / "src" / "main.rs").read_text(encoding="utf-8") == "const DAY: u8 = 7;\n"

    assert _run(["init", "-y", "2023", "-d", "7", "--skip-get-input"]) == 2
    err = capsys.readouterr().err
    assert "ERROR: Member already exists in workspace: day07" in err
    assert "by hand" in err


def test_init_year_conflict(config_file: Path, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert _run(["init-year", "-y", "2023", "--implementation", str(tmp_path / "one")]) == 0
    saved = config_file.read_text(encoding="utf-8")

    assert _run(["init-year", "-y", "2023", "--implementation", str(tmp_path / "two")]) == 2

    assert "CLI requested" in capsys.readouterr().err
    assert config_file.read_text(encoding="utf-8") == saved


def test_clear_templates_command(config_file: Path, tmp_path: Path) -> None:
    _write_templates(tmp_path / "templates")
    assert _run(["config", "set", "-y", "2023", "--day-templates", "templates"]) == 0

    assert _run(["clear-templates", "-y", "2023"]) == 0
    assert not (tmp_path / "templates").exists()
