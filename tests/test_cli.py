"""CLI parser and entrypoint behaviour tests."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from komments.cli import _build_parser, main
from komments.git.status import GitError


def test_cli_defaults_to_scan_options() -> None:
    args = _build_parser().parse_args([])

    assert args.command is None
    assert args.interactive is False
    assert args.temperature is None
    assert args.verbose is False


def test_cli_accepts_verbose_before_command() -> None:
    args = _build_parser().parse_args(["--verbose", "import"])
    assert args.verbose is True
    assert args.command == "import"


def test_cli_accepts_verbose_after_command() -> None:
    args = _build_parser().parse_args(["remove-comments", "--verbose"])
    assert args.verbose is True
    assert args.command == "remove-comments"


def test_cli_accepts_scan_flags_with_and_without_subcommand() -> None:
    parser = _build_parser()

    explicit = parser.parse_args(["scan", "-i", "-t", "0.3"])
    implicit = parser.parse_args(["--interactive", "--temperature", "0.9"])

    assert (explicit.command, explicit.interactive, explicit.temperature) == ("scan", True, 0.3)
    assert (implicit.command, implicit.interactive, implicit.temperature) == (None, True, 0.9)


def test_cli_rejects_out_of_range_temperature() -> None:
    with pytest.raises(SystemExit):
        _build_parser().parse_args(["scan", "-t", "2"])


def test_cli_import_options() -> None:
    args = _build_parser().parse_args(["import", "history.json", "--no-interactive"])

    assert args.file == "history.json"
    assert args.interactive is False
    assert _build_parser().parse_args(["import"]).interactive is True


def test_cli_import_accepts_file_and_apply_all_flags() -> None:
    args = _build_parser().parse_args(["import", "-f", "history.json", "-a"])

    assert args.file_flag == "history.json"
    assert args.interactive is False
    assert _build_parser().parse_args(["import", "--apply-all"]).interactive is False


def test_cli_reports_version(capsys) -> None:
    with pytest.raises(SystemExit) as excinfo:
        _build_parser().parse_args(["--version"])

    assert excinfo.value.code == 0
    assert "komments 1.0.0" in capsys.readouterr().out


def test_cli_remove_comments_options() -> None:
    args = _build_parser().parse_args(["remove-comments", "a.js", "b.py", "--yes"])

    assert args.files == ["a.js", "b.py"]
    assert args.yes is True


def test_main_scan_outside_repository_exits_cleanly(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setenv("GOOGLE_GEMINI_API_KEY", "test-key")

    class NotARepo:
        def __init__(self, config):
            self.config = config

        def run_scan(self, **kwargs):
            raise GitError("not a Git repository")

    with pytest.raises(SystemExit) as excinfo:
        main(["--config", str(tmp_path)], orchestrator_factory=NotARepo)

    assert excinfo.value.code == 0


def test_main_scan_passes_options_and_key(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setenv("GOOGLE_GEMINI_API_KEY", "test-key")
    seen = {}

    class Recorder:
        def __init__(self, config):
            seen["api_key"] = config.api_key

        def run_scan(self, **kwargs):
            seen.update(kwargs)

    main(["--config", str(tmp_path), "scan", "-i", "-t", "0.25"], orchestrator_factory=Recorder)

    assert seen == {"api_key": "test-key", "interactive": True, "temperature": 0.25}


def test_main_scan_without_key_exits_when_setup_fails(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.delenv("GOOGLE_GEMINI_API_KEY", raising=False)
    monkeypatch.delenv("KOMMENTS_API_KEY", raising=False)
    monkeypatch.setattr("komments.cli.getpass.getpass", lambda prompt: "")

    with pytest.raises(SystemExit) as excinfo:
        main(["--config", str(tmp_path)])

    assert excinfo.value.code == 1


def test_main_invalid_config_exits_with_error(tmp_path: Path) -> None:
    (tmp_path / ".komments.yml").write_text("llm:\n  temperature: 3\n", encoding="utf-8")

    with pytest.raises(SystemExit) as excinfo:
        main(["--config", str(tmp_path), "import"])

    assert excinfo.value.code == 1


def test_main_import_missing_file_exits_with_error(tmp_path: Path) -> None:
    with pytest.raises(SystemExit) as excinfo:
        main(["--config", str(tmp_path), "import", str(tmp_path / "missing.json")])

    assert excinfo.value.code == 1


def test_main_remove_comments_strips_files(tmp_path: Path) -> None:
    (tmp_path / "app.py").write_text("# note\nx = 1\n", encoding="utf-8")

    main(["--config", str(tmp_path), "remove-comments", "app.py", "--yes"])

    assert (tmp_path / "app.py").read_text(encoding="utf-8") == "x = 1\n"
    assert (tmp_path / "komments.json").exists()


def test_main_import_file_flag_applies_named_history(tmp_path: Path) -> None:
    (tmp_path / "app.py").write_text("x = 1\n", encoding="utf-8")
    history = [
        {
            "file": "app.py",
            "line": 1,
            "codeSnippetPreview": "x = 1",
            "suggestedComment": "Sets x",
        }
    ]
    (tmp_path / "saved.json").write_text(json.dumps(history), encoding="utf-8")

    main(["--config", str(tmp_path), "import", "-f", str(tmp_path / "saved.json"), "-a"])

    assert (tmp_path / "app.py").read_text(encoding="utf-8") == "# Sets x\nx = 1\n"
