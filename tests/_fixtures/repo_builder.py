"""Helper utilities for constructing temporary projects in tests."""

from __future__ import annotations

import textwrap
from pathlib import Path
from typing import Iterable, List, Mapping

from komments.git.status import ChangeScanner


class RepoBuilder:
    """Utility for writing files into a throwaway project and faking its git status."""

    def __init__(self, tmp_path: Path) -> None:
        self.root = tmp_path / "repo"
        self.root.mkdir()
        self.git_calls: List[List[str]] = []

    def write(self, files: Mapping[str, str]) -> None:
        """Write `path -> contents` entries into the project."""
        for relative, content in files.items():
            path = self.root / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            normalised = textwrap.dedent(content).lstrip("\n")
            path.write_text(normalised, encoding="utf-8")

    def read(self, relative: str) -> str:
        return (self.root / relative).read_text(encoding="utf-8")

    def change_scanner(self, status_lines: Iterable[str], *, is_repo: bool = True) -> ChangeScanner:
        """Return a scanner whose git commands answer with ``status_lines``."""
        status = "\n".join(status_lines) + "\n"

        def fake_git(args, *, cwd):
            self.git_calls.append(list(args))
            if args[:2] == ["git", "rev-parse"]:
                return "true\n" if is_repo else "false\n"
            return status

        return ChangeScanner(runner=fake_git)

    def path(self) -> Path:
        """Return the project root path."""
        return self.root


__all__ = ["RepoBuilder"]
