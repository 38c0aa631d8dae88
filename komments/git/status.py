"""Working-tree change detection."""

from __future__ import annotations

import subprocess
from pathlib import Path
from typing import Callable, Iterable, List

from ..comments.styles import is_known_extension
from ..logging import get_logger


class GitError(RuntimeError):
    """Raised when git is unavailable or the path is not inside a repository."""


class ChangeScanner:
    """Lists modified, added, untracked and renamed source files."""

    def __init__(self, runner: Callable[..., str] | None = None) -> None:
        self._runner = runner or self._default_runner
        self.logger = get_logger("git")

    def is_repository(self, repo: Path) -> bool:
        try:
            output = self._run(["git", "rev-parse", "--is-inside-work-tree"], cwd=repo)
        except GitError:
            return False
        return output.strip() == "true"

    def changed_files(self, repo_path: str | Path) -> List[str]:
        """Return changed source files relative to ``repo_path`` that still exist."""
        repo = Path(repo_path)
        if not self.is_repository(repo):
            raise GitError(
                f"{repo} is not a Git repository. Please run this command in a Git repository."
            )

        status = self._run(
            ["git", "status", "--porcelain", "--untracked-files=all"],
            cwd=repo,
        )
        files: List[str] = []
        for path in self._parse_status(status):
            if path in files:
                continue
            if not is_known_extension(path):
                continue
            if not (repo / path).is_file():
                continue
            files.append(path)
        self.logger.info("Found %d modified code files.", len(files))
        return files

    @staticmethod
    def _parse_status(output: str) -> Iterable[str]:
        for line in output.splitlines():
            if len(line) < 4:
                continue
            code, path = line[:2], line[3:]
            if "D" in code and "R" not in code:
                continue
            if " -> " in path:
                path = path.split(" -> ", 1)[1]
            yield path.strip().strip('"')

    def _run(self, args: List[str], *, cwd: Path) -> str:
        return self._runner(args, cwd=cwd)

    @staticmethod
    def _default_runner(args: Iterable[str], *, cwd: Path) -> str:
        try:
            completed = subprocess.run(
                list(args),
                cwd=str(cwd),
                check=True,
                text=True,
                capture_output=True,
            )
        except FileNotFoundError as exc:  # pragma: no cover - depends on environment
            raise GitError("Unable to locate the git executable.") from exc
        except subprocess.CalledProcessError as exc:
            message = (exc.stderr or "").strip() or f"exit code {exc.returncode}"
            raise GitError(f"git command failed: {message}") from exc
        return completed.stdout


__all__ = ["ChangeScanner", "GitError"]
