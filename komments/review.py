"""Interactive console prompts for reviewing suggestions and confirming removals."""

from __future__ import annotations

import os
import shlex
import subprocess
import tempfile
from pathlib import Path
from typing import Callable, Protocol

from colorama import Fore, Style

from .logging import get_logger
from .models import Suggestion

APPLY = "apply"
SKIP = "skip"
EDIT = "edit"
EXIT = "exit"

_CHOICES = (
    ("a", APPLY, "Apply this comment"),
    ("s", SKIP, "Skip this comment"),
    ("e", EDIT, "Edit before applying"),
    ("x", EXIT, "Exit interactive mode"),
)


class Reviewer(Protocol):
    def choose(self, suggestion: Suggestion) -> str: ...

    def edit(self, text: str) -> str: ...

    def confirm(self, message: str, *, default: bool = False) -> bool: ...


class ConsoleReviewer:
    """Prompts on the terminal; ``prompt``/``echo`` are injectable for tests."""

    def __init__(
        self,
        *,
        prompt: Callable[[str], str] = input,
        echo: Callable[[str], None] = print,
        editor: str | None = None,
    ) -> None:
        self._input = prompt
        self._output = echo
        self._editor = editor if editor is not None else (
            os.environ.get("VISUAL") or os.environ.get("EDITOR")
        )
        self.logger = get_logger("review")

    def choose(self, suggestion: Suggestion) -> str:
        """Return the action for ``suggestion``; end of input means exit."""
        self._output(f"\n{Fore.CYAN}File: {suggestion.file}{Style.RESET_ALL}")
        self._output(f"{Fore.CYAN}Line: {suggestion.line}{Style.RESET_ALL}")
        self._output(f"{Fore.CYAN}Code: {suggestion.code_snippet_preview}{Style.RESET_ALL}")
        self._output(f"{Fore.GREEN}Suggested comment: {suggestion.suggested_comment}{Style.RESET_ALL}")
        menu = "  ".join(f"[{key}] {label}" for key, _, label in _CHOICES)
        while True:
            try:
                answer = self._input(f"What would you like to do? {menu}\n> ").strip().lower()
            except EOFError:
                return EXIT
            for key, action, _ in _CHOICES:
                if answer in {key, action}:
                    return action
            self._output(f"{Fore.YELLOW}Please choose one of: a, s, e, x{Style.RESET_ALL}")

    def edit(self, text: str) -> str:
        if self._editor:
            try:
                return self._edit_in_editor(text)
            except (OSError, ValueError, subprocess.CalledProcessError) as exc:
                self.logger.warning("Editor %r failed (%s); type the comment instead.", self._editor, exc)
        return self._edit_inline(text)

    def confirm(self, message: str, *, default: bool = False) -> bool:
        hint = "[Y/n]" if default else "[y/N]"
        try:
            answer = self._input(f"{message} {hint} ").strip().lower()
        except EOFError:
            return default
        if not answer:
            return default
        return answer in {"y", "yes"}

    def _edit_inline(self, text: str) -> str:
        self._output("Enter the new comment. Finish with an empty line (leave empty to keep the suggestion):")
        lines = []
        while True:
            try:
                line = self._input("")
            except EOFError:
                break
            if not line:
                break
            lines.append(line)
        return "\n".join(lines) if lines else text

    def _edit_in_editor(self, text: str) -> str:
        with tempfile.NamedTemporaryFile(
            "w", suffix=".txt", delete=False, encoding="utf-8"
        ) as handle:
            handle.write(text)
            temp_path = Path(handle.name)
        try:
            subprocess.run([*shlex.split(self._editor or ""), str(temp_path)], check=True)
            edited = temp_path.read_text(encoding="utf-8").rstrip("\n")
        finally:
            temp_path.unlink(missing_ok=True)
        return edited or text


class AutoApproveReviewer:
    """Non-interactive reviewer that applies everything and confirms every prompt."""

    def choose(self, suggestion: Suggestion) -> str:
        return APPLY

    def edit(self, text: str) -> str:
        return text

    def confirm(self, message: str, *, default: bool = False) -> bool:
        return True


__all__ = [
    "APPLY",
    "AutoApproveReviewer",
    "ConsoleReviewer",
    "EDIT",
    "EXIT",
    "Reviewer",
    "SKIP",
]
