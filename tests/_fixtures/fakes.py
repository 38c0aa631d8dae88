"""Test doubles for the synthesis backend and the interactive reviewer."""

from __future__ import annotations

from typing import List, Optional

from komments.review import APPLY


class FakeRunner:
    """Replays canned replies and records the prompts it was sent."""

    def __init__(self, replies=None, *, error: Exception | None = None) -> None:
        self.replies = list(replies or [])
        self.error = error
        self.prompts: List[str] = []
        self.temperatures: List[Optional[float]] = []

    def run(self, prompt, *, temperature=None, max_tokens=None):
        self.prompts.append(prompt)
        self.temperatures.append(temperature)
        if self.error is not None:
            raise self.error
        if self.replies:
            return self.replies.pop(0)
        return "Generated comment for the snippet."


class ScriptedReviewer:
    """Answers review prompts from a script; unscripted choices apply."""

    def __init__(self, actions=None, *, edits=None, confirm: bool = True) -> None:
        self.actions = list(actions or [])
        self.edits = list(edits or [])
        self.confirm_answer = confirm
        self.seen: List[str] = []
        self.confirmations: List[str] = []

    def choose(self, suggestion) -> str:
        self.seen.append(f"{suggestion.file}:{suggestion.line}")
        return self.actions.pop(0) if self.actions else APPLY

    def edit(self, text: str) -> str:
        return self.edits.pop(0) if self.edits else text

    def confirm(self, message: str, *, default: bool = False) -> bool:
        self.confirmations.append(message)
        return self.confirm_answer


__all__ = ["FakeRunner", "ScriptedReviewer"]
