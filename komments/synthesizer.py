"""Turns code units into comment suggestions through the synthesis backend."""

from __future__ import annotations

import re
from pathlib import Path
from typing import List, Optional, Protocol, Sequence

from .analyzers.snippets import extract
from .comments.styles import extension_of
from .failsafe import build_default_comment
from .logging import get_logger, log_success
from .models import CodeUnit, Suggestion
from .prompting.builder import CommentPromptBuilder
from .prompting.constants import (
    DEFAULT_MAX_OUTPUT_TOKENS,
    DEFAULT_TEMPERATURE,
    MIN_COMMENT_LENGTH,
)

_FENCE = re.compile(r"^```[\w+#-]*\s*\n(?P<body>[\s\S]*?)\n?```\s*$")


class TextGenerator(Protocol):
    def run(
        self,
        prompt: str,
        *,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
    ) -> str: ...


def clean_response(text: str) -> str:
    """Trim whitespace and unwrap a reply that arrived inside a markdown code fence."""
    cleaned = text.strip()
    match = _FENCE.match(cleaned)
    if match:
        cleaned = match.group("body").strip()
    return cleaned


class CommentSynthesizer:
    """Requests one comment per code unit, falling back to a template when needed."""

    def __init__(
        self,
        runner: TextGenerator,
        *,
        temperature: float = DEFAULT_TEMPERATURE,
        max_tokens: int = DEFAULT_MAX_OUTPUT_TOKENS,
        prompt_builder: CommentPromptBuilder | None = None,
    ) -> None:
        if not 0.0 <= temperature <= 1.0:
            raise ValueError(f"temperature must be between 0 and 1, got {temperature}")
        self.runner = runner
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.prompt_builder = prompt_builder or CommentPromptBuilder()
        self.logger = get_logger("synthesizer")

    def synthesize(self, unit: CodeUnit, extension: str) -> str:
        """Return a comment for ``unit``.

        Backend errors propagate; an empty or near-empty reply is replaced by
        the deterministic template from :mod:`komments.failsafe`.
        """
        prompt = self.prompt_builder.render(unit, extension)
        reply = self.runner.run(
            prompt,
            temperature=self.temperature,
            max_tokens=self.max_tokens,
        )
        comment = clean_response(reply or "")
        if len(comment) < MIN_COMMENT_LENGTH:
            self.logger.debug(
                "Backend reply too short for unit at line %d; using template", unit.start_line
            )
            return build_default_comment(unit.text)
        return comment

    def analyze(self, paths: Sequence[str], *, root: Path | None = None) -> List[Suggestion]:
        """Return suggestions for every unit found in ``paths``, in file then line order."""
        self.logger.info("Analyzing %d file(s)...", len(paths))
        base = root or Path.cwd()
        suggestions: List[Suggestion] = []
        total = len(paths)

        for index, path in enumerate(paths, start=1):
            suggestions.extend(self._analyze_file(path, base))
            self.logger.info("Analyzed %d/%d files (%s)", index, total, path)

        log_success(self.logger, "Generated %d comment suggestions.", len(suggestions))
        return suggestions

    def _analyze_file(self, path: str, base: Path) -> List[Suggestion]:
        target = Path(path)
        if not target.is_absolute():
            target = base / target
        try:
            content = target.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            self.logger.error("Error analyzing file %s: %s", path, exc)
            return []

        extension = extension_of(path)
        results: List[Suggestion] = []
        for unit in extract(content, extension):
            try:
                comment = self.synthesize(unit, extension)
            except Exception as exc:
                self.logger.error(
                    "Error generating suggestion for snippet in %s (line %d): %s",
                    path,
                    unit.start_line,
                    exc,
                )
                continue
            results.append(
                Suggestion(
                    file=path,
                    line=unit.start_line,
                    code_snippet_preview=unit.preview(),
                    suggested_comment=comment,
                )
            )
        return results


def synthesize(
    unit: CodeUnit,
    extension: str,
    backend: TextGenerator,
    creativity: float = DEFAULT_TEMPERATURE,
) -> str:
    """Return a comment for ``unit`` using ``backend`` at the given creativity (0..1)."""
    return CommentSynthesizer(backend, temperature=creativity).synthesize(unit, extension)


__all__ = ["CommentSynthesizer", "TextGenerator", "clean_response", "synthesize"]
