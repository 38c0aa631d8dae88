"""Builds comment synthesis prompts from code units."""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path

from jinja2 import Environment, FileSystemLoader

from ..comments.styles import language_for
from ..failsafe import is_async
from ..models import CodeUnit
from .constants import COMMENT_TEMPLATE

_FUNCTION_HINT = re.compile(r"\b(function|def|func|fn)\b|\w+\s*\([^)]*\)\s*(\{|:|=>)")
_CLASS_HINT = re.compile(r"\b(class|struct|interface|trait|module)\b")


@dataclass(frozen=True)
class PromptRequest:
    """A rendered synthesis request for one code unit."""

    prompt: str
    language: str
    is_function: bool
    is_async: bool


class CommentPromptBuilder:
    """Renders the comment request template for a code unit and its language."""

    def __init__(self, templates_dir: Path | None = None) -> None:
        self.templates_dir = templates_dir or Path(__file__).with_name("templates")
        self._env = self._create_env(self.templates_dir)

    def build(self, unit: CodeUnit, extension: str) -> PromptRequest:
        language = language_for(extension) or "JavaScript"
        first_line = unit.first_line
        function = bool(_FUNCTION_HINT.search(first_line)) and not _CLASS_HINT.search(first_line)
        asynchronous = is_async(unit.text)
        template = self._env.get_template(COMMENT_TEMPLATE)
        prompt = template.render(
            language=language,
            code=unit.text,
            is_function=function,
            is_async=asynchronous,
        )
        return PromptRequest(
            prompt=prompt.strip() + "\n",
            language=language,
            is_function=function,
            is_async=asynchronous,
        )

    def render(self, unit: CodeUnit, extension: str) -> str:
        return self.build(unit, extension).prompt

    @staticmethod
    def _create_env(templates_dir: Path) -> Environment:
        directories = [str(templates_dir)]
        default_dir = str(Path(__file__).with_name("templates"))
        if default_dir not in directories:
            directories.append(default_dir)
        loader = FileSystemLoader(directories)
        return Environment(loader=loader, autoescape=False, trim_blocks=True, lstrip_blocks=True)


__all__ = ["CommentPromptBuilder", "PromptRequest"]
