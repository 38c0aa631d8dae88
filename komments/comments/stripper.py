"""Remove comments from source text."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Match, Pattern, Tuple

from ..models import CommentStyle
from .styles import is_doc_comment_language

_EXCESS_BLANK_LINES = re.compile(r"\n[ \t]*\n(?:[ \t]*\n)+")
_C_BLOCK = CommentStyle("/*", "*/")


@dataclass(frozen=True)
class StripResult:
    """Stripped content and the number of comment spans removed."""

    content: str
    removed_count: int


def _block_span(prefix: str, suffix: str) -> str:
    open_, close = re.escape(prefix), re.escape(suffix)
    return rf"{open_}(?:(?!{close})[\s\S])*{close}"


def _block_pattern(prefix: str, suffix: str) -> Pattern[str]:
    # Whole-line comments go together with their line break; a comment that
    # shares its line with code only takes the whitespace in front of it.
    span = _block_span(prefix, suffix)
    return re.compile(
        rf"^[ \t]*{span}[ \t]*(?:\r?\n|\Z)|[ \t]*{span}",
        re.MULTILINE,
    )


def _line_pattern(prefix: str) -> Pattern[str]:
    open_ = re.escape(prefix)
    return re.compile(
        rf"^[ \t]*{open_}[^\r\n]*(?:\r?\n|\Z)|[ \t]*{open_}[^\r\n]*",
        re.MULTILINE,
    )


def _line_outside_blocks_pattern(prefix: str, block: CommentStyle) -> Pattern[str]:
    # A block that opens first is matched whole so that a line prefix inside it
    # is left for the block pass.
    line = _line_pattern(prefix).pattern
    span = _block_span(block.line_prefix, block.block_suffix)
    return re.compile(rf"(?P<block>{span})|{line}", re.MULTILINE)


def _remove(pattern: Pattern[str], content: str) -> Tuple[str, int]:
    return pattern.subn("", content)


def _remove_lines_outside_blocks(pattern: Pattern[str], content: str) -> Tuple[str, int]:
    removed = 0

    def replace(match: Match[str]) -> str:
        nonlocal removed
        if match.group("block") is not None:
            return match.group(0)
        removed += 1
        return ""

    return pattern.sub(replace, content), removed


def strip_comments(content: str, extension: str, style: CommentStyle) -> StripResult:
    """Remove every ``style`` comment from ``content``.

    JavaScript dialects also lose their ``/* ... */`` blocks even though their
    declared style is line based. Their line pass runs first and skips line
    prefixes that sit inside a block; the block pass follows. Runs of blank
    lines left behind collapse to a single blank line.
    """
    removed = 0
    if style.is_block:
        content, count = _remove(_block_pattern(style.line_prefix, style.block_suffix), content)
        removed += count
    elif is_doc_comment_language(extension):
        content, count = _remove_lines_outside_blocks(
            _line_outside_blocks_pattern(style.line_prefix, _C_BLOCK), content
        )
        removed += count
        content, count = _remove(
            _block_pattern(_C_BLOCK.line_prefix, _C_BLOCK.block_suffix), content
        )
        removed += count
    else:
        content, count = _remove(_line_pattern(style.line_prefix), content)
        removed += count

    content = _EXCESS_BLANK_LINES.sub("\n\n", content)
    return StripResult(content=content, removed_count=removed)


__all__ = ["StripResult", "strip_comments"]
