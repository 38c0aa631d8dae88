"""Render comment bodies in a file's comment syntax and splice them into files."""

from __future__ import annotations

import re
from pathlib import Path
from typing import List

from ..models import CommentStyle
from .styles import extension_of, is_doc_comment_language, style_for

_DOC_TAG = re.compile(r"@(param|returns?|description|example|typedef|type|function|class)\b")
_LEADER = re.compile(r"^\s*(/\*+|\*+/|\*+(?!/)|//+)\s?")
_TRAILER = re.compile(r"\s*\*+/\s*$")


class FileAccessError(OSError):
    """Raised when a target file cannot be read or rewritten."""


def is_structured_doc(body: str) -> bool:
    """Return ``True`` when ``body`` carries JSDoc-style tags."""
    return bool(_DOC_TAG.search(body))


def _is_wrapped_block(body: str) -> bool:
    stripped = body.strip()
    return stripped.startswith("/*") and stripped.endswith("*/")


def _strip_leader(line: str) -> str:
    cleaned = _TRAILER.sub("", line)
    cleaned = _LEADER.sub("", cleaned, count=1)
    return cleaned.rstrip()


def _wrap_doc_block(body: str) -> str:
    lines: List[str] = ["/**"]
    for raw in body.strip("\n").split("\n"):
        stripped = raw.strip()
        if stripped in {"/**", "/*", "*/", "**/"}:
            continue
        text = _strip_leader(raw)
        lines.append(f" * {text}" if text else " *")
    lines.append(" */")
    return "\n".join(lines)


def format_comment(body: str, style: CommentStyle, structured_doc: bool = False) -> str:
    """Return ``body`` rendered as a comment in ``style``.

    ``structured_doc`` marks a JavaScript-family target whose body carries doc
    tags; such bodies become a ``/** ... */`` block regardless of ``style``.
    """
    if structured_doc:
        if _is_wrapped_block(body):
            return body
        return _wrap_doc_block(body)

    if style.is_block:
        flattened = " ".join(part.strip() for part in body.splitlines() if part.strip())
        return f"{style.line_prefix} {flattened} {style.block_suffix}"

    if "\n" in body:
        return "\n".join(f"{style.line_prefix} {line}" for line in body.split("\n"))

    return f"{style.line_prefix} {body}"


def format_for_file(body: str, path: str | Path) -> str:
    """Format ``body`` using the comment rules for ``path``'s extension."""
    extension = extension_of(path)
    structured = is_doc_comment_language(extension) and is_structured_doc(body)
    return format_comment(body, style_for(extension), structured)


def insert_into_lines(lines: List[str], line_number: int, formatted: str) -> List[str]:
    """Return a copy of ``lines`` with ``formatted`` placed before 1-based ``line_number``."""
    if line_number < 1:
        raise ValueError(f"Line numbers start at 1, got {line_number}")
    updated = list(lines)
    updated.insert(line_number - 1, formatted)
    return updated


def resolve_target(path: str | Path, root: Path | None = None) -> Path:
    candidate = Path(path).expanduser()
    if candidate.is_absolute():
        return candidate
    return (root or Path.cwd()) / candidate


def insert_comment(
    path: str | Path,
    line_number: int,
    body: str,
    *,
    root: Path | None = None,
) -> Path:
    """Insert ``body`` as a comment right before ``line_number`` of ``path``.

    The insert is positional: the target line is not checked against the code
    the comment was written for. Returns the resolved file path.
    """
    target = resolve_target(path, root)
    if line_number < 1:
        raise FileAccessError(f"Invalid line {line_number} for {target}")
    try:
        content = target.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise FileAccessError(f"Unable to read {target}: {exc}") from exc

    formatted = format_for_file(body, target)
    lines = insert_into_lines(content.split("\n"), line_number, formatted)

    try:
        target.write_text("\n".join(lines), encoding="utf-8")
    except OSError as exc:
        raise FileAccessError(f"Unable to write {target}: {exc}") from exc
    return target


__all__ = [
    "FileAccessError",
    "format_comment",
    "format_for_file",
    "insert_comment",
    "insert_into_lines",
    "is_structured_doc",
    "resolve_target",
]
