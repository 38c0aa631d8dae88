"""Deterministic fallback comments for when the synthesis backend gives nothing useful."""

from __future__ import annotations

import re
from typing import List

_DECLARED_NAME = re.compile(
    r"(?:function|class|const|let|var)\s+(\w+)|(?:\w+)\s*=\s*(?:async\s*)?(?:function|\()",
    re.IGNORECASE,
)
_CALL_NAME = re.compile(r"(\w+)\s*\(")
_PARAMS = re.compile(r"\(([^)]*?)\)")
_CLASS_KEYWORD = re.compile(r"\bclass\b")
_ASYNC_KEYWORD = re.compile(r"\basync\b")

_IMPLICIT_RECEIVERS = {"self", "cls"}


def snippet_name(first_line: str) -> str:
    """Return the declared name on ``first_line``, or ``function`` when none is found."""
    match = _DECLARED_NAME.search(first_line)
    if match and match.group(1):
        return match.group(1)
    method = _CALL_NAME.search(first_line)
    if method:
        return method.group(1)
    return "function"


def parameter_names(first_line: str) -> List[str]:
    """Return parameter names with annotations, defaults and variadics removed."""
    match = _PARAMS.search(first_line)
    if not match or not match.group(1).strip():
        return []
    names: List[str] = []
    for raw in match.group(1).split(","):
        name = raw.strip().split(":")[0].split("=")[0].strip()
        if not name or "..." in name or name.startswith("*"):
            continue
        if name in _IMPLICIT_RECEIVERS:
            continue
        names.append(name)
    return names


def is_async(code: str) -> bool:
    first_line = code.split("\n", 1)[0]
    return bool(_ASYNC_KEYWORD.search(first_line)) or "return new Promise" in code


def build_default_comment(code: str) -> str:
    """Return a templated doc comment describing ``code`` from its first line."""
    first_line = code.split("\n", 1)[0].strip()
    name = snippet_name(first_line)

    if _CLASS_KEYWORD.search(first_line):
        return f"/**\n * {name} class\n */"

    asynchronous = is_async(code)
    summary = f"{name} - Asynchronously handles" if asynchronous else f"{name} handles"
    lines = ["/**", f" * {summary} {name.lower()} operation"]
    for param in parameter_names(first_line):
        lines.append(f" * @param {param} Parameter description")
    if asynchronous:
        lines.append(" * @returns {Promise} Promise that resolves when the operation completes")
    lines.append(" */")
    return "\n".join(lines)


__all__ = ["build_default_comment", "is_async", "parameter_names", "snippet_name"]
