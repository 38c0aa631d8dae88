"""Line-level detection of functions, classes and methods.

The extractor is a heuristic, not a parser. A trigger pattern per language
family opens a unit; brace balance (C-family, Go, PHP, JavaScript) or a dedent
to column zero (Python, Ruby) closes it. Braces and dedents inside string or
comment literals are counted like any other, and a unit nested inside another
of the same kind is absorbed by the outer one.
"""

from __future__ import annotations

import re
from typing import Dict, Iterator, List, Pattern

from ..comments.styles import normalize_extension
from ..models import CodeUnit

_JS_TRIGGER = re.compile(
    r"^\s*(export\s+(default\s+)?)?(async\s+)?"
    r"(function\s*\*?\s*\w+"
    r"|const\s+\w+\s*=\s*(async\s+)?function"
    r"|class\s+\w+"
    r"|\w+\s*:\s*(async\s+)?function)"
)
_PY_TRIGGER = re.compile(r"^\s*((async\s+)?def\s+\w+|class\s+\w+)")
_RB_TRIGGER = re.compile(r"^\s*(def\s+[\w.?!]+|class\s+\w+|module\s+\w+)")
_JAVA_TRIGGER = re.compile(
    r"^\s*(?!(?:if|else|for|while|switch|return|catch|synchronized)\b)"
    r"(public|private|protected)?\s*(static)?\s*(final\s+)?([\w<>\[\],]+)\s+\w+\s*\([^)]*\)\s*"
    r"(throws\s+[\w.,\s]+)?\{"
    r"|^\s*(public\s+|private\s+|protected\s+)?(abstract\s+|final\s+)?(class|interface|enum)\s+\w+"
)
_CS_TRIGGER = re.compile(
    r"^\s*(?!(?:if|else|for|foreach|while|switch|return|using|lock|catch)\b)"
    r"((public|private|protected|internal|static|virtual|override|async|sealed|abstract|partial)\s+)*"
    r"(([\w<>\[\],?]+)\s+\w+\s*\([^)]*\)\s*\{?\s*$|(class|interface|struct|record|enum)\s+\w+)"
)
_C_TRIGGER = re.compile(
    r"^\s*(?!(?:if|else|for|while|switch|return|do|case)\b)"
    r"(?:[\w:<>\*&]+\s+)+[\*&]*[\w:~]+\s*\([^;]*\)\s*(?:const\s*)?\{"
    r"|^\s*(class|struct)\s+\w+[^;]*$"
)
_GO_TRIGGER = re.compile(r"^\s*func\s+(\([^)]*\)\s*)?\w+")
_PHP_TRIGGER = re.compile(
    r"^\s*((public|private|protected|static|abstract|final)\s+)*(function\s+\w+|class\s+\w+)"
)
_RS_TRIGGER = re.compile(
    r"^\s*(pub(\([^)]*\))?\s+)?(async\s+)?(unsafe\s+)?(fn|struct|enum|trait|impl)\b"
)
_SWIFT_TRIGGER = re.compile(
    r"^\s*((public|private|internal|fileprivate|open|static|final|override|@\w+)\s+)*"
    r"(func|class|struct|enum|protocol|extension)\s+\w+"
)

_TRIGGERS: Dict[str, Pattern[str]] = {
    ".js": _JS_TRIGGER,
    ".jsx": _JS_TRIGGER,
    ".ts": _JS_TRIGGER,
    ".tsx": _JS_TRIGGER,
    ".py": _PY_TRIGGER,
    ".rb": _RB_TRIGGER,
    ".java": _JAVA_TRIGGER,
    ".cs": _CS_TRIGGER,
    ".c": _C_TRIGGER,
    ".cpp": _C_TRIGGER,
    ".go": _GO_TRIGGER,
    ".php": _PHP_TRIGGER,
    ".rs": _RS_TRIGGER,
    ".swift": _SWIFT_TRIGGER,
}

INDENTATION_EXTENSIONS = frozenset({".py", ".rb"})


def trigger_for(extension: str) -> Pattern[str]:
    """Return the trigger pattern for ``extension`` (JavaScript when unsupported)."""
    return _TRIGGERS.get(normalize_extension(extension), _JS_TRIGGER)


def _brace_delta(line: str) -> int:
    return line.count("{") - line.count("}")


def _dedents_after(lines: List[str], index: int) -> bool:
    following = index + 1
    if following >= len(lines):
        return False
    return not lines[following].startswith((" ", "\t"))


class SnippetExtractor:
    """Splits file content into code units for a given extension."""

    def __init__(self, extension: str) -> None:
        self.extension = normalize_extension(extension)
        self.pattern = trigger_for(self.extension)
        self.uses_indentation = self.extension in INDENTATION_EXTENSIONS

    def iter_units(self, content: str) -> Iterator[CodeUnit]:
        if not content:
            return
        lines = content.split("\n")
        inside = False
        start = 0
        balance = 0
        body: List[str] = []

        for index, line in enumerate(lines):
            if not inside:
                if not self.pattern.search(line):
                    continue
                inside = True
                start = index + 1
                body = [line]
                balance = _brace_delta(line)
                if self.uses_indentation:
                    closed = _dedents_after(lines, index)
                else:
                    closed = "{" in line and balance <= 0
            else:
                body.append(line)
                if self.uses_indentation:
                    closed = _dedents_after(lines, index)
                else:
                    balance += _brace_delta(line)
                    closed = balance <= 0

            if closed:
                inside = False
                yield CodeUnit(text="\n".join(body), start_line=start)
        # A unit still open at end of file is dropped.

    def extract(self, content: str) -> List[CodeUnit]:
        return list(self.iter_units(content))


def extract(content: str, extension: str) -> List[CodeUnit]:
    """Return every code unit found in ``content`` for a file with ``extension``."""
    return SnippetExtractor(extension).extract(content)


__all__ = ["INDENTATION_EXTENSIONS", "SnippetExtractor", "extract", "trigger_for"]
