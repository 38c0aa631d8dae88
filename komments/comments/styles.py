"""Comment syntax and language names keyed by file extension."""

from __future__ import annotations

from pathlib import PurePath
from typing import Dict, Optional

from ..models import CommentStyle

_DEFAULT_STYLE = CommentStyle(line_prefix="//")

_STYLES: Dict[str, CommentStyle] = {
    ".js": CommentStyle("//"),
    ".jsx": CommentStyle("//"),
    ".ts": CommentStyle("//"),
    ".tsx": CommentStyle("//"),
    ".py": CommentStyle("#"),
    ".java": CommentStyle("//"),
    ".c": CommentStyle("//"),
    ".cpp": CommentStyle("//"),
    ".cs": CommentStyle("//"),
    ".go": CommentStyle("//"),
    ".rb": CommentStyle("#"),
    ".php": CommentStyle("//"),
    ".swift": CommentStyle("//"),
    ".rs": CommentStyle("//"),
    ".html": CommentStyle("<!--", "-->"),
    ".css": CommentStyle("/*", "*/"),
    ".scss": CommentStyle("//"),
}

_LANGUAGES: Dict[str, str] = {
    ".js": "JavaScript",
    ".jsx": "JavaScript (React)",
    ".ts": "TypeScript",
    ".tsx": "TypeScript (React)",
    ".py": "Python",
    ".java": "Java",
    ".c": "C",
    ".cpp": "C++",
    ".cs": "C#",
    ".go": "Go",
    ".rb": "Ruby",
    ".php": "PHP",
    ".swift": "Swift",
    ".rs": "Rust",
    ".html": "HTML",
    ".css": "CSS",
    ".scss": "SCSS",
}

KNOWN_EXTENSIONS: frozenset[str] = frozenset(_STYLES)

# JavaScript dialects mix `//` and `/* */` comments and use JSDoc blocks.
DOC_COMMENT_EXTENSIONS: frozenset[str] = frozenset({".js", ".jsx", ".ts", ".tsx"})


def normalize_extension(extension: str) -> str:
    """Lowercase ``extension`` and make sure it carries a leading dot."""
    cleaned = extension.strip().lower()
    if cleaned and not cleaned.startswith("."):
        cleaned = f".{cleaned}"
    return cleaned


def extension_of(path: str | PurePath) -> str:
    return PurePath(path).suffix.lower()


def style_for(extension: str) -> CommentStyle:
    """Return the comment style for ``extension``; unknown extensions use ``//``."""
    return _STYLES.get(normalize_extension(extension), _DEFAULT_STYLE)


def language_for(extension: str, default: Optional[str] = "JavaScript") -> Optional[str]:
    return _LANGUAGES.get(normalize_extension(extension), default)


def is_known_extension(path: str | PurePath) -> bool:
    return extension_of(path) in KNOWN_EXTENSIONS


def is_doc_comment_language(extension: str) -> bool:
    return normalize_extension(extension) in DOC_COMMENT_EXTENSIONS


__all__ = [
    "DOC_COMMENT_EXTENSIONS",
    "KNOWN_EXTENSIONS",
    "extension_of",
    "is_doc_comment_language",
    "is_known_extension",
    "language_for",
    "normalize_extension",
    "style_for",
]
