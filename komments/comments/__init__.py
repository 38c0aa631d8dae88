"""Comment syntax lookup, formatting, insertion and removal."""

from .formatter import FileAccessError, format_comment, format_for_file, insert_comment
from .stripper import StripResult, strip_comments
from .styles import language_for, style_for

__all__ = [
    "FileAccessError",
    "StripResult",
    "format_comment",
    "format_for_file",
    "insert_comment",
    "language_for",
    "strip_comments",
    "style_for",
]
