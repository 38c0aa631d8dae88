"""Shared constants for comment synthesis prompts."""

from __future__ import annotations

COMMENT_TEMPLATE = "comment.j2"

# Replies shorter than this are treated as empty and replaced by a template.
MIN_COMMENT_LENGTH = 5

DEFAULT_MAX_OUTPUT_TOKENS = 1024

DEFAULT_TEMPERATURE = 0.7


__all__ = [
    "COMMENT_TEMPLATE",
    "DEFAULT_MAX_OUTPUT_TOKENS",
    "DEFAULT_TEMPERATURE",
    "MIN_COMMENT_LENGTH",
]
