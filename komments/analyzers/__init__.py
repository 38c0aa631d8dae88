"""Code unit detection."""

from .snippets import SnippetExtractor, extract

__all__ = ["SnippetExtractor", "extract"]
