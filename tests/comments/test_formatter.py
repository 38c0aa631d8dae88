"""Tests for comment formatting and insertion."""

from __future__ import annotations

from pathlib import Path

import pytest

from komments.comments.formatter import (
    FileAccessError,
    format_comment,
    format_for_file,
    insert_comment,
    insert_into_lines,
    is_structured_doc,
)
from komments.comments.stripper import strip_comments
from komments.comments.styles import style_for
from komments.models import CommentStyle


def test_single_line_body_gets_prefix() -> None:
    assert format_comment("Adds two numbers", CommentStyle("#")) == "# Adds two numbers"


def test_multi_line_body_prefixes_every_line() -> None:
    formatted = format_comment("Adds numbers\nReturns the sum", CommentStyle("//"))

    assert formatted == "// Adds numbers\n// Returns the sum"


def test_block_style_flattens_body() -> None:
    assert format_comment("Main\nnavigation", CommentStyle("<!--", "-->")) == "<!-- Main navigation -->"
    assert format_comment("Reset margins", CommentStyle("/*", "*/")) == "/* Reset margins */"


def test_structured_doc_is_wrapped_in_doc_block() -> None:
    body = "Adds two numbers\n@param a first operand\n@returns the sum"

    formatted = format_comment(body, CommentStyle("//"), structured_doc=True)

    assert formatted == (
        "/**\n"
        " * Adds two numbers\n"
        " * @param a first operand\n"
        " * @returns the sum\n"
        " */"
    )


def test_structured_doc_keeps_existing_block() -> None:
    body = "/**\n * Loads a user\n * @param id user id\n */"

    assert format_comment(body, CommentStyle("//"), structured_doc=True) == body


def test_doc_tags_only_trigger_doc_block_for_javascript_dialects() -> None:
    body = "Adds\n@param a first"

    assert format_for_file(body, "math.ts").startswith("/**\n")
    assert format_for_file(body, "math.py") == "# Adds\n# @param a first"


def test_is_structured_doc_detects_tags() -> None:
    assert is_structured_doc("@returns {Promise} done")
    assert not is_structured_doc("Sends the weekly report by mail")


def test_insert_into_lines_rejects_zero() -> None:
    with pytest.raises(ValueError):
        insert_into_lines(["a"], 0, "# x")


def test_insert_comment_places_comment_before_line(tmp_path: Path) -> None:
    target = tmp_path / "calc.py"
    target.write_text("import math\ndef area(r):\n    return math.pi * r * r\n", encoding="utf-8")

    result = insert_comment("calc.py", 2, "Area of a circle", root=tmp_path)

    assert result == tmp_path / "calc.py"
    assert target.read_text(encoding="utf-8") == (
        "import math\n# Area of a circle\ndef area(r):\n    return math.pi * r * r\n"
    )


def test_insert_comment_missing_file_raises(tmp_path: Path) -> None:
    with pytest.raises(FileAccessError):
        insert_comment(tmp_path / "missing.js", 1, "Nothing here")


def test_insert_comment_rejects_invalid_line(tmp_path: Path) -> None:
    target = tmp_path / "a.js"
    target.write_text("const a = 1;\n", encoding="utf-8")

    with pytest.raises(FileAccessError):
        insert_comment(target, 0, "Bad line")
    assert target.read_text(encoding="utf-8") == "const a = 1;\n"


@pytest.mark.parametrize(
    ("filename", "original", "body"),
    [
        ("util.py", "def f():\n    pass\n", "Does nothing"),
        ("util.js", "function f(a) {\n  return a;\n}\n", "Identity\n@param a value"),
        ("page.html", "<nav></nav>\n", "Top navigation"),
    ],
)
def test_insert_then_strip_restores_original(
    tmp_path: Path, filename: str, original: str, body: str
) -> None:
    target = tmp_path / filename
    target.write_text(original, encoding="utf-8")

    insert_comment(target, 1, body)
    extension = target.suffix
    result = strip_comments(target.read_text(encoding="utf-8"), extension, style_for(extension))

    assert result.content == original
    assert result.removed_count == 1


@pytest.mark.parametrize("extension", [".py", ".go", ".html", ".css", ".kt"])
def test_single_line_bodies_stay_single_line(extension: str) -> None:
    style = style_for(extension)

    formatted = format_comment("Explains the code", style)

    assert "\n" not in formatted
    assert formatted.startswith(style.line_prefix)
    if style.is_block:
        assert formatted.endswith(style.block_suffix)
