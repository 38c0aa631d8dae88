"""Tests for the deterministic fallback comment template."""

from __future__ import annotations

from komments.failsafe import build_default_comment, is_async, parameter_names, snippet_name


def test_function_template_lists_parameters() -> None:
    comment = build_default_comment("def add(a, b):\n    return a + b")

    assert comment == (
        "/**\n"
        " * add handles add operation\n"
        " * @param a Parameter description\n"
        " * @param b Parameter description\n"
        " */"
    )


def test_class_template() -> None:
    assert build_default_comment("class UserService {\n}") == "/**\n * UserService class\n */"


def test_async_template_mentions_promise() -> None:
    comment = build_default_comment("async function fetchUser(id) {\n  return api.get(id);\n}")

    assert comment.splitlines() == [
        "/**",
        " * fetchUser - Asynchronously handles fetchuser operation",
        " * @param id Parameter description",
        " * @returns {Promise} Promise that resolves when the operation completes",
        " */",
    ]


def test_parameter_names_drop_receivers_defaults_and_variadics() -> None:
    assert parameter_names("def m(self, x: int = 3, *args, **kw):") == ["x"]
    assert parameter_names("function f(a, ...rest) {") == ["a"]
    assert parameter_names("def run():") == []


def test_snippet_name_variants() -> None:
    assert snippet_name("const handler = async (req) => {") == "handler"
    assert snippet_name("public void process(Order order) {") == "process"
    assert snippet_name("???") == "function"


def test_is_async_detects_promise_construction() -> None:
    assert is_async("function wait(ms) {\n  return new Promise((r) => setTimeout(r, ms));\n}")
    assert not is_async("function wait(ms) {\n  return ms;\n}")
