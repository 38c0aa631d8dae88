"""Tests for the text-generation backend runner."""

from __future__ import annotations

import json

import pytest

from komments.llm.runner import LLMRunner


class FakeResponse:
    def __init__(self, payload):
        self._payload = payload

    def read(self):
        return json.dumps(self._payload).encode("utf-8")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        return False


def _capture_urlopen(monkeypatch, payload) -> dict:
    captured = {}

    def fake_urlopen(request, timeout=None):
        captured["url"] = request.full_url
        captured["headers"] = {k.lower(): v for k, v in request.header_items()}
        captured["payload"] = json.loads(request.data.decode("utf-8"))
        captured["timeout"] = timeout
        return FakeResponse(payload)

    monkeypatch.setattr("komments.llm.runner.urlopen", fake_urlopen)
    return captured


def test_llm_runner_constructs_request() -> None:
    captured = {}

    def fake_runner(request):
        captured["prompt"] = request.prompt
        captured["provider"] = request.provider
        captured["model"] = request.model
        captured["temperature"] = request.temperature
        captured["max_tokens"] = request.max_tokens
        captured["api_key"] = request.api_key
        captured["request_timeout"] = request.request_timeout
        return "response"

    runner = LLMRunner(
        model="custom-model",
        api_key="secret",
        temperature=0.15,
        max_tokens=256,
        request_timeout=42.0,
        runner=fake_runner,
    )
    result = runner.run("Comment this code", temperature=0.9)

    assert result == "response"
    assert captured == {
        "prompt": "Comment this code",
        "provider": "gemini",
        "model": "custom-model",
        "temperature": 0.9,
        "max_tokens": 256,
        "api_key": "secret",
        "request_timeout": 42.0,
    }


def test_gemini_runner_posts_generate_content(monkeypatch) -> None:
    captured = _capture_urlopen(
        monkeypatch,
        {"candidates": [{"content": {"parts": [{"text": "Adds two "}, {"text": "numbers."}]}}]},
    )

    runner = LLMRunner(api_key="gemini-key", temperature=0.4, max_tokens=128, request_timeout=25.0)
    result = runner.run("Describe add()")

    assert result == "Adds two numbers."
    assert captured["url"] == (
        "https://generativelanguage.googleapis.com/v1beta/models/gemini-2.0-flash:generateContent"
    )
    assert captured["headers"]["x-goog-api-key"] == "gemini-key"
    assert captured["payload"]["contents"] == [
        {"role": "user", "parts": [{"text": "Describe add()"}]}
    ]
    assert captured["payload"]["generationConfig"] == {"temperature": 0.4, "maxOutputTokens": 128}
    assert captured["timeout"] == 25.0


def test_gemini_runner_returns_empty_text_without_candidates(monkeypatch) -> None:
    _capture_urlopen(monkeypatch, {"candidates": []})

    assert LLMRunner(api_key="gemini-key").run("Describe add()") == ""


def test_gemini_runner_requires_api_key() -> None:
    runner = LLMRunner()

    assert runner.requires_api_key is True
    with pytest.raises(RuntimeError):
        runner.run("Describe add()")


def test_openai_runner_posts_chat_completion(monkeypatch) -> None:
    captured = _capture_urlopen(
        monkeypatch, {"choices": [{"message": {"content": "Whales are mammals."}}]}
    )

    runner = LLMRunner(
        model="ai/smollm2:360M-Q4_K_M",
        provider="openai",
        base_url="http://localhost:12434/engines/v1/",
        api_key="local-key",
        temperature=0.05,
        max_tokens=128,
    )
    result = runner.run("Give me a fact about whales.")

    assert result == "Whales are mammals."
    assert runner.requires_api_key is False
    assert captured["url"] == "http://localhost:12434/engines/v1/chat/completions"
    assert captured["headers"]["authorization"] == "Bearer local-key"
    payload = captured["payload"]
    assert payload["model"] == "ai/smollm2:360M-Q4_K_M"
    assert payload["messages"] == [{"role": "user", "content": "Give me a fact about whales."}]
    assert payload["temperature"] == 0.05
    assert payload["max_tokens"] == 128


def test_unknown_provider_is_rejected() -> None:
    with pytest.raises(ValueError):
        LLMRunner(provider="carrier-pigeon")
