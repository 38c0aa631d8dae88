"""HTTP adapters around text-generation backends (Gemini, OpenAI-compatible)."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Callable, Optional
from urllib.error import HTTPError, URLError
from urllib.parse import quote
from urllib.request import Request, urlopen

from ..prompting.constants import DEFAULT_MAX_OUTPUT_TOKENS, DEFAULT_TEMPERATURE


@dataclass
class LLMRequest:
    """Represents a single synthesis request sent to the backend."""

    prompt: str
    provider: str
    model: str
    temperature: Optional[float]
    max_tokens: Optional[int]
    base_url: Optional[str]
    api_key: Optional[str]
    request_timeout: Optional[float]


class LLMRunner:
    """Sends prompts to the configured text-generation backend."""

    PROVIDERS = ("gemini", "openai")
    DEFAULT_PROVIDER = "gemini"
    DEFAULT_MODELS = {
        "gemini": "gemini-2.0-flash",
        "openai": "gpt-4o-mini",
    }
    DEFAULT_BASE_URLS = {
        "gemini": "https://generativelanguage.googleapis.com/v1beta",
        "openai": "https://api.openai.com/v1",
    }

    def __init__(
        self,
        model: str | None = None,
        *,
        provider: str | None = None,
        api_key: str | None = None,
        base_url: str | None = None,
        temperature: Optional[float] = DEFAULT_TEMPERATURE,
        max_tokens: Optional[int] = DEFAULT_MAX_OUTPUT_TOKENS,
        request_timeout: Optional[float] = 60.0,
        runner: Callable[[LLMRequest], str] | None = None,
    ) -> None:
        self.provider = (provider or self.DEFAULT_PROVIDER).lower()
        if self.provider not in self.PROVIDERS:
            supported = ", ".join(self.PROVIDERS)
            raise ValueError(f"Unknown LLM provider '{provider}'. Expected one of: {supported}")
        self.model = model or self.DEFAULT_MODELS[self.provider]
        self.api_key = api_key
        self.base_url = self._normalize_base_url(base_url or self.DEFAULT_BASE_URLS[self.provider])
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.request_timeout = request_timeout
        if runner is not None:
            self._runner = runner
        elif self.provider == "gemini":
            self._runner = self._gemini_runner
        else:
            self._runner = self._openai_runner

    @property
    def requires_api_key(self) -> bool:
        return self.provider == "gemini"

    def run(
        self,
        prompt: str,
        *,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
    ) -> str:
        """Send ``prompt`` to the backend and return the response text."""
        request = LLMRequest(
            prompt=prompt,
            provider=self.provider,
            model=self.model,
            temperature=temperature if temperature is not None else self.temperature,
            max_tokens=max_tokens if max_tokens is not None else self.max_tokens,
            base_url=self.base_url,
            api_key=self.api_key,
            request_timeout=self.request_timeout,
        )
        return self._runner(request)

    @staticmethod
    def _normalize_base_url(url: str) -> str:
        return url.rstrip("/")

    @staticmethod
    def _gemini_runner(request: LLMRequest) -> str:
        if not request.api_key:
            raise RuntimeError("Gemini runner requires an API key to be configured.")
        endpoint = f"{request.base_url}/models/{quote(request.model, safe='')}:generateContent"
        generation_config: dict[str, object] = {}
        if request.temperature is not None:
            generation_config["temperature"] = request.temperature
        if request.max_tokens is not None:
            generation_config["maxOutputTokens"] = request.max_tokens
        payload: dict[str, object] = {
            "contents": [{"role": "user", "parts": [{"text": request.prompt}]}],
        }
        if generation_config:
            payload["generationConfig"] = generation_config
        headers = {
            "Content-Type": "application/json",
            "x-goog-api-key": request.api_key,
        }
        response_payload = LLMRunner._post_json(endpoint, payload, headers, request.request_timeout)
        return LLMRunner._extract_gemini_text(response_payload).strip()

    @staticmethod
    def _openai_runner(request: LLMRequest) -> str:
        endpoint = f"{request.base_url}/chat/completions"
        payload: dict[str, object] = {
            "model": request.model,
            "messages": [{"role": "user", "content": request.prompt}],
        }
        if request.temperature is not None:
            payload["temperature"] = request.temperature
        if request.max_tokens is not None:
            payload["max_tokens"] = request.max_tokens
        headers = {"Content-Type": "application/json"}
        if request.api_key:
            headers["Authorization"] = f"Bearer {request.api_key}"
        response_payload = LLMRunner._post_json(endpoint, payload, headers, request.request_timeout)
        return LLMRunner._extract_openai_text(response_payload).strip()

    @staticmethod
    def _post_json(
        endpoint: str,
        payload: dict[str, object],
        headers: dict[str, str],
        request_timeout: Optional[float],
    ) -> dict[str, object]:
        data = json.dumps(payload).encode("utf-8")
        http_request = Request(endpoint, data=data, headers=headers, method="POST")
        timeout = request_timeout or 60.0

        try:
            with urlopen(http_request, timeout=timeout) as response:  # type: ignore[arg-type]
                raw = response.read()
        except HTTPError as exc:  # pragma: no cover - depends on runtime
            detail = exc.read().decode("utf-8", errors="ignore") if hasattr(exc, "read") else ""
            message = detail.strip() or exc.reason
            raise RuntimeError(f"LLM request failed with status {exc.code}: {message}") from exc
        except URLError as exc:  # pragma: no cover - depends on runtime
            raise RuntimeError(f"LLM request failed: {exc.reason}") from exc

        try:
            response_payload = json.loads(raw.decode("utf-8"))
        except json.JSONDecodeError as exc:
            raise RuntimeError("LLM backend returned invalid JSON") from exc
        if not isinstance(response_payload, dict):
            raise RuntimeError("LLM backend returned an unexpected payload")
        return response_payload

    @staticmethod
    def _extract_gemini_text(payload: dict[str, object]) -> str:
        candidates = payload.get("candidates")
        if not isinstance(candidates, list) or not candidates:
            return ""
        first = candidates[0]
        if not isinstance(first, dict):
            return ""
        content = first.get("content")
        if not isinstance(content, dict):
            return ""
        parts = content.get("parts")
        if not isinstance(parts, list):
            return ""
        texts = [
            part["text"]
            for part in parts
            if isinstance(part, dict) and isinstance(part.get("text"), str)
        ]
        return "".join(texts)

    @staticmethod
    def _extract_openai_text(payload: dict[str, object]) -> str:
        choices = payload.get("choices")
        if not isinstance(choices, list) or not choices:
            return ""
        first = choices[0]
        if not isinstance(first, dict):
            return ""
        message = first.get("message")
        if isinstance(message, dict):
            content = message.get("content")
            if isinstance(content, str):
                return content
        text = first.get("text")
        if isinstance(text, str):
            return text
        return ""


__all__ = ["LLMRequest", "LLMRunner"]
