"""Configuration loading for komments (.komments.yml and API credentials)."""

from __future__ import annotations

import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence

import yaml
from dotenv import dotenv_values, set_key

from .logging import get_logger, log_success
from .prompting.constants import DEFAULT_MAX_OUTPUT_TOKENS, DEFAULT_TEMPERATURE
from .stores.history import DEFAULT_HISTORY_FILENAME

CONFIG_FILENAME = ".komments.yml"
API_KEY_ENV = "GOOGLE_GEMINI_API_KEY"
API_KEY_ENV_KEYS = (API_KEY_ENV, "KOMMENTS_API_KEY")
ENV_FILES = (".env.local", ".env")
API_KEY_HELP_URL = "https://aistudio.google.com/app/apikey"

_logger = get_logger("config")


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class LLMConfig:
    """Backend settings from .komments.yml."""

    provider: Optional[str] = None
    model: Optional[str] = None
    temperature: float = DEFAULT_TEMPERATURE
    max_tokens: int = DEFAULT_MAX_OUTPUT_TOKENS
    base_url: Optional[str] = None
    request_timeout: Optional[float] = None


@dataclass
class RemoveConfig:
    """Settings for the remove-comments command."""

    confirm: bool = True
    exclude_dirs: List[str] = field(default_factory=list)


@dataclass
class KommentsConfig:
    """Represents the high-level settings for one project root."""

    root: Path
    llm: LLMConfig = field(default_factory=LLMConfig)
    history_path: Optional[Path] = None
    remove: RemoveConfig = field(default_factory=RemoveConfig)
    api_key: Optional[str] = None

    @property
    def history_file(self) -> Path:
        return self.history_path or (self.root / DEFAULT_HISTORY_FILENAME)

    def with_api_key(self, api_key: Optional[str]) -> "KommentsConfig":
        return replace(self, api_key=api_key)


def load_config(config_path: Path, *, environ: Mapping[str, str] | None = None) -> KommentsConfig:
    """Load configuration from disk and resolve the backend credential."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()
    api_key = resolve_api_key(root, environ=environ)

    if not config_file.exists():
        return KommentsConfig(root=root, api_key=api_key)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    llm = LLMConfig()
    llm_data = _as_dict(data.get("llm"))
    if llm_data:
        temperature = _as_float(llm_data.get("temperature"))
        if temperature is not None and not 0.0 <= temperature <= 1.0:
            raise ConfigError("llm.temperature must be between 0.0 and 1.0")
        llm = LLMConfig(
            provider=_as_str(llm_data.get("provider")),
            model=_as_str(llm_data.get("model")),
            temperature=temperature if temperature is not None else DEFAULT_TEMPERATURE,
            max_tokens=_as_int(llm_data.get("max_tokens")) or DEFAULT_MAX_OUTPUT_TOKENS,
            base_url=_as_str(llm_data.get("base_url")),
            request_timeout=_as_float(llm_data.get("request_timeout")),
        )

    history_data = _as_dict(data.get("history"))
    history_str = _as_str(history_data.get("path")) if history_data else None
    history_path = root / history_str if history_str else None

    remove = RemoveConfig()
    remove_data = _as_dict(data.get("remove"))
    if remove_data:
        confirm = _as_bool(remove_data.get("confirm"))
        remove = RemoveConfig(
            confirm=True if confirm is None else confirm,
            exclude_dirs=_as_str_list(remove_data.get("exclude_dirs")),
        )

    return KommentsConfig(
        root=root,
        llm=llm,
        history_path=history_path,
        remove=remove,
        api_key=api_key,
    )


def resolve_api_key(root: Path, *, environ: Mapping[str, str] | None = None) -> Optional[str]:
    """Return the backend key from the environment, then ``.env.local``, then ``.env``."""
    env = os.environ if environ is None else environ
    for key in API_KEY_ENV_KEYS:
        value = env.get(key)
        if value:
            return value
    for filename in ENV_FILES:
        path = root / filename
        if not path.is_file():
            continue
        values = dotenv_values(path)
        for key in API_KEY_ENV_KEYS:
            value = values.get(key)
            if value:
                return value
    return None


def setup_api_key(
    root: Path,
    *,
    prompt: Callable[[str], str],
    echo: Callable[[str], None] = print,
) -> Optional[str]:
    """Ask for a Gemini API key, store it in the project's env files and return it.

    Returns ``None`` when the user enters nothing.
    """
    _logger.warning("Gemini API key not found.")
    echo("You can get a free API key from Google AI Studio:")
    echo(API_KEY_HELP_URL)

    api_key = prompt("Enter your Gemini API key: ").strip()
    if not api_key:
        _logger.error("API key cannot be empty.")
        return None

    for filename in ENV_FILES:
        env_path = root / filename
        env_path.touch(exist_ok=True)
        set_key(str(env_path), API_KEY_ENV, api_key, quote_mode="never")

    _protect_env_files(root)
    log_success(_logger, "API key saved successfully!")
    return api_key


def _protect_env_files(root: Path) -> None:
    gitignore = root / ".gitignore"
    try:
        existing = gitignore.read_text(encoding="utf-8") if gitignore.exists() else ""
        present = {line.strip() for line in existing.splitlines()}
        missing = [entry for entry in ENV_FILES if entry not in present]
        if not missing:
            return
        prefix = "" if not existing or existing.endswith("\n") else "\n"
        addition = prefix + "\n# Komments API keys\n" + "\n".join(missing) + "\n"
        with gitignore.open("a", encoding="utf-8") as handle:
            handle.write(addition)
        log_success(_logger, "Added %s to .gitignore for security", ", ".join(missing))
    except OSError:
        _logger.warning(
            "Could not update .gitignore. Please manually add .env and .env.local to your .gitignore file."
        )


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded or {}


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float, bool)) else None


def _as_float(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            return None
    return None


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            return None
    return None


def _as_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "yes", "1"}:
            return True
        if lowered in {"false", "no", "0"}:
            return False
    return None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float, bool))]
    return []


__all__ = [
    "API_KEY_ENV",
    "CONFIG_FILENAME",
    "ConfigError",
    "KommentsConfig",
    "LLMConfig",
    "RemoveConfig",
    "load_config",
    "resolve_api_key",
    "setup_api_key",
]
