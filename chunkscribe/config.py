"""
User settings persisted as JSON.

Lookup order for the file: $CHUNKSCRIBE_CONFIG, $XDG_CONFIG_HOME/chunkscribe/settings.json,
~/.config/chunkscribe/settings.json. API keys fall back to the provider's environment variable.
"""

from __future__ import annotations

import json
import os
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any, Mapping

from chunkscribe.adapters.providers import provider_spec
from chunkscribe.components.dispatch import MAX_CONCURRENT_REQUESTS
from chunkscribe.contracts.artifacts import Provider
from chunkscribe.contracts.errors import ConfigError, InputValidationError
from chunkscribe.pipeline.io import write_settings_json


CONFIG_ENV_VAR = "CHUNKSCRIBE_CONFIG"
SETTINGS_FILENAME = "settings.json"


def settings_path(environ: Mapping[str, str] | None = None) -> Path:
    env = os.environ if environ is None else environ
    explicit = env.get(CONFIG_ENV_VAR)
    if explicit:
        return Path(explicit).expanduser()
    xdg = env.get("XDG_CONFIG_HOME")
    base = Path(xdg).expanduser() if xdg else Path.home() / ".config"
    return base / "chunkscribe" / SETTINGS_FILENAME


def mask_api_key(key: str) -> str:
    if len(key) > 10:
        return f"{key[:6]}...{key[-4:]}"
    return "***"


@dataclass(slots=True)
class Settings:
    provider: str = Provider.OPENAI.value
    openai_api_key: str | None = None
    mistral_api_key: str | None = None
    language: str | None = None
    max_concurrency: int = MAX_CONCURRENT_REQUESTS

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Settings":
        known = {f.name for f in fields(cls)}
        try:
            settings = cls(**{key: value for key, value in data.items() if key in known})
            settings.provider = Provider.parse(settings.provider).value
        except (TypeError, InputValidationError) as exc:
            raise ConfigError(f"Invalid settings: {exc}") from exc
        if not isinstance(settings.max_concurrency, int) or settings.max_concurrency < 1:
            raise ConfigError("Invalid settings: max_concurrency must be a positive integer")
        return settings

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def load(cls, path: Path | None = None) -> "Settings":
        path = settings_path() if path is None else Path(path)
        if not path.exists():
            return cls()
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            raise ConfigError(f"Cannot read settings from {path}: {exc}") from exc
        if not isinstance(data, dict):
            raise ConfigError(f"Settings file must contain a JSON object: {path}")
        return cls.from_dict(data)

    def save(self, path: Path | None = None) -> Path:
        path = settings_path() if path is None else Path(path)
        write_settings_json(path, self.to_dict())
        return path

    def stored_api_key(self, provider: Provider | str) -> str | None:
        if Provider.parse(provider) is Provider.MISTRAL:
            return self.mistral_api_key
        return self.openai_api_key

    def set_api_key(self, provider: Provider | str, key: str) -> None:
        if Provider.parse(provider) is Provider.MISTRAL:
            self.mistral_api_key = key
        else:
            self.openai_api_key = key

    def api_key_for(self, provider: Provider | str, environ: Mapping[str, str] | None = None) -> str:
        spec = provider_spec(provider)
        key = self.stored_api_key(spec.provider)
        if key:
            return key
        env = os.environ if environ is None else environ
        key = env.get(spec.env_var)
        if key:
            return key
        raise ConfigError(
            f"No API key configured for {spec.provider.value}. "
            f"Set one with 'chunkscribe config --provider {spec.provider.value} --api-key KEY' "
            f"or the {spec.env_var} environment variable."
        )


def validate_api_key(provider: Provider | str, key: str) -> str:
    key = key.strip()
    if not key:
        raise InputValidationError("API key must not be empty")
    if Provider.parse(provider) is Provider.OPENAI and not key.startswith("sk-"):
        raise InputValidationError("Invalid key format. OpenAI keys start with 'sk-'")
    return key


__all__ = [
    "CONFIG_ENV_VAR",
    "Settings",
    "mask_api_key",
    "settings_path",
    "validate_api_key",
]
