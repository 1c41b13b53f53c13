from __future__ import annotations

from dataclasses import dataclass

from chunkscribe.contracts.artifacts import Provider


API_TIMEOUT_S = 300.0
AUDIO_MIME_TYPE = "audio/mpeg"


@dataclass(frozen=True, slots=True)
class ProviderSpec:
    provider: Provider
    base_url: str
    model: str
    env_var: str

    @property
    def endpoint(self) -> str:
        return f"{self.base_url}/audio/transcriptions"


PROVIDER_SPECS: dict[Provider, ProviderSpec] = {
    Provider.OPENAI: ProviderSpec(
        provider=Provider.OPENAI,
        base_url="https://api.openai.com/v1",
        model="whisper-1",
        env_var="OPENAI_API_KEY",
    ),
    Provider.MISTRAL: ProviderSpec(
        provider=Provider.MISTRAL,
        base_url="https://api.mistral.ai/v1",
        model="voxtral-mini-latest",
        env_var="MISTRAL_API_KEY",
    ),
}


def provider_spec(provider: Provider | str) -> ProviderSpec:
    return PROVIDER_SPECS[Provider.parse(provider)]


__all__ = ["API_TIMEOUT_S", "AUDIO_MIME_TYPE", "PROVIDER_SPECS", "ProviderSpec", "provider_spec"]
