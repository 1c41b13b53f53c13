from __future__ import annotations

import json
import logging
from typing import Any, Protocol

import httpx
from openai import APIConnectionError, APIStatusError, OpenAI

from chunkscribe.adapters.providers import API_TIMEOUT_S, AUDIO_MIME_TYPE, ProviderSpec, provider_spec
from chunkscribe.contracts.artifacts import TranscriptionRequest
from chunkscribe.contracts.errors import DecodeError, ProviderError, TransportError


logger = logging.getLogger(__name__)


class _RawResponseLike(Protocol):
    status_code: int

    @property
    def text(self) -> str: ...


class _RawTranscriptionsAPI(Protocol):
    def create(self, **kwargs: Any) -> _RawResponseLike: ...


class _OpenAITranscriptionsAPI(Protocol):
    with_raw_response: _RawTranscriptionsAPI


class _OpenAIAudioAPI(Protocol):
    transcriptions: _OpenAITranscriptionsAPI


class OpenAIClientLike(Protocol):
    audio: _OpenAIAudioAPI


def _decode_text(body: str, *, provider: str) -> str:
    try:
        data = json.loads(body)
    except ValueError as exc:
        raise DecodeError(f"Failed to parse {provider} API response: {exc}") from exc
    if not isinstance(data, dict):
        raise DecodeError(f"{provider} API response must be a JSON object")
    text = data.get("text")
    if not isinstance(text, str):
        raise DecodeError(f"{provider} API response missing 'text' field")
    return text


class OpenAICompatibleAdapter:
    """Transcribes one payload against an OpenAI-compatible /audio/transcriptions endpoint."""

    def __init__(
        self,
        client: OpenAIClientLike,
        *,
        spec: ProviderSpec,
        language: str | None = None,
    ) -> None:
        self._client = client
        self._spec = spec
        self._language = language

    @property
    def provider(self) -> str:
        return self._spec.provider.value

    @property
    def model(self) -> str:
        return self._spec.model

    def transcribe(self, payload: bytes, *, filename: str = "audio.mp3") -> str:
        request_kwargs: dict[str, Any] = {
            "model": self._spec.model,
            "file": (filename, payload, AUDIO_MIME_TYPE),
        }
        if self._language:
            request_kwargs["language"] = self._language

        logger.debug("%s: uploading %s (%d bytes)", self.provider, filename, len(payload))
        try:
            raw = self._client.audio.transcriptions.with_raw_response.create(**request_kwargs)
        except APIStatusError as exc:
            raise ProviderError(exc.status_code, exc.response.text, provider=self.provider) from exc
        except APIConnectionError as exc:
            raise TransportError(f"Failed to send request to {self.provider} API: {exc}") from exc

        body = raw.text
        if not 200 <= raw.status_code < 300:
            raise ProviderError(raw.status_code, body, provider=self.provider)

        text = _decode_text(body, provider=self.provider)
        logger.debug("%s: %s -> %d chars", self.provider, filename, len(text))
        return text


def build_client(
    spec: ProviderSpec,
    api_key: str,
    *,
    timeout_s: float = API_TIMEOUT_S,
    http_client: httpx.Client | None = None,
) -> OpenAI:
    """SDK client for one provider row, with SDK retries disabled."""
    return OpenAI(
        api_key=api_key,
        base_url=spec.base_url,
        timeout=timeout_s,
        max_retries=0,
        http_client=http_client,
    )


def build_adapter(
    request: TranscriptionRequest,
    *,
    client: OpenAIClientLike | None = None,
    timeout_s: float = API_TIMEOUT_S,
) -> OpenAICompatibleAdapter:
    spec = provider_spec(request.provider)
    if client is None:
        client = build_client(spec, request.api_key, timeout_s=timeout_s)
    return OpenAICompatibleAdapter(client, spec=spec, language=request.language_hint)


__all__ = ["OpenAIClientLike", "OpenAICompatibleAdapter", "build_adapter", "build_client"]
