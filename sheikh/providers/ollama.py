"""Local Ollama backend."""

from __future__ import annotations

from typing import Any

import httpx
import ollama

from sheikh.config import DEFAULT_TEMPERATURE, OLLAMA_HOST
from sheikh.errors import ProviderError
from sheikh.providers.base import ModelBackend, ModelResponse

_FALLBACK_MODELS = ["llama2", "codellama", "mistral"]


def _field(obj: Any, key: str, default: Any = None) -> Any:
    """Read ``key`` from either a dict response or a response object."""
    if isinstance(obj, dict):
        return obj.get(key, default)
    return getattr(obj, key, default)


class OllamaBackend(ModelBackend):
    name = "ollama"
    default_model = "llama2"

    def __init__(self, host: str | None = None, client: ollama.Client | None = None):
        self.host = host or OLLAMA_HOST
        self._client = client

    @property
    def client(self) -> ollama.Client:
        if self._client is None:
            self._client = ollama.Client(host=self.host)
        return self._client

    def _installed(self) -> list[str]:
        listing = self.client.list()
        models = _field(listing, "models", []) or []
        return [_field(m, "model") or _field(m, "name") for m in models]

    def is_available(self) -> bool:
        try:
            self.client.list()
        except (ConnectionError, httpx.HTTPError, ollama.ResponseError):
            return False
        return True

    def available_models(self) -> list[str]:
        try:
            return self._installed()
        except (ConnectionError, httpx.HTTPError, ollama.ResponseError):
            return list(_FALLBACK_MODELS)

    def pull_model(self, model: str):
        try:
            self.client.pull(model)
        except (ConnectionError, httpx.HTTPError, ollama.ResponseError) as e:
            raise ProviderError(f"Failed to pull model {model}: {e}") from e

    def _send(self, prompt: str, model: str, max_tokens: int,
              temperature: float | None) -> ModelResponse:
        try:
            response = self.client.generate(
                model=model,
                prompt=prompt,
                stream=False,
                options={
                    "temperature": DEFAULT_TEMPERATURE if temperature is None else temperature,
                    "num_predict": max_tokens,
                },
            )
        except ConnectionError as e:
            raise ProviderError(
                "Ollama is not running or not accessible. "
                f"Please start Ollama and ensure it's running on {self.host}."
            ) from e
        except ollama.ResponseError as e:
            raise ProviderError(f"Ollama API error: {e.error}") from e

        prompt_tokens = _field(response, "prompt_eval_count", 0) or 0
        completion_tokens = _field(response, "eval_count", 0) or 0
        return ModelResponse(
            content=_field(response, "response", "") or "",
            usage={
                "prompt_tokens": prompt_tokens,
                "completion_tokens": completion_tokens,
                "total_tokens": prompt_tokens + completion_tokens,
            },
            model=model,
        )
