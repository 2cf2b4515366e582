"""OpenAI Chat Completions backend."""

from __future__ import annotations

import os

import httpx

from sheikh.config import OPENAI_BASE_URL
from sheikh.errors import ProviderError
from sheikh.providers.base import HTTPBackend, ModelResponse


class OpenAIBackend(HTTPBackend):
    name = "openai"
    default_model = "gpt-4o"
    base_url = OPENAI_BASE_URL

    def __init__(self, api_key: str | None = None, client: httpx.Client | None = None):
        super().__init__(client)
        self.api_key = api_key or os.environ.get("OPENAI_API_KEY", "")

    def is_available(self) -> bool:
        return bool(self.api_key)

    def available_models(self) -> list[str]:
        return ["gpt-4o", "gpt-4o-mini", "gpt-4-turbo", "gpt-3.5-turbo"]

    def _headers(self) -> dict[str, str]:
        if not self.api_key:
            raise ProviderError("OPENAI_API_KEY environment variable is required")
        return {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.api_key}",
        }

    def _send(self, prompt: str, model: str, max_tokens: int,
              temperature: float | None) -> ModelResponse:
        payload: dict = {
            "model": model,
            "max_tokens": max_tokens,
            "messages": [{"role": "user", "content": prompt}],
        }
        if temperature is not None:
            payload["temperature"] = temperature
        data = self._post("/chat/completions", payload)
        return ModelResponse(
            content=data["choices"][0]["message"]["content"] or "",
            usage=data.get("usage", {}),
            model=data.get("model", model),
        )
