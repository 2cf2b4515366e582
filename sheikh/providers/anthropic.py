"""Anthropic Messages API backend."""

from __future__ import annotations

import os

import httpx

from sheikh.config import ANTHROPIC_BASE_URL, ANTHROPIC_VERSION
from sheikh.errors import ProviderError
from sheikh.providers.base import HTTPBackend, ModelResponse


class AnthropicBackend(HTTPBackend):
    name = "anthropic"
    default_model = "claude-3-5-sonnet-20241022"
    base_url = ANTHROPIC_BASE_URL

    def __init__(self, api_key: str | None = None, client: httpx.Client | None = None):
        super().__init__(client)
        self.api_key = api_key or os.environ.get("ANTHROPIC_API_KEY") or os.environ.get("API_KEY", "")

    def is_available(self) -> bool:
        return bool(self.api_key)

    def available_models(self) -> list[str]:
        return [
            "claude-3-5-sonnet-20241022",
            "claude-3-5-haiku-20241022",
            "claude-3-opus-20240229",
            "claude-3-sonnet-20240229",
            "claude-3-haiku-20240307",
        ]

    def _headers(self) -> dict[str, str]:
        if not self.api_key:
            raise ProviderError("ANTHROPIC_API_KEY environment variable is required")
        return {
            "Content-Type": "application/json",
            "x-api-key": self.api_key,
            "anthropic-version": ANTHROPIC_VERSION,
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
        data = self._post("/messages", payload)
        return ModelResponse(
            content=data["content"][0]["text"],
            usage=data.get("usage", {}),
            model=data.get("model", model),
        )
