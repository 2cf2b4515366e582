"""Google Gemini (generativelanguage) backend."""

from __future__ import annotations

import os

import httpx

from sheikh.config import GOOGLE_BASE_URL
from sheikh.errors import ProviderError
from sheikh.providers.base import HTTPBackend, ModelResponse


class GoogleBackend(HTTPBackend):
    name = "google"
    default_model = "gemini-1.5-pro"
    base_url = GOOGLE_BASE_URL

    def __init__(self, api_key: str | None = None, client: httpx.Client | None = None):
        super().__init__(client)
        self.api_key = api_key or os.environ.get("GOOGLE_API_KEY", "")

    def is_available(self) -> bool:
        return bool(self.api_key)

    def available_models(self) -> list[str]:
        return ["gemini-1.5-pro", "gemini-1.5-flash", "gemini-1.0-pro"]

    def _send(self, prompt: str, model: str, max_tokens: int,
              temperature: float | None) -> ModelResponse:
        if not self.api_key:
            raise ProviderError("GOOGLE_API_KEY environment variable is required")
        generation_config: dict = {"maxOutputTokens": max_tokens}
        if temperature is not None:
            generation_config["temperature"] = temperature
        payload = {
            "contents": [{"parts": [{"text": prompt}]}],
            "generationConfig": generation_config,
        }
        data = self._post(
            f"/models/{model}:generateContent",
            payload,
            params={"key": self.api_key},
        )
        parts = data["candidates"][0]["content"]["parts"]
        return ModelResponse(
            content="".join(p.get("text", "") for p in parts),
            usage=data.get("usageMetadata", {}),
            model=model,
        )
