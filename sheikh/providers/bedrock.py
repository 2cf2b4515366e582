"""AWS Bedrock backend (Anthropic models via InvokeModel).

Authenticates with a Bedrock API key (``AWS_BEARER_TOKEN_BEDROCK``)
sent as a bearer token.
"""

from __future__ import annotations

import os

import httpx

from sheikh.config import AWS_DEFAULT_REGION
from sheikh.errors import ProviderError
from sheikh.providers.base import HTTPBackend, ModelResponse

BEDROCK_ANTHROPIC_VERSION = "bedrock-2023-05-31"


class BedrockBackend(HTTPBackend):
    name = "aws"
    default_model = "anthropic.claude-3-sonnet-20240229-v1:0"

    def __init__(
        self,
        api_key: str | None = None,
        region: str | None = None,
        client: httpx.Client | None = None,
    ):
        super().__init__(client)
        self.api_key = api_key or os.environ.get("AWS_BEARER_TOKEN_BEDROCK", "")
        self.region = region or AWS_DEFAULT_REGION
        self.base_url = f"https://bedrock-runtime.{self.region}.amazonaws.com"

    def is_available(self) -> bool:
        return bool(self.api_key)

    def available_models(self) -> list[str]:
        return [
            "anthropic.claude-3-sonnet-20240229-v1:0",
            "anthropic.claude-3-haiku-20240307-v1:0",
            "anthropic.claude-3-opus-20240229-v1:0",
        ]

    def _headers(self) -> dict[str, str]:
        if not self.api_key:
            raise ProviderError("AWS_BEARER_TOKEN_BEDROCK environment variable is required")
        return {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.api_key}",
        }

    def _send(self, prompt: str, model: str, max_tokens: int,
              temperature: float | None) -> ModelResponse:
        payload: dict = {
            "anthropic_version": BEDROCK_ANTHROPIC_VERSION,
            "max_tokens": max_tokens,
            "messages": [{"role": "user", "content": prompt}],
        }
        if temperature is not None:
            payload["temperature"] = temperature
        data = self._post(f"/model/{model}/invoke", payload)
        return ModelResponse(
            content=data["content"][0]["text"],
            usage=data.get("usage", {}),
            model=model,
        )
