"""Abstract base class for model backends."""

from __future__ import annotations

import logging
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any

import httpx

from sheikh.config import DEFAULT_MAX_TOKENS, HTTP_TIMEOUT
from sheikh.errors import ProviderError
from sheikh.logging_config import log_model_call

logger = logging.getLogger("sheikh.providers")


@dataclass
class ModelResponse:
    """Normalized reply from any provider."""

    content: str
    model: str
    usage: dict[str, Any] = field(default_factory=dict)


class ModelBackend(ABC):
    """A hosted or local model that answers a single user prompt."""

    name: str = ""
    default_model: str = ""

    @abstractmethod
    def is_available(self) -> bool:
        """Whether credentials / the local server are present."""
        ...

    @abstractmethod
    def available_models(self) -> list[str]:
        ...

    @abstractmethod
    def _send(self, prompt: str, model: str, max_tokens: int,
              temperature: float | None) -> ModelResponse:
        ...

    def send_message(
        self,
        prompt: str,
        model: str | None = None,
        max_tokens: int | None = None,
        temperature: float | None = None,
    ) -> ModelResponse:
        """Send ``prompt`` and return the reply. All failures raise ProviderError."""
        model_id = model or self.default_model
        started = time.time()
        try:
            response = self._send(prompt, model_id, max_tokens or DEFAULT_MAX_TOKENS, temperature)
        except ProviderError:
            raise
        except (httpx.HTTPError, KeyError, IndexError, TypeError, ValueError) as e:
            raise ProviderError(f"{self.name} API error: {e}") from e
        duration = time.time() - started
        logger.debug("%s replied in %.2fs", self.name, duration, extra={"provider": self.name, "model": model_id})
        log_model_call(self.name, response.model, response.usage, duration)
        return response


class HTTPBackend(ModelBackend):
    """Shared plumbing for JSON-over-HTTPS providers."""

    base_url: str = ""

    def __init__(self, client: httpx.Client | None = None):
        self._client = client

    def _headers(self) -> dict[str, str]:
        return {"Content-Type": "application/json"}

    @property
    def client(self) -> httpx.Client:
        if self._client is None:
            self._client = httpx.Client(
                base_url=self.base_url,
                headers=self._headers(),
                timeout=HTTP_TIMEOUT,
            )
        return self._client

    def _post(self, url: str, payload: dict, **kwargs: Any) -> dict:
        response = self.client.post(url, json=payload, headers=self._headers(), **kwargs)
        if response.is_error:
            raise ProviderError(f"{self.name} API error: {self._error_message(response)}")
        return response.json()

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        try:
            data = response.json()
        except ValueError:
            return f"HTTP {response.status_code}"
        error = data.get("error") if isinstance(data, dict) else None
        if isinstance(error, dict) and error.get("message"):
            return error["message"]
        if isinstance(error, str):
            return error
        if isinstance(data, dict) and data.get("message"):
            return data["message"]
        return f"HTTP {response.status_code}"

    def close(self):
        if self._client is not None:
            self._client.close()
            self._client = None
