"""Model backends and the manager that selects between them."""

from __future__ import annotations

from sheikh.errors import ProviderError
from sheikh.providers.anthropic import AnthropicBackend
from sheikh.providers.base import ModelBackend, ModelResponse
from sheikh.providers.bedrock import BedrockBackend
from sheikh.providers.google import GoogleBackend
from sheikh.providers.ollama import OllamaBackend
from sheikh.providers.openai import OpenAIBackend


class ProviderManager:
    """Holds one backend per provider name. Construct once, pass around."""

    def __init__(self, backends: dict[str, ModelBackend] | None = None):
        if backends is None:
            backends = {
                "anthropic": AnthropicBackend(),
                "openai": OpenAIBackend(),
                "aws": BedrockBackend(),
                "google": GoogleBackend(),
                "ollama": OllamaBackend(),
            }
        self._backends = {name.lower(): backend for name, backend in backends.items()}

    def get(self, name: str) -> ModelBackend:
        backend = self._backends.get(name.lower())
        if backend is None:
            raise ProviderError(
                f"Provider '{name}' not found. "
                f"Available providers: {', '.join(self.list_providers())}"
            )
        return backend

    def list_providers(self) -> list[str]:
        return list(self._backends)

    def has(self, name: str) -> bool:
        return name.lower() in self._backends


__all__ = [
    "ModelBackend",
    "ModelResponse",
    "ProviderManager",
    "AnthropicBackend",
    "OpenAIBackend",
    "BedrockBackend",
    "GoogleBackend",
    "OllamaBackend",
]
