"""Error kinds and exception hierarchy shared across sheikh."""

from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    """Coarse classification of a failure."""

    VALIDATION = "validation"
    EXECUTION = "execution"
    CONFLICT = "conflict"
    PROVIDER = "provider"
    TEMPLATE = "template"
    CONFIG = "config"


class SheikhError(Exception):
    """Base error. Every failure surfaced to the user is one of these."""

    kind: ErrorKind = ErrorKind.EXECUTION

    def __init__(self, message: str, kind: ErrorKind | None = None):
        super().__init__(message)
        if kind is not None:
            self.kind = kind

    @property
    def message(self) -> str:
        return str(self)


class ValidationError(SheikhError):
    """Malformed or missing input. Never retried."""

    kind = ErrorKind.VALIDATION


class ExecutionError(SheikhError):
    """A plan step or plan run failed."""

    kind = ErrorKind.EXECUTION


class ConflictError(SheikhError):
    """Proposed changes could not be reconciled."""

    kind = ErrorKind.CONFLICT


class ProviderError(SheikhError):
    """A model backend call failed."""

    kind = ErrorKind.PROVIDER


class TemplateError(SheikhError):
    """An agent or skill template could not be loaded, created or removed."""

    kind = ErrorKind.TEMPLATE


class ConfigError(SheikhError):
    """Configuration is missing or invalid."""

    kind = ErrorKind.CONFIG
