"""Configuration constants, AppConfig dataclass, and project config file."""

from __future__ import annotations

import copy
import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from sheikh.errors import ConfigError

logger = logging.getLogger("sheikh.config")


# Base directory for all sheikh user data
DATA_DIR = Path.home() / ".sheikh"
LOGS_DIR = DATA_DIR / "logs"
HISTORY_FILE = DATA_DIR / "history"

# User-level settings file
CONFIG_FILE = DATA_DIR / "config.toml"

# Per-project directory (config, agents, skills)
PROJECT_DIR_NAME = ".sheikh"
PROJECT_CONFIG_NAME = "config.json"

# Provider defaults
DEFAULT_PROVIDER = "anthropic"
DEFAULT_MODEL = "claude-3-5-sonnet-20241022"
DEFAULT_MAX_TOKENS = 1000
DEFAULT_TEMPERATURE = 0.7
VALID_PROVIDERS: list[str] = ["anthropic", "openai", "aws", "google", "ollama"]

ANTHROPIC_BASE_URL = "https://api.anthropic.com/v1"
ANTHROPIC_VERSION = "2023-06-01"
OPENAI_BASE_URL = "https://api.openai.com/v1"
GOOGLE_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"
AWS_DEFAULT_REGION = os.environ.get("AWS_DEFAULT_REGION", "us-east-1")
OLLAMA_HOST = os.environ.get("OLLAMA_BASE_URL", "http://localhost:11434")
HTTP_TIMEOUT = 60  # seconds

# Codebase analysis
INDEXED_EXTENSIONS: list[str] = [
    ".js", ".ts", ".py", ".java", ".go", ".rs", ".md", ".json", ".yaml", ".yml",
]
DEPENDENCY_CACHE_DIR = "node_modules"
RELEVANCE_THRESHOLD = 0.7
SUMMARY_CHARS = 200
MAX_KEY_TERMS = 10

# Plan execution
SIMULATED_STEP_DELAY = 1.0  # seconds

# Auto-approval settings accepted in the project config
VALID_APPROVAL_ACTIONS: list[str] = [
    "readFiles", "editFiles", "executeSafeCommands", "useMcp",
]


def load_config_file() -> dict:
    """Load settings from ~/.sheikh/config.toml. Returns empty dict if not found."""
    if not CONFIG_FILE.exists():
        return {}
    try:
        # Python 3.11+ has tomllib in stdlib
        try:
            import tomllib
        except ImportError:
            import tomli as tomllib  # type: ignore[no-redef]
        return tomllib.loads(CONFIG_FILE.read_text())
    except (OSError, ValueError) as e:
        logger.warning("Could not read %s: %s", CONFIG_FILE, e)
        return {}


@dataclass
class AppConfig:
    """Runtime configuration for the application."""

    provider: str = DEFAULT_PROVIDER
    model: str | None = None
    working_dir: str = field(default_factory=lambda: os.getcwd())
    max_tokens: int = DEFAULT_MAX_TOKENS
    temperature: float | None = None
    verbose: bool = False
    auto_approve: bool = False
    step_delay: float = SIMULATED_STEP_DELAY

    def __post_init__(self):
        DATA_DIR.mkdir(parents=True, exist_ok=True)
        self.provider = self.provider.lower()
        if self.provider not in VALID_PROVIDERS:
            raise ConfigError(
                f"Invalid API provider '{self.provider}'. "
                f"Must be one of: {', '.join(VALID_PROVIDERS)}"
            )

    @classmethod
    def from_file_and_cli(cls, cli_overrides: dict) -> "AppConfig":
        """Create AppConfig by merging config file defaults with CLI overrides.

        Priority: CLI flags > config.toml > dataclass defaults
        """
        file_config = load_config_file()

        merged: dict = {}
        field_map = {
            "provider": "provider",
            "model": "model",
            "max_tokens": "max_tokens",
            "temperature": "temperature",
            "verbose": "verbose",
            "auto_approve": "auto_approve",
            "step_delay": "step_delay",
        }

        for toml_key, field_name in field_map.items():
            if toml_key in file_config:
                merged[field_name] = file_config[toml_key]

        # CLI overrides take priority (only non-None values)
        for key, value in cli_overrides.items():
            if value is not None:
                merged[key] = value

        return cls(**merged)


# ── Project config (.sheikh/config.json) ────────────────────────────────────


def get_project_config_path(root: str | Path) -> Path:
    return Path(root) / PROJECT_DIR_NAME / PROJECT_CONFIG_NAME


def default_project_config() -> dict[str, Any]:
    """Default per-project configuration."""
    return {
        "apiProvider": DEFAULT_PROVIDER,
        "apiModelId": DEFAULT_MODEL,
        "autoApprovalSettings": {
            "enabled": True,
            "actions": {
                "readFiles": True,
                "editFiles": False,
                "executeSafeCommands": True,
                "useMcp": False,
            },
            "maxRequests": 20,
        },
    }


def project_config_exists(root: str | Path) -> bool:
    return get_project_config_path(root).is_file()


def load_project_config(root: str | Path) -> dict[str, Any]:
    """Load the project config, falling back to defaults when unreadable."""
    path = get_project_config_path(root)
    if path.is_file():
        try:
            return json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("Could not load config file %s, using defaults: %s", path, e)
    return default_project_config()


def save_project_config(root: str | Path, data: dict[str, Any]) -> Path:
    path = get_project_config_path(root)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
    return path


def init_project_config(root: str | Path) -> Path:
    """Write the default project config and return its path."""
    return save_project_config(root, default_project_config())


def reset_project_config(root: str | Path) -> Path:
    return save_project_config(root, default_project_config())


def update_project_config(root: str | Path, key: str, value: Any) -> dict[str, Any]:
    """Set a (dotted) key in the project config and persist it.

    Intermediate objects are created as needed, e.g. ``autoApprovalSettings.maxRequests``.
    The result is validated before anything is written.
    """
    config = copy.deepcopy(load_project_config(root))
    keys = key.split(".")
    current = config
    for part in keys[:-1]:
        if not isinstance(current.get(part), dict):
            current[part] = {}
        current = current[part]
    current[keys[-1]] = value
    validate_project_config(config)
    save_project_config(root, config)
    return config


def validate_project_config(config: dict[str, Any] | None) -> None:
    """Raise ConfigError describing the first problem found."""
    if not config:
        raise ConfigError("Configuration object is required")

    if config.get("apiProvider") not in VALID_PROVIDERS:
        raise ConfigError(
            f"Invalid API provider. Must be one of: {', '.join(VALID_PROVIDERS)}"
        )

    if not config.get("apiModelId"):
        raise ConfigError("API model ID is required")

    approval = config.get("autoApprovalSettings")
    if approval is None:
        return

    if not isinstance(approval.get("enabled"), bool):
        raise ConfigError("autoApprovalSettings.enabled must be a boolean")

    for key, value in (approval.get("actions") or {}).items():
        if key not in VALID_APPROVAL_ACTIONS:
            raise ConfigError(
                f"Invalid auto-approval action: {key}. "
                f"Must be one of: {', '.join(VALID_APPROVAL_ACTIONS)}"
            )
        if not isinstance(value, bool):
            raise ConfigError(f"autoApprovalSettings.actions.{key} must be a boolean")

    max_requests = approval.get("maxRequests")
    if max_requests is not None and (
        isinstance(max_requests, bool)
        or not isinstance(max_requests, (int, float))
        or max_requests < 1
    ):
        raise ConfigError("autoApprovalSettings.maxRequests must be a positive number")
