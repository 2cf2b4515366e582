"""Shared fixtures for sheikh tests."""

import logging
from pathlib import Path

import pytest

import sheikh.config
import sheikh.logging_config


@pytest.fixture(autouse=True)
def isolated_data_dir(tmp_path: Path, monkeypatch):
    """Point every ~/.sheikh path at a temp directory."""
    data_dir = tmp_path / "home" / ".sheikh"
    logs_dir = data_dir / "logs"
    monkeypatch.setattr(sheikh.config, "DATA_DIR", data_dir)
    monkeypatch.setattr(sheikh.config, "CONFIG_FILE", data_dir / "config.toml")
    monkeypatch.setattr(sheikh.config, "HISTORY_FILE", data_dir / "history")
    monkeypatch.setattr(sheikh.logging_config, "LOGS_DIR", logs_dir)
    monkeypatch.setattr(sheikh.logging_config, "AUDIT_LOG_FILE", logs_dir / "audit.jsonl")
    monkeypatch.setattr(sheikh.logging_config, "APP_LOG_FILE", logs_dir / "sheikh.log")
    yield data_dir
    for name in ("sheikh", "sheikh.audit"):
        logger = logging.getLogger(name)
        for handler in list(logger.handlers):
            handler.close()
            logger.removeHandler(handler)


@pytest.fixture
def tmp_workdir(tmp_path: Path) -> Path:
    """Create a temporary project directory."""
    workdir = tmp_path / "project"
    workdir.mkdir()
    return workdir


@pytest.fixture
def sample_project(tmp_workdir: Path) -> Path:
    """A small mixed-language project with an ignored dependency cache."""
    (tmp_workdir / "src").mkdir()
    (tmp_workdir / "src" / "api.js").write_text(
        "import express from 'express';\n"
        "const router = require('./router');\n"
        "\n"
        "function handleRequest(request) {\n"
        "  return router.route(request);\n"
        "}\n"
    )
    (tmp_workdir / "src" / "router.js").write_text(
        "class Router {\n"
        "  route(request) {\n"
        "    return request.path;\n"
        "  }\n"
        "}\n"
        "module.exports = new Router();\n"
    )
    (tmp_workdir / "app.py").write_text(
        "import os\n"
        "\n"
        "def main():\n"
        "    print(os.getcwd())\n"
    )
    (tmp_workdir / "README.md").write_text("# Sample\n\nA sample project.\n")
    (tmp_workdir / "notes.txt").write_text("not indexed\n")

    (tmp_workdir / "node_modules" / "express").mkdir(parents=True)
    (tmp_workdir / "node_modules" / "express" / "index.js").write_text("module.exports = {};\n")
    (tmp_workdir / ".git").mkdir()
    (tmp_workdir / ".git" / "config.json").write_text("{}\n")
    return tmp_workdir
