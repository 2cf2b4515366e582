"""Tests for the sheikh command line."""

import json

import pytest
from click.testing import CliRunner
from rich.console import Console

import sheikh.cli
import sheikh.config
from sheikh.cli import main
from sheikh.config import get_project_config_path
from sheikh.providers.base import ModelBackend, ModelResponse
from sheikh.ui import renderer


class EchoBackend(ModelBackend):
    name = "echo"
    default_model = "echo-1"

    def __init__(self):
        self.prompts = []

    def is_available(self):
        return True

    def available_models(self):
        return [self.default_model]

    def _send(self, prompt, model, max_tokens, temperature):
        self.prompts.append(prompt)
        return ModelResponse(content=f"echo: {prompt}", model=model)


@pytest.fixture(autouse=True)
def wide_console(monkeypatch):
    """Keep rich from wrapping table cells."""
    monkeypatch.setattr(renderer, "console", Console(width=200))


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def no_delay():
    """Make simulated steps instant through the user settings file."""
    sheikh.config.DATA_DIR.mkdir(parents=True, exist_ok=True)
    sheikh.config.CONFIG_FILE.write_text("step_delay = 0.0\n")


class TestAsk:
    def test_prints_reply(self, runner, monkeypatch):
        backend = EchoBackend()
        monkeypatch.setattr(sheikh.cli, "ProviderManager", lambda: _Manager(backend))
        result = runner.invoke(main, ["ask", "hello there"])
        assert result.exit_code == 0, result.output
        assert "echo: hello there" in result.output

    def test_piped_stdin_is_prepended(self, runner, monkeypatch):
        backend = EchoBackend()
        monkeypatch.setattr(sheikh.cli, "ProviderManager", lambda: _Manager(backend))
        runner.invoke(main, ["ask", "summarise"], input="some log output\n")
        assert backend.prompts[0].startswith("<stdin>\nsome log output")
        assert backend.prompts[0].endswith("summarise")

    def test_unknown_provider_exits_1(self, runner):
        result = runner.invoke(main, ["ask", "hi", "-p", "cohere"])
        assert result.exit_code == 1
        assert "Error:" in result.output
        assert "cohere" in result.output


class _Manager:
    def __init__(self, backend):
        self.backend = backend

    def get(self, name):
        return self.backend


class TestCodebaseCommands:
    def test_search(self, runner, sample_project):
        (sample_project / "config.js").write_text("const config = require('config');\n")
        result = runner.invoke(main, ["search", "config", "-d", str(sample_project)])
        assert result.exit_code == 0, result.output
        assert "config.js" in result.output

    def test_search_without_matches(self, runner, sample_project):
        result = runner.invoke(main, ["search", "zzzz", "-d", str(sample_project)])
        assert result.exit_code == 0
        assert "No files matched" in result.output

    def test_analyze(self, runner, sample_project):
        result = runner.invoke(main, ["analyze", "-d", str(sample_project)])
        assert result.exit_code == 0, result.output
        assert "Codebase Analysis Report" in result.output

    def test_missing_directory(self, runner, tmp_path):
        result = runner.invoke(main, ["analyze", "-d", str(tmp_path / "nope")])
        assert result.exit_code == 1
        assert "Directory not found" in result.output


class TestTaskCommands:
    def test_plan(self, runner):
        result = runner.invoke(main, ["plan", "create a module and add tests"])
        assert result.exit_code == 0, result.output
        assert "create_files" in result.output
        assert "run_tests" in result.output

    def test_empty_task(self, runner):
        result = runner.invoke(main, ["plan", " "])
        assert result.exit_code == 1
        assert "Task description is required" in result.output

    def test_run_with_auto_approve(self, runner, sample_project, no_delay):
        result = runner.invoke(main, ["run", "create a helper", "-y", "-d", str(sample_project)])
        assert result.exit_code == 0, result.output
        assert "example.js" in result.output
        assert "Recorded 1 change(s)" in result.output

    def test_run_rejected(self, runner, sample_project, no_delay):
        result = runner.invoke(main, ["run", "create a helper", "-d", str(sample_project)], input="n\n")
        assert result.exit_code == 0, result.output
        assert "Changes rejected" in result.output

    def test_run_with_conflicting_changes_exits_1(self, runner, sample_project, no_delay):
        result = runner.invoke(main, ["run", "create and update a helper", "-y", "-d", str(sample_project)])
        assert result.exit_code == 1
        assert "2 proposed change(s) conflict" in result.output
        assert "No changes to approve" in result.output

    def test_run_any_overlap_strategy(self, runner, sample_project, no_delay):
        result = runner.invoke(
            main, ["run", "create a helper", "-y", "--conflicts", "any-overlap", "-d", str(sample_project)],
        )
        assert result.exit_code == 0, result.output

    def test_bracketed_task_text_is_printed_literally(self, runner):
        result = runner.invoke(main, ["plan", "create the [/] widget"])
        assert result.exit_code == 0, result.output
        assert "create the [/] widget" in result.output

    def test_bracketed_query(self, runner, sample_project):
        result = runner.invoke(main, ["search", "[bold]x[/]", "-d", str(sample_project)])
        assert result.exit_code == 0, result.output
        assert "No files matched '[bold]x[/]'" in result.output

    def test_workflow(self, runner):
        result = runner.invoke(main, ["workflow", "build and deploy"])
        assert result.exit_code == 0, result.output
        assert "Deploy Application" in result.output


class TestTemplateCommands:
    def test_roster(self, runner):
        result = runner.invoke(main, ["agents", "--roster"])
        assert result.exit_code == 0
        assert "security-auditor" in result.output

    def test_agent_lifecycle(self, runner, tmp_workdir):
        d = ["-d", str(tmp_workdir)]
        created = runner.invoke(main, ["agents", *d, "--create", "fixer", "--description", "Fixes bugs", "--tools", "Read,Edit"])
        assert created.exit_code == 0, created.output
        assert (tmp_workdir / ".sheikh" / "agents" / "fixer.md").exists()

        listed = runner.invoke(main, ["agents", *d])
        assert "fixer" in listed.output

        deleted = runner.invoke(main, ["agents", *d, "--delete", "fixer"])
        assert deleted.exit_code == 0
        assert not (tmp_workdir / ".sheikh" / "agents" / "fixer.md").exists()

    def test_agent_without_description(self, runner, tmp_workdir):
        result = runner.invoke(main, ["agents", "-d", str(tmp_workdir), "--create", "fixer"])
        assert result.exit_code == 1
        assert "description is required" in result.output

    def test_skill_create(self, runner, tmp_workdir):
        result = runner.invoke(main, ["skills", "-d", str(tmp_workdir), "--create", "notes", "--description", "Take notes"])
        assert result.exit_code == 0, result.output
        assert (tmp_workdir / ".sheikh" / "skills" / "notes" / "SKILL.md").exists()


class TestConfigCommand:
    def test_init_set_validate(self, runner, tmp_workdir):
        d = ["-d", str(tmp_workdir)]
        assert runner.invoke(main, ["config", *d, "--init"]).exit_code == 0
        assert runner.invoke(main, ["config", *d, "--set", "autoApprovalSettings.maxRequests", "50"]).exit_code == 0
        data = json.loads(get_project_config_path(tmp_workdir).read_text())
        assert data["autoApprovalSettings"]["maxRequests"] == 50

        result = runner.invoke(main, ["config", *d, "--validate"])
        assert result.exit_code == 0
        assert "Configuration is valid" in result.output

    def test_invalid_set(self, runner, tmp_workdir):
        result = runner.invoke(main, ["config", "-d", str(tmp_workdir), "--set", "apiProvider", "cohere"])
        assert result.exit_code == 1
        assert "Invalid API provider" in result.output

    def test_show(self, runner, tmp_workdir):
        result = runner.invoke(main, ["config", "-d", str(tmp_workdir)])
        assert result.exit_code == 0
        assert "apiProvider" in result.output


class TestGroup:
    def test_version(self, runner):
        result = runner.invoke(main, ["--version"])
        assert "2.0.0" in result.output
