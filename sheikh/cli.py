"""Sheikh - AI coding assistant. Entry point."""

from __future__ import annotations

import asyncio
import json
import os
import sys

import click

from sheikh import __version__
from sheikh.analysis.file_analyzer import PythonAstAnalyzer, RegexFileAnalyzer
from sheikh.analysis.report import TestDetection
from sheikh.config import (
    AppConfig,
    get_project_config_path,
    init_project_config,
    load_project_config,
    project_config_exists,
    reset_project_config,
    update_project_config,
    validate_project_config,
)
from sheikh.engine.approval import ApprovalSystem
from sheikh.engine.coordinator import ChangeCoordinator, ConflictStrategy
from sheikh.engine.engine import AgenticEngine
from sheikh.engine.executor import PlanExecutor, SimulatedStepExecutor
from sheikh.errors import ConflictError, SheikhError, ValidationError
from sheikh.logging_config import setup_logging
from sheikh.providers import ProviderManager
from sheikh.templates import AgentStore, SkillStore
from sheikh.ui import renderer


class SheikhGroup(click.Group):
    """Turns any SheikhError raised by a command into ``Error: ...`` and exit 1."""

    def invoke(self, ctx: click.Context):
        try:
            return super().invoke(ctx)
        except SheikhError as e:
            renderer.show_error(e.message)
            sys.exit(1)


def _resolve_dir(working_dir: str | None) -> str:
    if not working_dir:
        return os.getcwd()
    wd = os.path.abspath(working_dir)
    if not os.path.isdir(wd):
        raise ValidationError(f"Directory not found: {wd}")
    return wd


dir_option = click.option("-d", "--dir", "working_dir", default=None, help="Project directory (default: cwd)")


def _build_engine(config: AppConfig, root: str, analyzer: str = "regex",
                  conflicts: str = ConflictStrategy.MODIFY_MODIFY_ONLY.value,
                  auto_approve: bool = False) -> AgenticEngine:
    file_analyzer = PythonAstAnalyzer(fallback=RegexFileAnalyzer()) if analyzer == "python-ast" else RegexFileAnalyzer()
    approve_all = auto_approve or config.auto_approve
    approval = ApprovalSystem(
        preview_callback=renderer.show_approval_preview,
        confirm_callback=None if approve_all else renderer.confirm_approval,
    )
    return AgenticEngine(
        root,
        analyzer=file_analyzer,
        executor=PlanExecutor(SimulatedStepExecutor(config.step_delay)),
        coordinator=ChangeCoordinator(ConflictStrategy(conflicts)),
        approval=approval,
    )


@click.group(cls=SheikhGroup)
@click.option("-v", "--verbose", is_flag=True, help="Log warnings to the console")
@click.version_option(__version__, prog_name="sheikh")
@click.pass_context
def main(ctx: click.Context, verbose: bool):
    """Sheikh - an AI coding assistant with an agentic engine."""
    setup_logging(verbose)
    ctx.obj = AppConfig.from_file_and_cli({"verbose": verbose or None})


# ── Model backend ───────────────────────────────────────────────────────────


@main.command()
@click.argument("prompt")
@click.option("-p", "--provider", default=None, help="anthropic, openai, aws, google or ollama")
@click.option("-m", "--model", default=None, help="Model id (provider default if omitted)")
@click.option("--max-tokens", type=int, default=None)
@click.option("--temp", "temperature", type=float, default=None, help="Sampling temperature")
@click.pass_obj
def ask(config: AppConfig, prompt: str, provider: str | None, model: str | None,
        max_tokens: int | None, temperature: float | None):
    """Send a single prompt to the model and print the reply."""
    stdin = click.get_text_stream("stdin")
    if not stdin.isatty():
        piped = stdin.read()
        if piped.strip():
            prompt = f"<stdin>\n{piped}\n</stdin>\n\n{prompt}"

    backend = ProviderManager().get(provider or config.provider)
    response = backend.send_message(
        prompt,
        model=model or config.model,
        max_tokens=max_tokens or config.max_tokens,
        temperature=temperature if temperature is not None else config.temperature,
    )
    renderer.render_final_text(response.content)


@main.command()
@click.option("-p", "--provider", default=None)
@click.option("-m", "--model", default=None)
@dir_option
@click.pass_obj
def chat(config: AppConfig, provider: str | None, model: str | None, working_dir: str | None):
    """Interactive session. /help lists the commands."""
    from sheikh.ui.prompts import create_prompt_session, get_prompt_text

    root = _resolve_dir(working_dir)
    backend = ProviderManager().get(provider or config.provider)
    model_id = model or config.model or backend.default_model
    engine = _build_engine(config, root)
    skills = SkillStore(root).load()

    renderer.show_welcome(backend.name, model_id, root)
    session = create_prompt_session()

    while True:
        try:
            line = session.prompt(get_prompt_text(backend.name, model_id)).strip()
        except KeyboardInterrupt:
            continue
        except EOFError:
            break
        if not line:
            continue

        command, _, arg = line.partition(" ")
        try:
            if command == "/exit":
                break
            elif command == "/help":
                renderer.show_help()
            elif command == "/search":
                renderer.show_search_results(arg, engine.search_codebase(arg))
            elif command == "/plan":
                renderer.show_plan(engine.create_plan(arg))
            elif command == "/skill":
                name, _, skill_args = arg.partition(" ")
                skill = skills.get(name)
                if skill is None:
                    renderer.show_error(f"Skill '{name}' not found")
                    continue
                _reply(backend, skills.render(skill, skill_args), model_id, config)
            else:
                _reply(backend, line, model_id, config)
        except SheikhError as e:
            renderer.show_error(e.message)


def _reply(backend, prompt: str, model: str, config: AppConfig):
    status = renderer.start_thinking_spinner()
    try:
        response = backend.send_message(
            prompt, model=model, max_tokens=config.max_tokens, temperature=config.temperature,
        )
    finally:
        renderer.stop_thinking_spinner(status)
    renderer.render_final_text(response.content)


# ── Codebase ────────────────────────────────────────────────────────────────


@main.command()
@click.argument("query")
@dir_option
@click.option("--analyzer", type=click.Choice(["regex", "python-ast"]), default="regex")
@click.pass_obj
def search(config: AppConfig, query: str, working_dir: str | None, analyzer: str):
    """Rank project files by relevance to QUERY."""
    engine = _build_engine(config, _resolve_dir(working_dir), analyzer=analyzer)
    renderer.show_search_results(query, engine.search_codebase(query))


@main.command()
@dir_option
@click.option("--analyzer", type=click.Choice(["regex", "python-ast"]), default="regex")
@click.option(
    "--detect-tests",
    type=click.Choice([t.value for t in TestDetection]),
    default=TestDetection.FILE_TYPE.value,
    help="How the 'no tests' recommendation looks for tests",
)
@click.pass_obj
def analyze(config: AppConfig, working_dir: str | None, analyzer: str, detect_tests: str):
    """Print a markdown analysis report of the project."""
    engine = _build_engine(config, _resolve_dir(working_dir), analyzer=analyzer)
    renderer.show_report(engine.generate_report(TestDetection(detect_tests)))


# ── Tasks ───────────────────────────────────────────────────────────────────


@main.command()
@click.argument("task")
@click.pass_obj
def plan(config: AppConfig, task: str):
    """Show the execution plan for TASK without running it."""
    engine = _build_engine(config, os.getcwd())
    renderer.show_plan(engine.create_plan(task))


@main.command()
@click.argument("task")
@dir_option
@click.option("-y", "--yes", "auto_approve", is_flag=True, help="Approve proposed changes without asking")
@click.option(
    "--conflicts",
    type=click.Choice([s.value for s in ConflictStrategy]),
    default=ConflictStrategy.MODIFY_MODIFY_ONLY.value,
)
@click.pass_obj
def run(config: AppConfig, task: str, working_dir: str | None, auto_approve: bool, conflicts: str):
    """Plan TASK, execute it, coordinate changes and ask for approval."""
    engine = _build_engine(
        config, _resolve_dir(working_dir), conflicts=conflicts, auto_approve=auto_approve,
    )
    outcome = asyncio.run(engine.execute_task(task))

    renderer.show_plan(outcome.plan)
    renderer.show_execution_result(outcome.result)
    renderer.show_coordination(outcome.coordination)
    renderer.show_approval_outcome(outcome.approval)
    if outcome.result.errors:
        sys.exit(1)
    if outcome.coordination.has_conflicts:
        raise ConflictError(
            f"{len(outcome.coordination.conflicts)} proposed change(s) conflict and were not applied"
        )


@main.command()
@click.argument("description")
@click.pass_obj
def workflow(config: AppConfig, description: str):
    """Build and validate a workflow from DESCRIPTION."""
    engine = _build_engine(config, os.getcwd())
    renderer.show_workflow(engine.generate_workflow(description))


# ── Agents and skills ───────────────────────────────────────────────────────


@main.command()
@dir_option
@click.option("--roster", is_flag=True, help="List the built-in engine agents")
@click.option("--create", "create_name", default=None, metavar="NAME")
@click.option("--description", default=None)
@click.option("--tools", default=None, help="Comma separated tool names")
@click.option("--model", default=None, help="inherit, sonnet, opus or haiku")
@click.option("--delete", "delete_name", default=None, metavar="NAME")
@click.pass_obj
def agents(config: AppConfig, working_dir: str | None, roster: bool, create_name: str | None,
           description: str | None, tools: str | None, model: str | None, delete_name: str | None):
    """List, create or delete project agents."""
    if roster:
        engine = _build_engine(config, os.getcwd())
        renderer.show_roster(engine.roster.all())
        return

    store = AgentStore(_resolve_dir(working_dir)).load()
    if create_name:
        data = {"name": create_name, "description": description, "model": model}
        if tools is not None:
            data["tools"] = [t.strip() for t in tools.split(",") if t.strip()]
        path = store.create(data)
        renderer.show_success(f"Created agent {create_name} at {path}")
    elif delete_name:
        store.delete(delete_name)
        renderer.show_success(f"Deleted agent {delete_name}")
    else:
        renderer.show_templates("agent", store.all())


@main.command()
@dir_option
@click.option("--create", "create_name", default=None, metavar="NAME")
@click.option("--description", default=None)
@click.option("--delete", "delete_name", default=None, metavar="NAME")
@click.pass_obj
def skills(config: AppConfig, working_dir: str | None, create_name: str | None,
           description: str | None, delete_name: str | None):
    """List, create or delete project skills."""
    store = SkillStore(_resolve_dir(working_dir)).load()
    if create_name:
        path = store.create({"name": create_name, "description": description})
        renderer.show_success(f"Created skill {create_name} at {path}")
    elif delete_name:
        store.delete(delete_name)
        renderer.show_success(f"Deleted skill {delete_name}")
    else:
        renderer.show_templates("skill", store.all())


# ── Project config ──────────────────────────────────────────────────────────


def _parse_value(raw: str):
    """``true``/``20``/``{"a": 1}`` become JSON values; anything else stays a string."""
    try:
        return json.loads(raw)
    except json.JSONDecodeError:
        return raw


@main.command("config")
@dir_option
@click.option("--init", "do_init", is_flag=True, help="Write the default project config")
@click.option("--validate", "do_validate", is_flag=True)
@click.option("--reset", "do_reset", is_flag=True)
@click.option("--set", "set_pair", nargs=2, default=None, metavar="KEY VALUE")
@click.pass_obj
def config_cmd(config: AppConfig, working_dir: str | None, do_init: bool, do_validate: bool,
               do_reset: bool, set_pair: tuple[str, str] | None):
    """Show or change the project configuration (.sheikh/config.json)."""
    root = _resolve_dir(working_dir)
    path = get_project_config_path(root)

    if do_init:
        if project_config_exists(root):
            renderer.show_info(f"Config already exists at {path}")
        else:
            init_project_config(root)
            renderer.show_success(f"Created {path}")
    elif do_reset:
        reset_project_config(root)
        renderer.show_success(f"Reset {path} to defaults")
    elif set_pair:
        key, raw = set_pair
        update_project_config(root, key, _parse_value(raw))
        renderer.show_success(f"Set {key}")
    elif do_validate:
        validate_project_config(load_project_config(root))
        renderer.show_success("Configuration is valid")
    else:
        renderer.show_config(load_project_config(root), str(path))


if __name__ == "__main__":
    main()
