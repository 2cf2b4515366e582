"""Terminal output for every sheikh command (rich)."""

from __future__ import annotations

import json

from rich.console import Console
from rich.json import JSON
from rich.markdown import Markdown
from rich.markup import escape
from rich.panel import Panel
from rich.status import Status
from rich.table import Table
from rich.text import Text

from sheikh.analysis.codebase_index import SearchResult
from sheikh.engine.approval import Approval, ApprovalStatus
from sheikh.engine.roster import AgentProfile
from sheikh.engine.types import CoordinationResult, ExecutionPlan, ExecutionResult, PlanStatus, StepStatus
from sheikh.engine.workflow import WorkflowBuilder
from sheikh.templates import Template


console = Console()

_RISK_STYLE = {"low": "green", "medium": "yellow", "high": "bold red"}
_CHANGE_STYLE = {"create": "green", "modify": "yellow", "delete": "red"}


def show_welcome(provider: str, model: str, working_dir: str):
    """Banner with the active backend and project directory."""
    console.print()
    console.print(
        Panel(
            f"[bold cyan]Sheikh[/bold cyan] - AI Coding Assistant\n"
            f"Provider: [green]{escape(provider)}[/green]  |  Model: [green]{escape(model)}[/green]  |  "
            f"Dir: [dim]{escape(working_dir)}[/dim]\n"
            f"Type [bold]/help[/bold] for commands, [bold]Ctrl+D[/bold] or [bold]/exit[/bold] to leave",
            border_style="cyan",
            padding=(1, 2),
        )
    )
    console.print()


def show_help():
    """Display chat help table."""
    table = Table(title="Commands", border_style="dim")
    table.add_column("Command", style="bold cyan", no_wrap=True)
    table.add_column("Description")
    table.add_row("/help", "List chat commands and shortcuts")
    table.add_row("/search <query>", "Search the codebase")
    table.add_row("/plan <task>", "Show the execution plan for a task")
    table.add_row("/skill <name> \\[args]", "Send a project skill as the prompt")
    table.add_row("/exit", "Leave the chat")
    table.add_row("", "")
    table.add_row("[bold]Shortcuts[/bold]", "")
    table.add_row("Esc+Enter", "Line break without submitting")
    table.add_row("Up/Down", "Previous and next input")
    table.add_row("Ctrl+R", "Reverse-search earlier input")
    table.add_row("Tab", "Complete a slash command")
    console.print(table)
    console.print()


def render_final_text(text: str):
    """Render a model reply as markdown."""
    if text.strip():
        console.print(Markdown(text.strip()))


def start_thinking_spinner() -> Status:
    status = Status("[dim]Thinking...[/dim]", spinner="dots", console=console)
    status.start()
    return status


def stop_thinking_spinner(status: Status | None):
    if status is not None:
        status.stop()


# ── Codebase ────────────────────────────────────────────────────────────────


def show_search_results(query: str, results: list[SearchResult]):
    if not results:
        show_info(f"No files matched '{query}'")
        return

    table = Table(title=f"Results for '{escape(query)}'", border_style="dim")
    table.add_column("File", style="bold cyan")
    table.add_column("Relevance", justify="right")
    table.add_column("Purpose")
    table.add_column("Dependencies", style="dim")
    for r in results:
        deps = ", ".join(r.dependencies[:5])
        if len(r.dependencies) > 5:
            deps += f" (+{len(r.dependencies) - 5})"
        table.add_row(escape(r.file), f"{r.relevance:.2f}", escape(r.context.purpose), escape(deps))
    console.print(table)


def show_report(report: str):
    console.print(Markdown(report))


# ── Plans and execution ─────────────────────────────────────────────────────


def show_plan(plan: ExecutionPlan):
    risk = plan.risk.value
    table = Table(
        title=f"Plan {plan.id}",
        caption=(
            f"~{plan.estimated_time}s  |  risk: "
            f"[{_RISK_STYLE.get(risk, 'white')}]{risk}[/{_RISK_STYLE.get(risk, 'white')}]"
        ),
        border_style="dim",
    )
    table.add_column("#", justify="right", style="dim")
    table.add_column("Action", style="bold")
    table.add_column("Agent", style="cyan")
    table.add_column("Critical", justify="center")
    table.add_column("Est.", justify="right")
    for step in plan.steps:
        table.add_row(
            escape(step.id), escape(step.action), escape(step.agent),
            "yes" if step.critical else "", f"{step.estimated_time}s",
        )
    console.print(f"[bold]Task:[/bold] {escape(plan.task)}")
    if plan.steps:
        console.print(table)
    else:
        show_info("No recognised actions in this task; the plan is empty.")

    if plan.dependencies:
        edges = ", ".join(f"{d.source} -> {d.target}" for d in plan.dependencies)
        console.print(f"[dim]Dependencies: {escape(edges)}[/dim]")


def show_execution_result(result: ExecutionResult):
    for step in result.steps:
        if step.status == StepStatus.COMPLETED:
            mark = "[green]✓[/green]"
            detail = escape(step.output or "")
        else:
            mark = "[red]✗[/red]"
            detail = f"[red]{escape(step.error or '')}[/red]"
        console.print(f"  {mark} {escape(step.action)} [dim]({step.duration:.2f}s)[/dim] {detail}")

    if result.status == PlanStatus.COMPLETED:
        console.print(f"[bold green]Plan {result.plan_id} completed[/bold green]")
    else:
        console.print(f"[bold red]Plan {result.plan_id} {result.status.value}[/bold red]")
    for err in result.errors:
        console.print(f"  [red]- {escape(err)}[/red]")


def show_coordination(coordination: CoordinationResult):
    for conflict in coordination.conflicts:
        others = len(conflict.conflicting_changes)
        console.print(
            f"[yellow]Conflict:[/yellow] {escape(conflict.change.file)} "
            f"({conflict.change.type.value}) clashes with {others} other change(s)"
        )
    for dep in coordination.dependencies:
        console.print(f"[dim]{escape(dep.source.file)} -> {escape(dep.target.file)} ({dep.type})[/dim]")


def show_approval_preview(approval: Approval):
    """Render the pending changes of an approval as a panel."""
    text = Text()
    for change in approval.changes:
        kind = change.type.value
        text.append(f"{kind:<7}", style=_CHANGE_STYLE.get(kind, "white"))
        text.append(f" {change.file}")
        if change.lines:
            text.append(f"  lines {change.lines}", style="dim")
        text.append("\n")
    console.print(
        Panel(
            text,
            title=f"[bold yellow]Proposed changes ({len(approval.changes)})[/bold yellow]",
            border_style="yellow",
            padding=(0, 1),
        )
    )


def confirm_approval(approval: Approval) -> bool:
    try:
        response = console.input("[bold yellow]Apply these changes? (y)es / (n)o: [/bold yellow]").strip().lower()
    except (EOFError, KeyboardInterrupt):
        return False
    return response in ("y", "yes", "")


def show_approval_outcome(approval: Approval | None):
    if approval is None:
        show_info("No changes to approve.")
    elif approval.status == ApprovalStatus.APPROVED:
        console.print(f"[green]Recorded {len(approval.applied)} change(s).[/green]")
    else:
        console.print("[yellow]Changes rejected.[/yellow]")


def show_workflow(builder: WorkflowBuilder):
    workflow = builder.get_workflow()
    console.print(f"[bold]Workflow:[/bold] {escape(workflow['name'])}")
    if not workflow["steps"]:
        show_info("No deployment, testing or build steps recognised.")
        return
    table = Table(border_style="dim")
    table.add_column("Step", style="bold")
    table.add_column("Type", style="cyan")
    table.add_column("Commands")
    table.add_column("Conditions", style="dim")
    for step in workflow["steps"]:
        table.add_row(
            escape(step.name), step.type, escape("\n".join(step.commands)), ", ".join(step.conditions),
        )
    console.print(table)


# ── Agents, skills, config ──────────────────────────────────────────────────


def show_roster(profiles: list[AgentProfile]):
    table = Table(title="Engine agents", border_style="dim")
    table.add_column("Agent", style="bold cyan", no_wrap=True)
    table.add_column("Description")
    table.add_column("Capabilities", style="dim")
    for p in profiles:
        table.add_row(p.name, p.description, ", ".join(p.capabilities))
    console.print(table)


def show_templates(kind: str, templates: list[Template]):
    if not templates:
        show_info(f"No {kind}s found.")
        return
    table = Table(title=f"{kind.capitalize()}s", border_style="dim")
    table.add_column("Name", style="bold cyan", no_wrap=True)
    table.add_column("Description")
    table.add_column("Path", style="dim")
    for t in templates:
        table.add_row(escape(t.name), escape(t.description), escape(str(t.path)))
    console.print(table)


def show_config(config: dict, path: str):
    console.print(Panel(JSON(json.dumps(config)), title=f"[dim]{escape(path)}[/dim]", border_style="dim"))


def show_error(message: str):
    """Red ``Error:`` line; the CLI exits 1 after it."""
    console.print(f"[bold red]Error:[/bold red] {escape(message)}")


def show_success(message: str):
    console.print(f"[green]{escape(message)}[/green]")


def show_info(message: str):
    """Dim informational line."""
    console.print(f"[dim]{escape(message)}[/dim]")
