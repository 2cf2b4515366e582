"""Keyword-driven task planning.

Requirement extraction is substring matching on the lower-cased task
text; each requirement maps to one fixed step template. Step ordering
edges are an adjacency heuristic (an edge wherever two consecutive steps
use different agents), not a real dependency graph.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field

from sheikh.engine.roster import AgentType
from sheikh.engine.types import ExecutionPlan, PlanStep, RiskLevel, StepDependency
from sheikh.errors import ValidationError

logger = logging.getLogger("sheikh.engine.planner")

MEDIUM_RISK_STEP_COUNT = 5


@dataclass
class TaskRequirements:
    """What a task text asks for."""

    file_operations: list[str] = field(default_factory=list)  # create | modify | delete
    testing: bool = False
    git_operations: list[str] = field(default_factory=list)  # commit

    @property
    def is_empty(self) -> bool:
        return not (self.file_operations or self.testing or self.git_operations)


# (requirement, keywords)
_FILE_KEYWORDS: list[tuple[str, tuple[str, ...]]] = [
    ("create", ("create", "add")),
    ("modify", ("modify", "update", "change")),
    ("delete", ("delete", "remove")),
]
_TEST_KEYWORDS = ("test", "spec")
_GIT_KEYWORDS = ("git", "commit", "push")


def analyze_requirements(task: str) -> TaskRequirements:
    text = task.lower()
    requirements = TaskRequirements()
    for operation, keywords in _FILE_KEYWORDS:
        if any(k in text for k in keywords):
            requirements.file_operations.append(operation)
    if any(k in text for k in _TEST_KEYWORDS):
        requirements.testing = True
    if any(k in text for k in _GIT_KEYWORDS):
        requirements.git_operations.append("commit")
    return requirements


def generate_steps(requirements: TaskRequirements) -> list[PlanStep]:
    """One fixed template per requirement. ``delete`` has no template."""
    steps: list[PlanStep] = []

    if "create" in requirements.file_operations:
        steps.append(PlanStep(
            id="create_files",
            action="Create necessary files",
            agent=AgentType.MULTI_FILE_EDITOR.value,
            critical=True,
            estimated_time=30,
        ))

    if "modify" in requirements.file_operations:
        steps.append(PlanStep(
            id="modify_files",
            action="Modify existing files",
            agent=AgentType.MULTI_FILE_EDITOR.value,
            critical=True,
            estimated_time=45,
        ))

    if requirements.testing:
        steps.append(PlanStep(
            id="run_tests",
            action="Run test suite",
            agent=AgentType.TEST_COORDINATOR.value,
            critical=False,
            estimated_time=60,
        ))

    if "commit" in requirements.git_operations:
        steps.append(PlanStep(
            id="git_commit",
            action="Commit changes",
            agent=AgentType.GIT_WORKFLOW.value,
            critical=False,
            estimated_time=15,
        ))

    return steps


def calculate_dependencies(steps: list[PlanStep]) -> list[StepDependency]:
    return [
        StepDependency(source=prev.id, target=step.id)
        for prev, step in zip(steps, steps[1:])
        if step.agent != prev.agent
    ]


def estimate_time(steps: list[PlanStep]) -> int:
    return sum(step.estimated_time for step in steps)


def assess_risk(steps: list[PlanStep]) -> RiskLevel:
    if any(step.agent == AgentType.SECURITY_AUDITOR.value for step in steps):
        return RiskLevel.HIGH
    if len(steps) > MEDIUM_RISK_STEP_COUNT:
        return RiskLevel.MEDIUM
    return RiskLevel.LOW


class TaskPlanner:
    """Turns free-text task descriptions into ExecutionPlans."""

    def create_plan(self, task: str) -> ExecutionPlan:
        if not task or not task.strip():
            raise ValidationError("Task description is required")

        requirements = analyze_requirements(task)
        steps = generate_steps(requirements)
        plan = ExecutionPlan(
            id=str(time.time_ns()),
            task=task,
            steps=steps,
            dependencies=calculate_dependencies(steps),
            estimated_time=estimate_time(steps),
            risk=assess_risk(steps),
        )
        logger.info(
            "Created plan %s with %d steps (risk=%s)",
            plan.id, len(steps), plan.risk.value,
            extra={"plan_id": plan.id},
        )
        if not steps:
            logger.debug("No requirements recognized in task %r", task)
        return plan


def create_plan(task: str) -> ExecutionPlan:
    return TaskPlanner().create_plan(task)
