"""Predefined workflows and a builder for ad hoc ones."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Any

from sheikh.errors import ValidationError

logger = logging.getLogger("sheikh.engine.workflow")


@dataclass
class Workflow:
    name: str
    description: str
    steps: list[str] = field(default_factory=list)
    triggers: list[str] = field(default_factory=list)


WORKFLOW_TEMPLATES: dict[str, Workflow] = {
    "deployment": Workflow(
        name="Deployment Workflow",
        description="Deploy application to production",
        steps=["build", "test", "deploy"],
        triggers=["push", "manual"],
    ),
    "testing": Workflow(
        name="Testing Workflow",
        description="Run comprehensive tests",
        steps=["unit-test", "integration-test", "e2e-test"],
        triggers=["push", "pr"],
    ),
    "code-review": Workflow(
        name="Code Review Workflow",
        description="Review code for quality and security",
        steps=["analyze", "review", "approve"],
        triggers=["pr"],
    ),
    "refactoring": Workflow(
        name="Refactoring Workflow",
        description="Refactor code for better maintainability",
        steps=["analyze", "refactor", "test"],
        triggers=["manual"],
    ),
    "documentation": Workflow(
        name="Documentation Workflow",
        description="Generate and update documentation",
        steps=["analyze", "generate", "update"],
        triggers=["push", "manual"],
    ),
}


def create_workflow(kind: str) -> Workflow:
    """Copy of a predefined workflow, or a single-step custom one."""
    template = WORKFLOW_TEMPLATES.get(kind)
    if template is None:
        return Workflow(
            name=f"{kind} Workflow",
            description=f"Custom {kind} workflow",
            steps=["execute"],
            triggers=["manual"],
        )
    return Workflow(
        name=template.name,
        description=template.description,
        steps=list(template.steps),
        triggers=list(template.triggers),
    )


@dataclass
class WorkflowStep:
    name: str
    type: str
    commands: list[str]
    conditions: list[str]


_STEP_TEMPLATES: dict[str, WorkflowStep] = {
    "deployment": WorkflowStep(
        name="Deploy Application",
        type="deploy",
        commands=["npm run build", "npm run deploy"],
        conditions=["tests_pass", "build_success"],
    ),
    "testing": WorkflowStep(
        name="Run Tests",
        type="test",
        commands=["npm test"],
        conditions=["code_changes"],
    ),
    "build": WorkflowStep(
        name="Build Application",
        type="build",
        commands=["npm run build"],
        conditions=["dependencies_installed"],
    ),
}

KNOWN_CONDITIONS = frozenset({"tests_pass", "build_success", "code_changes", "dependencies_installed"})


class WorkflowBuilder:
    """analyze_requirements -> generate_steps -> validate -> get_workflow."""

    def __init__(self, description: str):
        if not description or not description.strip():
            raise ValidationError("Workflow description is required")
        self.description = description
        self.requirements: dict[str, list[str]] | None = None
        self.steps: list[WorkflowStep] = []
        self.validated = False

    def analyze_requirements(self) -> dict[str, list[str]]:
        self.requirements = {
            "input": [],
            "output": [],
            "steps": [],
            "dependencies": [],
            "triggers": [],
        }
        for keyword, requirement in (("deploy", "deployment"), ("test", "testing"), ("build", "build")):
            if keyword in self.description:
                self.requirements["steps"].append(requirement)
        return self.requirements

    def generate_steps(self):
        requirements = self.requirements if self.requirements is not None else self.analyze_requirements()
        self.steps = [self.create_step(r) for r in requirements["steps"]]

    @staticmethod
    def create_step(requirement: str) -> WorkflowStep:
        template = _STEP_TEMPLATES.get(requirement)
        if template is None:
            return WorkflowStep(
                name=f"Execute {requirement}",
                type="custom",
                commands=[f'echo "Executing {requirement}"'],
                conditions=[],
            )
        return WorkflowStep(
            name=template.name,
            type=template.type,
            commands=list(template.commands),
            conditions=list(template.conditions),
        )

    def validate(self):
        for step in self.steps:
            if not all(c in KNOWN_CONDITIONS for c in step.conditions):
                raise ValidationError(f"Invalid conditions for step: {step.name}")
        self.validated = True
        logger.debug("Workflow %r validated with %d steps", self.description, len(self.steps))

    def build(self) -> "WorkflowBuilder":
        self.analyze_requirements()
        self.generate_steps()
        self.validate()
        return self

    def get_workflow(self) -> dict[str, Any]:
        if not self.validated:
            raise ValidationError("Workflow not validated")
        requirements = self.requirements if self.requirements is not None else self.analyze_requirements()
        return {
            "name": self.description,
            "description": self.description,
            "requirements": requirements,
            "steps": self.steps,
            "triggers": requirements["triggers"],
            "created_at": time.time(),
        }
