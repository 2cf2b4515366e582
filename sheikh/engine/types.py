"""Core types for planning, executing and coordinating agentic tasks."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from sheikh.errors import ValidationError


class RiskLevel(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class PlanStatus(str, Enum):
    """Status of a plan run."""

    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


class StepStatus(str, Enum):
    """Status of a single step run."""

    PENDING = "pending"
    COMPLETED = "completed"
    ERROR = "error"


class ChangeType(str, Enum):
    CREATE = "create"
    MODIFY = "modify"
    DELETE = "delete"


@dataclass
class PlanStep:
    """One abstract step of a plan, assigned to an agent type."""

    id: str
    action: str
    agent: str
    critical: bool = False
    estimated_time: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "action": self.action,
            "agent": self.agent,
            "critical": self.critical,
            "estimated_time": self.estimated_time,
        }


@dataclass
class StepDependency:
    """Ordering edge between two adjacent steps."""

    source: str
    target: str

    def to_dict(self) -> dict[str, str]:
        return {"from": self.source, "to": self.target}


@dataclass
class ExecutionPlan:
    """Ordered steps for one task. Built by the planner, run once."""

    id: str
    task: str
    steps: list[PlanStep] = field(default_factory=list)
    dependencies: list[StepDependency] = field(default_factory=list)
    estimated_time: int = 0
    risk: RiskLevel = RiskLevel.LOW
    created_at: float = field(default_factory=time.time)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "task": self.task,
            "steps": [s.to_dict() for s in self.steps],
            "dependencies": [d.to_dict() for d in self.dependencies],
            "estimated_time": self.estimated_time,
            "risk": self.risk.value,
            "created_at": self.created_at,
        }


@dataclass
class ProposedChange:
    """A file change a step would make. Never written to disk by the engine."""

    file: str
    type: ChangeType
    lines: str | None = None
    content: str | None = None

    def __post_init__(self):
        # Plain strings are accepted; anything unknown is rejected
        try:
            self.type = ChangeType(self.type)
        except ValueError:
            raise ValidationError(
                f"Invalid change type '{self.type}'. "
                f"Must be one of: {', '.join(t.value for t in ChangeType)}"
            ) from None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"file": self.file, "type": self.type.value}
        if self.lines is not None:
            data["lines"] = self.lines
        if self.content is not None:
            data["content"] = self.content
        return data


@dataclass
class StepResult:
    """Outcome of running one step."""

    step_id: str
    action: str
    status: StepStatus = StepStatus.PENDING
    start_time: float = 0.0
    end_time: float | None = None
    output: str | None = None
    error: str | None = None
    changes: list[ProposedChange] = field(default_factory=list)

    @property
    def duration(self) -> float:
        if self.end_time is None:
            return 0.0
        return self.end_time - self.start_time

    def to_dict(self) -> dict[str, Any]:
        return {
            "step_id": self.step_id,
            "action": self.action,
            "status": self.status.value,
            "start_time": self.start_time,
            "end_time": self.end_time,
            "output": self.output,
            "error": self.error,
            "changes": [c.to_dict() for c in self.changes],
        }


@dataclass
class ExecutionResult:
    """Result bundle for one plan run, mutated in place as steps finish."""

    plan_id: str
    status: PlanStatus = PlanStatus.RUNNING
    steps: list[StepResult] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)
    changes: list[ProposedChange] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "plan_id": self.plan_id,
            "status": self.status.value,
            "steps": [s.to_dict() for s in self.steps],
            "errors": list(self.errors),
            "changes": [c.to_dict() for c in self.changes],
        }


@dataclass
class Conflict:
    """A change that collides with one or more others in the same batch."""

    change: ProposedChange
    conflicting_changes: list[ProposedChange]


@dataclass
class ChangeDependency:
    source: ProposedChange
    target: ProposedChange
    type: str = "import"


@dataclass
class CoordinationResult:
    """Conflict-free changes, the conflicts, and derived change ordering."""

    changes: list[ProposedChange] = field(default_factory=list)
    conflicts: list[Conflict] = field(default_factory=list)
    dependencies: list[ChangeDependency] = field(default_factory=list)

    @property
    def has_conflicts(self) -> bool:
        return bool(self.conflicts)
