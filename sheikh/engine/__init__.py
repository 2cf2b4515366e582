"""Agentic engine: planning, simulated execution, change coordination."""

from sheikh.engine.types import (
    ChangeType,
    CoordinationResult,
    ExecutionPlan,
    ExecutionResult,
    PlanStatus,
    PlanStep,
    ProposedChange,
    RiskLevel,
    StepResult,
    StepStatus,
)
from sheikh.engine.planner import TaskPlanner, create_plan
from sheikh.engine.executor import (
    PlanExecutor,
    SimulatedStepExecutor,
    StepExecutor,
    StepOutput,
    execute_plan,
)
from sheikh.engine.coordinator import ChangeCoordinator, ConflictStrategy, coordinate_changes
from sheikh.engine.engine import AgenticEngine, TaskOutcome

__all__ = [
    "ChangeType",
    "CoordinationResult",
    "ExecutionPlan",
    "ExecutionResult",
    "PlanStatus",
    "PlanStep",
    "ProposedChange",
    "RiskLevel",
    "StepResult",
    "StepStatus",
    "TaskPlanner",
    "create_plan",
    "PlanExecutor",
    "SimulatedStepExecutor",
    "StepExecutor",
    "StepOutput",
    "execute_plan",
    "ChangeCoordinator",
    "ConflictStrategy",
    "coordinate_changes",
    "AgenticEngine",
    "TaskOutcome",
]
