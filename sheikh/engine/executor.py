"""Sequential plan execution with pluggable per-agent step executors.

The default step executor is a simulation: it waits a fixed delay and
reports success. Editor steps also emit one ProposedChange record. No
file is touched. Real executors can be registered per agent type
without changing the run loop or the result shape.
"""

from __future__ import annotations

import asyncio
import logging
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field

from sheikh.config import SIMULATED_STEP_DELAY
from sheikh.engine.roster import AgentType
from sheikh.engine.types import (
    ChangeType,
    ExecutionPlan,
    ExecutionResult,
    PlanStatus,
    PlanStep,
    ProposedChange,
    StepResult,
    StepStatus,
)
from sheikh.errors import ExecutionError

logger = logging.getLogger("sheikh.engine.executor")


@dataclass
class StepOutput:
    """What a step executor hands back on success."""

    output: str
    changes: list[ProposedChange] = field(default_factory=list)


class StepExecutor(ABC):
    """Runs one step. Raise to signal failure."""

    @abstractmethod
    async def run(self, step: PlanStep) -> StepOutput:
        ...


class SimulatedStepExecutor(StepExecutor):
    """Fixed-delay, always-successful stand-in for real agent work."""

    def __init__(self, delay: float = SIMULATED_STEP_DELAY):
        self.delay = delay

    async def run(self, step: PlanStep) -> StepOutput:
        await asyncio.sleep(self.delay)
        result = StepOutput(output=f"Successfully completed: {step.action}")
        if step.agent == AgentType.MULTI_FILE_EDITOR.value:
            result.changes.append(ProposedChange(
                file="example.js",
                type=ChangeType.MODIFY,
                lines="10-15",
            ))
        return result


class PlanExecutor:
    """Runs a plan's steps one after another.

    A failing non-critical step is recorded and skipped past. A failing
    critical step ends the run with status FAILED. No cancellation, no
    timeouts, no retries.
    """

    def __init__(
        self,
        default_executor: StepExecutor | None = None,
        executors: dict[str, StepExecutor] | None = None,
    ):
        self.default_executor = default_executor or SimulatedStepExecutor()
        self._executors: dict[str, StepExecutor] = dict(executors or {})

    def register(self, agent: str, executor: StepExecutor):
        """Use ``executor`` for every step assigned to ``agent``."""
        self._executors[agent] = executor

    def executor_for(self, agent: str) -> StepExecutor:
        return self._executors.get(agent, self.default_executor)

    async def execute_step(self, step: PlanStep) -> StepResult:
        result = StepResult(
            step_id=step.id,
            action=step.action,
            start_time=time.time(),
        )
        try:
            outcome = await self.executor_for(step.agent).run(step)
        except Exception as e:
            result.status = StepStatus.ERROR
            result.error = str(e) or e.__class__.__name__
            logger.warning(
                "Step %s failed: %s", step.id, result.error,
                extra={"step_id": step.id, "agent": step.agent},
            )
        else:
            result.status = StepStatus.COMPLETED
            result.output = outcome.output
            result.changes = list(outcome.changes)
        result.end_time = time.time()
        return result

    async def execute(self, plan: ExecutionPlan) -> ExecutionResult:
        results = ExecutionResult(plan_id=plan.id)
        logger.info("Executing plan %s: %s", plan.id, plan.task, extra={"plan_id": plan.id})

        try:
            for step in plan.steps:
                logger.debug("Executing step %s", step.id, extra={"step_id": step.id, "agent": step.agent})
                step_result = await self.execute_step(step)
                results.steps.append(step_result)

                if step_result.status == StepStatus.ERROR:
                    if step.critical:
                        raise ExecutionError(f"Critical step failed: {step_result.error}")
                    results.errors.append(step_result.error or "")

                results.changes.extend(step_result.changes)

            results.status = PlanStatus.COMPLETED
            logger.info("Plan %s completed", plan.id, extra={"plan_id": plan.id})
        except Exception as e:
            results.status = PlanStatus.FAILED
            results.errors.append(str(e))
            logger.error("Plan %s failed: %s", plan.id, e, extra={"plan_id": plan.id})

        return results

    def execute_sync(self, plan: ExecutionPlan) -> ExecutionResult:
        """Blocking wrapper for callers without an event loop."""
        return asyncio.run(self.execute(plan))


async def execute_plan(plan: ExecutionPlan, executor: PlanExecutor | None = None) -> ExecutionResult:
    return await (executor or PlanExecutor()).execute(plan)
