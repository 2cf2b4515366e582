"""The agentic engine: one object that owns index, planner, executor and coordinator."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from pathlib import Path

from sheikh.analysis.codebase_index import CodebaseIndex, SearchResult
from sheikh.analysis.file_analyzer import FileAnalyzer
from sheikh.analysis.report import TestDetection, generate_report
from sheikh.engine.approval import Approval, ApprovalSystem
from sheikh.engine.coordinator import ChangeCoordinator
from sheikh.engine.executor import PlanExecutor
from sheikh.engine.planner import TaskPlanner
from sheikh.engine.roster import AgentRoster
from sheikh.engine.types import (
    CoordinationResult,
    ExecutionPlan,
    ExecutionResult,
    PlanStatus,
    ProposedChange,
)
from sheikh.engine.workflow import WORKFLOW_TEMPLATES, Workflow, WorkflowBuilder, create_workflow
from sheikh.logging_config import log_plan_execution

logger = logging.getLogger("sheikh.engine")


@dataclass
class TaskOutcome:
    """Everything produced by ``AgenticEngine.execute_task``."""

    plan: ExecutionPlan
    result: ExecutionResult
    coordination: CoordinationResult
    approval: Approval | None = None


class AgenticEngine:
    """Orchestrating context for a single project root.

    Constructed once and passed to whatever needs it; collaborators are
    injectable so tests and real implementations can swap them.
    """

    def __init__(
        self,
        root: str | Path,
        analyzer: FileAnalyzer | None = None,
        planner: TaskPlanner | None = None,
        executor: PlanExecutor | None = None,
        coordinator: ChangeCoordinator | None = None,
        approval: ApprovalSystem | None = None,
        roster: AgentRoster | None = None,
    ):
        self.root = Path(root)
        self.index = CodebaseIndex(self.root, analyzer=analyzer)
        self.planner = planner or TaskPlanner()
        self.executor = executor or PlanExecutor()
        self.coordinator = coordinator or ChangeCoordinator()
        self.approval = approval or ApprovalSystem()
        self.roster = roster or AgentRoster()
        self.workflows: dict[str, Workflow] = {}
        self._initialized = False

    def initialize(self) -> AgenticEngine:
        self.workflows = {kind: create_workflow(kind) for kind in WORKFLOW_TEMPLATES}
        self.index.build()
        self._initialized = True
        return self

    def _ensure_index(self):
        if not self._initialized:
            self.initialize()

    # ── Codebase ─────────────────────────────────────────────────────────

    def search_codebase(self, query: str) -> list[SearchResult]:
        self._ensure_index()
        return self.index.search(query)

    def generate_report(self, test_detection: TestDetection = TestDetection.FILE_TYPE) -> str:
        self._ensure_index()
        return generate_report(self.index, test_detection)

    # ── Tasks ────────────────────────────────────────────────────────────

    def create_plan(self, task: str) -> ExecutionPlan:
        return self.planner.create_plan(task)

    async def execute_plan(self, plan: ExecutionPlan) -> ExecutionResult:
        started = time.time()
        result = await self.executor.execute(plan)
        log_plan_execution(plan.id, result.status.value, result.errors, time.time() - started)
        return result

    def coordinate_changes(self, changes: list[ProposedChange]) -> CoordinationResult:
        return self.coordinator.coordinate_changes(changes)

    async def execute_task(self, task: str) -> TaskOutcome:
        """Plan, execute, coordinate the resulting changes, then run approval.

        Only conflict-free changes reach the approval step, and only when
        the plan completed.
        """
        plan = self.create_plan(task)
        result = await self.execute_plan(plan)
        coordination = self.coordinate_changes(result.changes)

        approval = None
        if result.status == PlanStatus.COMPLETED and coordination.changes:
            approved_batch = ExecutionResult(
                plan_id=result.plan_id,
                status=result.status,
                changes=coordination.changes,
            )
            approval = self.approval.process_results(approved_batch)

        return TaskOutcome(plan=plan, result=result, coordination=coordination, approval=approval)

    # ── Workflows ────────────────────────────────────────────────────────

    def generate_workflow(self, description: str) -> WorkflowBuilder:
        return WorkflowBuilder(description).build()
