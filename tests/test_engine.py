"""Tests for the orchestrating AgenticEngine."""

import asyncio
import json

import pytest

import sheikh.logging_config
from sheikh.analysis.report import TestDetection
from sheikh.engine.approval import ApprovalStatus, ApprovalSystem
from sheikh.engine.engine import AgenticEngine
from sheikh.engine.executor import PlanExecutor, SimulatedStepExecutor, StepExecutor, StepOutput
from sheikh.engine.types import PlanStatus, ProposedChange


class DoubleEditExecutor(StepExecutor):
    """Proposes two modifications of the same file."""

    async def run(self, step):
        return StepOutput(
            output="edited",
            changes=[ProposedChange("a.js", "modify"), ProposedChange("a.js", "modify")],
        )


class BrokenExecutor(StepExecutor):
    async def run(self, step):
        raise RuntimeError("disk full")


@pytest.fixture
def engine(sample_project):
    return AgenticEngine(sample_project, executor=PlanExecutor(SimulatedStepExecutor(delay=0)))


class TestCodebase:
    def test_search_builds_index_lazily(self, engine):
        assert len(engine.index) == 0
        engine.search_codebase("router")
        assert len(engine.index) == 4

    def test_initialize_loads_workflows(self, engine):
        engine.initialize()
        assert set(engine.workflows) == {"deployment", "testing", "code-review", "refactoring", "documentation"}

    def test_report(self, engine):
        report = engine.generate_report(TestDetection.PURPOSE)
        assert report.startswith("# Codebase Analysis Report")


class TestExecuteTask:
    def test_plan_execute_coordinate_approve(self, engine):
        outcome = asyncio.run(engine.execute_task("create a helper"))
        assert outcome.result.status == PlanStatus.COMPLETED
        assert [c.file for c in outcome.coordination.changes] == ["example.js"]
        assert outcome.approval.status == ApprovalStatus.APPROVED
        assert outcome.approval.applied == ["example.js"]

    def test_conflicts_never_reach_approval(self, sample_project):
        engine = AgenticEngine(sample_project, executor=PlanExecutor(DoubleEditExecutor()))
        outcome = asyncio.run(engine.execute_task("modify the router"))
        assert len(outcome.coordination.conflicts) == 2
        assert outcome.approval is None

    def test_failed_plan_skips_approval(self, sample_project):
        confirmations = []
        engine = AgenticEngine(
            sample_project,
            executor=PlanExecutor(BrokenExecutor()),
            approval=ApprovalSystem(confirm_callback=confirmations.append),
        )
        outcome = asyncio.run(engine.execute_task("create a file"))
        assert outcome.result.status == PlanStatus.FAILED
        assert outcome.approval is None
        assert confirmations == []

    def test_plan_runs_are_audited(self, engine):
        plan = engine.create_plan("create a file")
        asyncio.run(engine.execute_plan(plan))
        for handler in sheikh.logging_config.get_audit_logger().handlers:
            handler.flush()
        lines = sheikh.logging_config.AUDIT_LOG_FILE.read_text().splitlines()
        entry = json.loads(lines[-1])
        assert entry["plan_id"] == plan.id
        assert entry["status"] == "completed"

    def test_generate_workflow(self, engine):
        builder = engine.generate_workflow("run test suite")
        assert builder.validated
        assert [s.name for s in builder.steps] == ["Run Tests"]
