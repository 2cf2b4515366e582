"""Tests for keyword-driven task planning."""

import pytest

from sheikh.engine.planner import (
    TaskPlanner,
    analyze_requirements,
    assess_risk,
    calculate_dependencies,
    create_plan,
    generate_steps,
)
from sheikh.engine.roster import AgentType
from sheikh.engine.types import PlanStep, RiskLevel
from sheikh.errors import ValidationError


def step(step_id, agent):
    return PlanStep(id=step_id, action=step_id, agent=agent)


class TestRequirements:
    def test_keywords_are_case_insensitive(self):
        req = analyze_requirements("CREATE a file and Update another")
        assert req.file_operations == ["create", "modify"]

    def test_testing_and_git(self):
        req = analyze_requirements("run the spec suite then push")
        assert req.testing is True
        assert req.git_operations == ["commit"]

    def test_plain_substring_match(self):
        # "address" contains "add"
        assert analyze_requirements("fix the address field").file_operations == ["create"]

    def test_nothing_recognised(self):
        assert analyze_requirements("think about it").is_empty


class TestCreatePlan:
    def test_create_module_has_one_critical_editor_step(self):
        plan = create_plan("Create a new module")
        editors = [s for s in plan.steps if s.agent == "multi-file-editor"]
        assert len(editors) == 1
        assert editors[0].critical is True
        assert plan.estimated_time == 30
        assert plan.risk == RiskLevel.LOW

    def test_full_task(self):
        plan = create_plan("Update the parser, add tests and commit")
        assert [s.id for s in plan.steps] == ["create_files", "modify_files", "run_tests", "git_commit"]
        assert [(d.source, d.target) for d in plan.dependencies] == [
            ("modify_files", "run_tests"),
            ("run_tests", "git_commit"),
        ]
        assert plan.estimated_time == 30 + 45 + 60 + 15
        assert plan.task == "Update the parser, add tests and commit"

    def test_delete_has_no_step(self):
        plan = create_plan("delete old files")
        assert plan.steps == []
        assert plan.dependencies == []
        assert plan.estimated_time == 0

    def test_empty_task_raises(self):
        with pytest.raises(ValidationError):
            TaskPlanner().create_plan("   ")

    def test_plans_get_distinct_ids(self):
        assert create_plan("create a").id != create_plan("create b").id

    def test_to_dict_uses_from_to_edges(self):
        data = create_plan("modify and test").to_dict()
        assert data["dependencies"] == [{"from": "modify_files", "to": "run_tests"}]
        assert data["risk"] == "low"


class TestPlanHeuristics:
    def test_steps_follow_template_order(self):
        req = analyze_requirements("commit tests, modify and create")
        assert [s.id for s in generate_steps(req)] == ["create_files", "modify_files", "run_tests", "git_commit"]

    def test_edges_only_between_different_adjacent_agents(self):
        steps = [step("a", "x"), step("b", "x"), step("c", "y"), step("d", "x")]
        assert [(d.source, d.target) for d in calculate_dependencies(steps)] == [("b", "c"), ("c", "d")]

    def test_risk_high_with_security_auditor(self):
        assert assess_risk([step("s", AgentType.SECURITY_AUDITOR.value)]) == RiskLevel.HIGH

    def test_risk_medium_above_five_steps(self):
        assert assess_risk([step(str(i), "x") for i in range(6)]) == RiskLevel.MEDIUM
        assert assess_risk([step(str(i), "x") for i in range(5)]) == RiskLevel.LOW
