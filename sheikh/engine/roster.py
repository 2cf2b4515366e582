"""Built-in agent types the planner can assign steps to."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class AgentType(str, Enum):
    """Agent references used in plan steps."""

    CODEBASE_ANALYZER = "codebase-analyzer"
    MULTI_FILE_EDITOR = "multi-file-editor"
    TEST_COORDINATOR = "test-coordinator"
    GIT_WORKFLOW = "git-workflow"
    DEPENDENCY_MANAGER = "dependency-manager"
    SECURITY_AUDITOR = "security-auditor"
    PERFORMANCE_OPTIMIZER = "performance-optimizer"
    DOCUMENTATION_GENERATOR = "documentation-generator"


@dataclass
class AgentProfile:
    """Descriptive entry for one agent type."""

    name: str
    description: str
    capabilities: list[str] = field(default_factory=list)


DEFAULT_ROSTER: dict[str, AgentProfile] = {
    AgentType.CODEBASE_ANALYZER.value: AgentProfile(
        name=AgentType.CODEBASE_ANALYZER.value,
        description="Searches and indexes the codebase",
        capabilities=["search", "analyze", "index", "understand"],
    ),
    AgentType.MULTI_FILE_EDITOR.value: AgentProfile(
        name=AgentType.MULTI_FILE_EDITOR.value,
        description="Creates and edits files across the project",
        capabilities=["edit", "create", "modify", "coordinate"],
    ),
    AgentType.TEST_COORDINATOR.value: AgentProfile(
        name=AgentType.TEST_COORDINATOR.value,
        description="Runs and reports on test suites",
        capabilities=["test", "validate", "coordinate", "report"],
    ),
    AgentType.GIT_WORKFLOW.value: AgentProfile(
        name=AgentType.GIT_WORKFLOW.value,
        description="Commits, branches and pushes",
        capabilities=["commit", "push", "branch", "merge", "pr"],
    ),
    AgentType.DEPENDENCY_MANAGER.value: AgentProfile(
        name=AgentType.DEPENDENCY_MANAGER.value,
        description="Installs, updates and audits dependencies",
        capabilities=["install", "update", "audit", "resolve"],
    ),
    AgentType.SECURITY_AUDITOR.value: AgentProfile(
        name=AgentType.SECURITY_AUDITOR.value,
        description="Scans for vulnerabilities",
        capabilities=["audit", "scan", "vulnerability", "security"],
    ),
    AgentType.PERFORMANCE_OPTIMIZER.value: AgentProfile(
        name=AgentType.PERFORMANCE_OPTIMIZER.value,
        description="Profiles and optimizes hot paths",
        capabilities=["optimize", "profile", "benchmark", "improve"],
    ),
    AgentType.DOCUMENTATION_GENERATOR.value: AgentProfile(
        name=AgentType.DOCUMENTATION_GENERATOR.value,
        description="Generates and updates documentation",
        capabilities=["generate", "document", "api", "readme"],
    ),
}


class AgentRoster:
    """Registry of agent profiles owned by one engine instance."""

    def __init__(self, profiles: dict[str, AgentProfile] | None = None):
        self._profiles = dict(profiles if profiles is not None else DEFAULT_ROSTER)

    def get(self, name: str) -> AgentProfile | None:
        return self._profiles.get(name)

    def names(self) -> list[str]:
        return list(self._profiles)

    def all(self) -> list[AgentProfile]:
        return list(self._profiles.values())

    def __contains__(self, name: object) -> bool:
        return name in self._profiles

    def __len__(self) -> int:
        return len(self._profiles)
