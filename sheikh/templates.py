"""Agent and skill templates - markdown files with a metadata header."""

from __future__ import annotations

import logging
import re
import shutil
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from sheikh.config import PROJECT_DIR_NAME
from sheikh.errors import TemplateError

logger = logging.getLogger("sheikh.templates")

_FRONTMATTER_RE = re.compile(r"^---\s*\n(.*?)\n---\s*\n?(.*)", re.DOTALL)

VALID_AGENT_MODELS = ["inherit", "sonnet", "opus", "haiku"]


@dataclass
class Template:
    """A parsed agent or skill file."""

    name: str
    description: str
    content: str
    path: Path
    fields: dict[str, str] = field(default_factory=dict)  # every header key, verbatim

    @property
    def tools(self) -> list[str]:
        raw = self.fields.get("tools", "")
        return [t.strip() for t in raw.split(",") if t.strip()]


def parse_frontmatter(text: str) -> tuple[dict[str, str], str] | None:
    """Split ``---`` header lines of ``key: value`` from the body."""
    match = _FRONTMATTER_RE.match(text)
    if not match:
        return None

    header: dict[str, str] = {}
    for line in match.group(1).splitlines():
        line = line.strip()
        if line.startswith("#") or not line:
            continue
        if ":" in line:
            key, _, value = line.partition(":")
            header[key.strip()] = value.strip().strip('"').strip("'")
    return header, match.group(2)


class TemplateStore(ABC):
    """Discovers, loads, creates and deletes templates under one directory."""

    kind = "template"

    def __init__(self, working_dir: str | Path):
        self.working_dir = Path(working_dir)
        self._templates: dict[str, Template] = {}

    @property
    @abstractmethod
    def base_dir(self) -> Path:
        ...

    @abstractmethod
    def _template_files(self) -> list[Path]:
        ...

    @abstractmethod
    def _path_for(self, name: str) -> Path:
        ...

    @abstractmethod
    def _render(self, data: dict[str, Any]) -> str:
        ...

    def _validate_fields(self, data: dict[str, Any]):
        """Kind-specific checks, run after the common ones."""

    def _remove(self, template: Template):
        template.path.unlink()

    # ── Loading ──────────────────────────────────────────────────────────

    def load(self) -> TemplateStore:
        """(Re)scan the directory. Malformed files are skipped with a warning."""
        self._templates.clear()
        if not self.base_dir.is_dir():
            return self
        for path in self._template_files():
            try:
                template = self.parse(path)
            except TemplateError as e:
                logger.warning("Failed to load %s from %s: %s", self.kind, path, e)
                continue
            self._templates[template.name] = template
        return self

    def parse(self, path: Path) -> Template:
        try:
            text = path.read_text(encoding="utf-8")
        except OSError as e:
            raise TemplateError(f"Cannot read {path}: {e}") from e

        parsed = parse_frontmatter(text)
        if parsed is None:
            raise TemplateError(f"Invalid {self.kind} format: missing frontmatter")
        header, body = parsed

        if not header.get("name") or not header.get("description"):
            raise TemplateError(f"{self.kind.capitalize()} must have name and description in frontmatter")

        return Template(
            name=header["name"],
            description=header["description"],
            content=body,
            path=path,
            fields=header,
        )

    # ── Store interface ──────────────────────────────────────────────────

    def list(self) -> list[str]:
        return list(self._templates)

    def all(self) -> list[Template]:
        return list(self._templates.values())

    def get(self, name: str) -> Template | None:
        return self._templates.get(name)

    def validate(self, data: dict[str, Any] | None):
        """Raise TemplateError if ``data`` cannot describe a template."""
        if not data:
            raise TemplateError(f"{self.kind.capitalize()} object is required")
        if not data.get("name") or not isinstance(data["name"], str):
            raise TemplateError(f"{self.kind.capitalize()} name is required and must be a string")
        if not data.get("description") or not isinstance(data["description"], str):
            raise TemplateError(f"{self.kind.capitalize()} description is required and must be a string")
        self._validate_fields(data)

    def create(self, data: dict[str, Any]) -> Path:
        self.validate(data)
        path = self._path_for(data["name"])
        if path.exists():
            raise TemplateError(f"{self.kind.capitalize()} '{data['name']}' already exists")
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self._render(data), encoding="utf-8")
        logger.info("Created %s %s at %s", self.kind, data["name"], path)
        self.load()
        return path

    def delete(self, name: str):
        template = self.get(name)
        if template is None:
            raise TemplateError(f"{self.kind.capitalize()} '{name}' not found")
        self._remove(template)
        del self._templates[name]
        logger.info("Deleted %s %s", self.kind, name)


class AgentStore(TemplateStore):
    """``.sheikh/agents/<name>.md``"""

    kind = "agent"

    @property
    def base_dir(self) -> Path:
        return self.working_dir / PROJECT_DIR_NAME / "agents"

    def _template_files(self) -> list[Path]:
        return sorted(self.base_dir.glob("*.md"))

    def _path_for(self, name: str) -> Path:
        return self.base_dir / f"{name}.md"

    def _validate_fields(self, data: dict[str, Any]):
        tools = data.get("tools")
        if tools is not None and not isinstance(tools, list):
            raise TemplateError("Agent tools must be an array")
        model = data.get("model")
        if model and model not in VALID_AGENT_MODELS:
            raise TemplateError(f"Invalid model. Must be one of: {', '.join(VALID_AGENT_MODELS)}")

    def _render(self, data: dict[str, Any]) -> str:
        tools = data.get("tools") or ["Read", "Write"]
        return (
            "---\n"
            f"name: {data['name']}\n"
            f"description: {data['description']}\n"
            f"tools: {', '.join(tools)}\n"
            f"model: {data.get('model') or 'inherit'}\n"
            "---\n\n"
            f"# {data['name']}\n\n"
            f"{data['description']}\n\n"
            f"{data.get('content') or ''}\n"
        )


class SkillStore(TemplateStore):
    """``.sheikh/skills/<name>/SKILL.md``"""

    kind = "skill"

    @property
    def base_dir(self) -> Path:
        return self.working_dir / PROJECT_DIR_NAME / "skills"

    def _template_files(self) -> list[Path]:
        return [
            child / "SKILL.md"
            for child in sorted(self.base_dir.iterdir())
            if child.is_dir() and (child / "SKILL.md").is_file()
        ]

    def _path_for(self, name: str) -> Path:
        return self.base_dir / name / "SKILL.md"

    def _render(self, data: dict[str, Any]) -> str:
        return (
            "---\n"
            f"name: {data['name']}\n"
            f"description: {data['description']}\n"
            "---\n\n"
            f"# {data['name']}\n\n"
            f"{data['description']}\n\n"
            f"{data.get('content') or ''}\n"
        )

    def _remove(self, template: Template):
        skill_dir = template.path.parent
        if skill_dir.parent != self.base_dir or template.path.name != "SKILL.md":
            raise TemplateError(f"Refusing to remove {skill_dir}: not a skill directory under {self.base_dir}")
        shutil.rmtree(skill_dir)

    def render(self, skill: Template, arguments: str) -> str:
        """Skill body with ``$ARGUMENTS`` substituted."""
        return skill.content.replace("$ARGUMENTS", arguments)
