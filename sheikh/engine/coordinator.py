"""Conflict detection and ordering for a batch of proposed changes."""

from __future__ import annotations

import logging
from enum import Enum
from typing import Iterable

from sheikh.engine.types import (
    ChangeDependency,
    ChangeType,
    Conflict,
    CoordinationResult,
    ProposedChange,
)

logger = logging.getLogger("sheikh.engine.coordinator")


class ConflictStrategy(str, Enum):
    """Which pairs of changes to the same file count as a conflict.

    MODIFY_MODIFY_ONLY (default): both changes are modifications. A
    create or delete never conflicts with anything.
    ANY_OVERLAP: any two changes to the same file.
    """

    MODIFY_MODIFY_ONLY = "modify-modify-only"
    ANY_OVERLAP = "any-overlap"


class ChangeCoordinator:
    """Partitions changes into conflict-free and conflicting sets."""

    def __init__(self, strategy: ConflictStrategy = ConflictStrategy.MODIFY_MODIFY_ONLY):
        self.strategy = strategy

    def _conflicts(self, change: ProposedChange, other: ProposedChange) -> bool:
        if change.file != other.file:
            return False
        if self.strategy is ConflictStrategy.ANY_OVERLAP:
            return True
        return change.type == ChangeType.MODIFY and other.type == ChangeType.MODIFY

    def detect_conflicts(
        self, change: ProposedChange, all_changes: Iterable[ProposedChange]
    ) -> list[ProposedChange]:
        """Other changes in the batch that collide with ``change``.

        Changes are compared by identity, so two equal-looking entries
        still count as two separate changes.
        """
        return [
            other for other in all_changes
            if other is not change and self._conflicts(change, other)
        ]

    @staticmethod
    def calculate_change_dependencies(changes: list[ProposedChange]) -> list[ChangeDependency]:
        """``import`` edge from every new ``.js`` file to every other modification.

        Over-approximates: no import statement is inspected.
        """
        dependencies: list[ChangeDependency] = []
        for change in changes:
            if change.type != ChangeType.CREATE or not change.file.endswith(".js"):
                continue
            for other in changes:
                if other is not change and other.type == ChangeType.MODIFY:
                    dependencies.append(ChangeDependency(source=change, target=other, type="import"))
        return dependencies

    def coordinate_changes(self, changes: list[ProposedChange]) -> CoordinationResult:
        result = CoordinationResult()
        for change in changes:
            conflicting = self.detect_conflicts(change, changes)
            if conflicting:
                result.conflicts.append(Conflict(change=change, conflicting_changes=conflicting))
            else:
                result.changes.append(change)

        result.dependencies = self.calculate_change_dependencies(result.changes)
        logger.info(
            "Coordinated %d changes: %d accepted, %d conflicting, %d dependencies",
            len(changes), len(result.changes), len(result.conflicts), len(result.dependencies),
        )
        return result


def coordinate_changes(
    changes: list[ProposedChange],
    strategy: ConflictStrategy = ConflictStrategy.MODIFY_MODIFY_ONLY,
) -> CoordinationResult:
    return ChangeCoordinator(strategy).coordinate_changes(changes)
