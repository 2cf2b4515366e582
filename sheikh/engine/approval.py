"""Approval gate between plan execution and applying proposed changes."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable

from sheikh.engine.types import ExecutionResult, ProposedChange

logger = logging.getLogger("sheikh.engine.approval")


class ApprovalStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


@dataclass
class Approval:
    """A batch of changes awaiting a decision."""

    id: str
    plan_id: str
    changes: list[ProposedChange]
    status: ApprovalStatus = ApprovalStatus.PENDING
    timestamp: float = field(default_factory=time.time)
    applied: list[str] = field(default_factory=list)


PreviewCallback = Callable[[Approval], None]
ConfirmCallback = Callable[[Approval], bool]


class ApprovalSystem:
    """Previews changes, asks for a decision, and records the outcome.

    Applying an approved batch only records the affected files; nothing
    is written to disk.
    """

    def __init__(
        self,
        preview_callback: PreviewCallback | None = None,
        confirm_callback: ConfirmCallback | None = None,
    ):
        self.preview_callback = preview_callback
        self.confirm_callback = confirm_callback
        self.pending: dict[str, Approval] = {}
        self.history: list[Approval] = []

    def create_approval(self, results: ExecutionResult) -> Approval:
        approval = Approval(
            id=str(time.time_ns()),
            plan_id=results.plan_id,
            changes=list(results.changes),
        )
        self.pending[approval.id] = approval
        return approval

    def request_approval(self, approval: Approval) -> bool:
        if self.confirm_callback is None:
            return True
        return bool(self.confirm_callback(approval))

    def apply_changes(self, approval: Approval):
        for change in approval.changes:
            logger.info("Applying %s to %s", change.type.value, change.file)
            approval.applied.append(change.file)

    def process_results(self, results: ExecutionResult) -> Approval | None:
        """Run the approval flow. Returns None when there is nothing to approve."""
        if not results.changes:
            return None

        approval = self.create_approval(results)
        if self.preview_callback is not None:
            self.preview_callback(approval)

        if self.request_approval(approval):
            self.apply_changes(approval)
            approval.status = ApprovalStatus.APPROVED
            logger.info("Changes for plan %s approved", approval.plan_id, extra={"plan_id": approval.plan_id})
        else:
            approval.status = ApprovalStatus.REJECTED
            logger.info("Changes for plan %s rejected", approval.plan_id, extra={"plan_id": approval.plan_id})

        del self.pending[approval.id]
        self.history.append(approval)
        return approval
