"""Workflow orchestration layer (actions, plans)."""

from l2ldispatch.core.workflow.contracts import (
    WorkflowActionError,
    WorkflowActionId,
    WorkflowPlan,
)
from l2ldispatch.core.workflow.service import WorkflowService

__all__ = [
    "WorkflowActionError",
    "WorkflowActionId",
    "WorkflowPlan",
    "WorkflowService",
]
