"""Core contracts for workflow actions and execution plans."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping

from l2ldispatch.core.pipeline.steps import Step


class WorkflowActionId(str, Enum):
    """Action identifiers exposed by the workflow service, in run order."""

    DISCOVER = "discover"
    TIME_TRACKING = "time_tracking"
    MACHINES = "machines"
    DISPATCHES = "dispatches"
    PRODUCTION = "production"
    FULL_DEMO = "full_demo"


@dataclass(frozen=True)
class WorkflowPlan:
    """Concrete, resolved workflow plan ready to run."""

    action_ids: tuple[WorkflowActionId, ...]
    steps: tuple[Step, ...]
    metadata: Mapping[str, Any] = field(default_factory=dict)

    @property
    def step_names(self) -> list[str]:
        return [step.name for step in self.steps]


class WorkflowActionError(ValueError):
    """Raised when an unknown action is requested."""
