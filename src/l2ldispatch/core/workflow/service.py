"""Workflow service: pick actions and build a runnable plan."""

from __future__ import annotations

from typing import Any, Iterable, Mapping

from l2ldispatch.core.pipeline.steps import Step
from l2ldispatch.core.workflow.actions import ACTION_CATALOG, WorkflowActionSpec
from l2ldispatch.core.workflow.contracts import (
    WorkflowActionError,
    WorkflowActionId,
    WorkflowPlan,
)


class WorkflowService:
    """Builds workflow plans from declarative actions."""

    def __init__(self, catalog: Mapping[WorkflowActionId, WorkflowActionSpec] | None = None):
        self._catalog = dict(catalog or ACTION_CATALOG)

    def build_plan(
        self,
        action_ids: Iterable[WorkflowActionId | str] = (WorkflowActionId.FULL_DEMO,),
        options: Mapping[str, Any] | None = None,
    ) -> WorkflowPlan:
        """
        Resolve actions into one ordered plan.

        Discovery always runs first (every other action needs its records);
        actions are de-duplicated and run in catalog order.
        """
        requested = {self._normalize_action_id(a) for a in action_ids}
        if WorkflowActionId.FULL_DEMO in requested or not requested:
            requested = set(self._catalog)
        requested.add(WorkflowActionId.DISCOVER)

        ordered = [action_id for action_id in self._catalog if action_id in requested]
        missing = requested.difference(self._catalog)
        if missing:
            names = ", ".join(sorted(a.value for a in missing))
            raise WorkflowActionError(f"Unknown workflow action: {names}")

        safe_options: Mapping[str, Any] = options or {}
        steps: list[Step] = []
        for action_id in ordered:
            steps.extend(self._catalog[action_id].build_steps(safe_options))

        return WorkflowPlan(
            action_ids=tuple(ordered),
            steps=tuple(steps),
            metadata={"action_labels": [self._catalog[a].label for a in ordered]},
        )

    @staticmethod
    def _normalize_action_id(action_id: WorkflowActionId | str) -> WorkflowActionId:
        if isinstance(action_id, WorkflowActionId):
            return action_id
        try:
            return WorkflowActionId(action_id)
        except ValueError as exc:
            raise WorkflowActionError(f"Unknown workflow action id: {action_id}") from exc
