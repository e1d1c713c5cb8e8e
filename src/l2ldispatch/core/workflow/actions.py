"""Declarative workflow action catalog."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Mapping

from l2ldispatch.core.pipeline.steps import Step
from l2ldispatch.core.pipeline.tasks import (
    BackdatedClockInStep,
    BackdatedDispatchStep,
    ClockInOutStep,
    CycleCountStep,
    DailySummaryStep,
    FindAreaStep,
    FindDispatchTypeStep,
    FindLineStep,
    FindMachineStep,
    FindSiteStep,
    OpenCloseDispatchStep,
    RecordProductionStep,
)
from l2ldispatch.core.workflow.contracts import WorkflowActionId

BuildStepsFn = Callable[[Mapping[str, Any]], list[Step]]


@dataclass(frozen=True)
class WorkflowActionSpec:
    """Specification for one workflow action."""

    action_id: WorkflowActionId
    label: str
    build_steps: BuildStepsFn


def _build_discover_steps(options: Mapping[str, Any]) -> list[Step]:
    page_size = int(options.get("area_page_size") or 2)
    return [
        FindSiteStep(),
        FindAreaStep(page_size=page_size),
        FindLineStep(),
        FindMachineStep(),
        FindDispatchTypeStep(),
    ]


def _build_time_tracking_steps(options: Mapping[str, Any]) -> list[Step]:
    return [ClockInOutStep(), BackdatedClockInStep(now=options.get("now"))]


def _build_machine_steps(options: Mapping[str, Any]) -> list[Step]:
    return [CycleCountStep()]


def _build_dispatch_steps(options: Mapping[str, Any]) -> list[Step]:
    return [OpenCloseDispatchStep(), BackdatedDispatchStep(now=options.get("now"))]


def _build_production_steps(options: Mapping[str, Any]) -> list[Step]:
    return [
        RecordProductionStep(rng=options.get("rng")),
        DailySummaryStep(now=options.get("now")),
    ]


ACTION_CATALOG: dict[WorkflowActionId, WorkflowActionSpec] = {
    WorkflowActionId.DISCOVER: WorkflowActionSpec(
        action_id=WorkflowActionId.DISCOVER,
        label="Découvrir site, area, ligne, machine, type de dispatch",
        build_steps=_build_discover_steps,
    ),
    WorkflowActionId.TIME_TRACKING: WorkflowActionSpec(
        action_id=WorkflowActionId.TIME_TRACKING,
        label="Pointages utilisateur",
        build_steps=_build_time_tracking_steps,
    ),
    WorkflowActionId.MACHINES: WorkflowActionSpec(
        action_id=WorkflowActionId.MACHINES,
        label="Compteurs de cycles machine",
        build_steps=_build_machine_steps,
    ),
    WorkflowActionId.DISPATCHES: WorkflowActionSpec(
        action_id=WorkflowActionId.DISPATCHES,
        label="Ouverture/clôture de dispatches",
        build_steps=_build_dispatch_steps,
    ),
    WorkflowActionId.PRODUCTION: WorkflowActionSpec(
        action_id=WorkflowActionId.PRODUCTION,
        label="Production et rapport journalier",
        build_steps=_build_production_steps,
    ),
}
