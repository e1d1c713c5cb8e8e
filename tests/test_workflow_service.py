"""Tests for workflow service plan building."""

from __future__ import annotations

import pytest

from l2ldispatch.core.pipeline.tasks import CycleCountStep, FindSiteStep
from l2ldispatch.core.workflow import WorkflowActionError, WorkflowActionId, WorkflowService

DISCOVER_STEPS = ["find_site", "find_area", "find_line", "find_machine", "find_dispatch_type"]


def test_default_plan_is_the_full_demo() -> None:
    plan = WorkflowService().build_plan()

    assert plan.action_ids == (
        WorkflowActionId.DISCOVER,
        WorkflowActionId.TIME_TRACKING,
        WorkflowActionId.MACHINES,
        WorkflowActionId.DISPATCHES,
        WorkflowActionId.PRODUCTION,
    )
    assert plan.step_names == DISCOVER_STEPS + [
        "clock_in_out",
        "backdated_clock_in",
        "cycle_count",
        "open_close_dispatch",
        "backdated_dispatch",
        "record_production",
        "daily_summary",
    ]


def test_single_action_is_prefixed_by_discovery() -> None:
    plan = WorkflowService().build_plan(["machines"])

    assert plan.step_names == DISCOVER_STEPS + ["cycle_count"]
    assert isinstance(plan.steps[0], FindSiteStep)
    assert isinstance(plan.steps[-1], CycleCountStep)


def test_actions_are_deduplicated_and_run_in_catalog_order() -> None:
    plan = WorkflowService().build_plan(
        [WorkflowActionId.PRODUCTION, "dispatches", WorkflowActionId.PRODUCTION, "discover"]
    )

    assert plan.action_ids == (
        WorkflowActionId.DISCOVER,
        WorkflowActionId.DISPATCHES,
        WorkflowActionId.PRODUCTION,
    )
    assert plan.step_names.count("find_site") == 1


def test_area_page_size_option_reaches_the_step() -> None:
    plan = WorkflowService().build_plan(["discover"], options={"area_page_size": 25})

    assert plan.steps[1].page_size == 25


def test_unknown_action_id_raises() -> None:
    with pytest.raises(WorkflowActionError):
        WorkflowService().build_plan(["shutdown_line"])
