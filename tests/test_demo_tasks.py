"""Tests des étapes de la démo contre un serveur Dispatch simulé."""

from __future__ import annotations

import datetime
import random

from l2ldispatch.core.api.endpoints import DispatchApi
from l2ldispatch.core.api.errors import ApiLogicError
from l2ldispatch.core.models import DemoConfig, DispatchType, Line, Machine
from l2ldispatch.core.pipeline.runner import PipelineRunner
from l2ldispatch.core.pipeline.tasks import (
    BackdatedClockInStep,
    BackdatedDispatchStep,
    DailySummaryStep,
    FindLineStep,
    RecordProductionStep,
)
from l2ldispatch.core.workflow import WorkflowService

FIXED_NOW = datetime.datetime(2024, 3, 15, 10, 30, 45)


def _config() -> DemoConfig:
    return DemoConfig(server="acme.example.com", site="1", user="jdoe", api_key="k")


def _context(sender, state=None):
    return {"config": _config(), "api": DispatchApi(sender, auth="k"), "state": dict(state or {})}


def test_full_demo_runs_every_call_in_order(sender_stub, dispatch_routes) -> None:
    sender = sender_stub(dispatch_routes)
    plan = WorkflowService().build_plan(options={"now": lambda: FIXED_NOW, "rng": random.Random(3)})

    results = PipelineRunner().run(list(plan.steps), _context(sender))

    assert all(r.success for r in results), [r.message for r in results]
    assert len(results) == 12
    assert sender.paths() == [
        "/api/1.0/sites/",
        "/api/1.0/areas/",
        "/api/1.0/areas/",
        "/api/1.0/lines/",
        "/api/1.0/machines/",
        "/api/1.0/dispatchtypes/",
        "/api/1.0/users/clock_in/jdoe/",
        "/api/1.0/users/clock_out/jdoe/",
        "/api/1.0/users/clock_in/jdoe/",
        "/api/1.0/machines/set_cycle_count/",
        "/api/1.0/machines/increment_cycle_count/",
        "/api/1.0/dispatches/open/",
        "/api/1.0/dispatches/close/501/",
        "/api/1.0/dispatches/add/",
        "/api/1.0/pitchdetails/record_details/",
        "/api/1.0/reporting/production/daily_summary_data_by_line/",
    ]
    # La dernière area de la dernière page est retenue, puis sa ligne
    assert dict(sender.params_for("/api/1.0/lines/"))["area_id"] == "12"
    assert dict(sender.params_for("/api/1.0/machines/"))["line_id"] == "20"
    assert results[-1].data["summary"] == [{"linecode": "L1", "actual": 42}]


def test_every_call_after_site_lookup_is_scoped_and_authenticated(sender_stub, dispatch_routes) -> None:
    sender = sender_stub(dispatch_routes)
    plan = WorkflowService().build_plan()

    PipelineRunner().run(list(plan.steps), _context(sender))

    for _path, params, _method in sender.calls[1:]:
        assert params[:2] == [("auth", "k"), ("site", "1")]
    assert {method for path, _p, method in sender.calls if "/users/" in path} == {"POST"}


def test_api_failure_stops_the_workflow(sender_stub, dispatch_routes) -> None:
    dispatch_routes["/api/1.0/machines/"] = ApiLogicError("no machine for line")
    sender = sender_stub(dispatch_routes)
    plan = WorkflowService().build_plan()

    results = PipelineRunner().run(list(plan.steps), _context(sender))

    assert not results[-1].success
    assert results[-1].data["step_name"] == "find_machine"
    assert "no machine for line" in results[-1].message
    assert "/api/1.0/dispatchtypes/" not in sender.paths()


def test_step_without_prerequisite_record_fails_cleanly(sender_stub) -> None:
    sender = sender_stub({})

    result = FindLineStep().run(_context(sender))

    assert not result.success
    assert "No area discovered yet" in result.message
    assert sender.calls == []


def test_backdated_clock_in_uses_minute_format_window(sender_stub, dispatch_routes) -> None:
    sender = sender_stub(dispatch_routes)
    step = BackdatedClockInStep(now=lambda: FIXED_NOW)

    result = step.run(_context(sender, {"line": Line(20, "L1")}))

    assert result.success
    params = dict(sender.params_for("/api/1.0/users/clock_in/jdoe/"))
    assert params["start"] == "2024-03-08 10:30"
    assert params["end"] == "2024-03-08 18:30"
    assert params["linecode"] == "L1"


def test_backdated_dispatch_uses_seconds_format(sender_stub, dispatch_routes) -> None:
    sender = sender_stub(dispatch_routes)
    state = {"machine": Machine(30, "M1"), "dispatch_type": DispatchType(40, "DT1")}

    result = BackdatedDispatchStep(now=lambda: FIXED_NOW).run(_context(sender, state))

    assert result.success
    params = dict(sender.params_for("/api/1.0/dispatches/add/"))
    assert params["reported"] == "2024-01-15 10:30:45"
    assert params["completed"] == "2024-01-15 11:04:45"
    assert params["machinecode"] == "M1"
    assert params["dispatchtypecode"] == "DT1"


def test_record_production_values_stay_in_range(sender_stub, dispatch_routes) -> None:
    sender = sender_stub(dispatch_routes)
    step = RecordProductionStep(rng=random.Random(7), clock=lambda: 1700000000.5)

    result = step.run(_context(sender, {"line": Line(20, "L1")}))

    assert result.success
    params = dict(sender.params_for("/api/1.0/pitchdetails/record_details/"))
    assert params["productcode"] == "testproduct-1700000000"
    assert 10 <= int(params["actual"]) < 100
    assert 5 <= int(params["scrap"]) < 20
    assert 0 <= int(params["operator_count"]) < 10
    assert params["start"] == params["end"] == "now"


def test_daily_summary_covers_last_day_and_hour(sender_stub, dispatch_routes) -> None:
    sender = sender_stub(dispatch_routes)

    DailySummaryStep(now=lambda: FIXED_NOW).run(_context(sender, {"line": Line(20, "L1")}))

    params = sender.params_for("/api/1.0/reporting/production/daily_summary_data_by_line/")
    assert params[-4:] == [
        ("linecode", "L1"),
        ("start", "2024-03-14 09:30"),
        ("end", "2024-03-15 10:30"),
        ("show_products", "true"),
    ]
