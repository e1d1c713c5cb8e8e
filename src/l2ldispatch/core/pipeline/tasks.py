"""Étapes concrètes de la démo : découverte du référentiel puis scénario métier Dispatch."""

from __future__ import annotations

import datetime
import logging
import random
import time
from typing import Any, Callable

from l2ldispatch.core.api.endpoints import DispatchApi
from l2ldispatch.core.api.errors import DispatchApiError
from l2ldispatch.core.models import DemoConfig
from l2ldispatch.core.pipeline.context import PipelineContext
from l2ldispatch.core.pipeline.steps import Step, StepResult
from l2ldispatch.core.utils.dates import format_minute, format_seconds, site_now

logger = logging.getLogger(__name__)

DISPATCH_DESCRIPTION = "l2lsdk test dispatch"

NowFn = Callable[[], datetime.datetime]


class MissingStateError(RuntimeError):
    """Une étape a besoin d'un enregistrement qu'aucune étape précédente n'a produit."""


def _require(context: PipelineContext, key: str) -> Any:
    value = context["state"].get(key)
    if value is None:
        raise MissingStateError(f"No {key.replace('_', ' ')} discovered yet; run the discover steps first")
    return value


class ApiStep(Step):
    """
    Base des étapes de la démo.

    Les sous-classes implémentent `execute` ; toute DispatchApiError (ou état
    manquant) devient un StepResult en échec, ce qui arrête le runner.
    """

    def run(
        self,
        context: PipelineContext,
        *,
        on_progress: Callable[[str, float, str], None] | None = None,
        on_log: Callable[[str, str], None] | None = None,
    ) -> StepResult:
        def log(level: str, msg: str):
            if on_log:
                on_log(level, msg)
            getattr(logger, level.lower(), logger.info)(msg)

        try:
            return self.execute(context, log)
        except (DispatchApiError, MissingStateError) as e:
            log("error", str(e))
            return StepResult(False, str(e))

    def execute(self, context: PipelineContext, log: Callable[[str, str], None]) -> StepResult:
        raise NotImplementedError


def _now_for(config: DemoConfig, now: NowFn | None) -> datetime.datetime:
    return now() if now is not None else site_now(config.timezone)


# ---------------------------------------------------------------------- #
#  Découverte
# ---------------------------------------------------------------------- #


class FindSiteStep(ApiStep):
    """Vérifie que le site de test existe ; scope ensuite tous les appels sur ce site."""

    name = "find_site"

    def execute(self, context, log):
        api: DispatchApi = context["api"]
        site = api.find_test_site(context["config"].site)
        context["state"]["site"] = site
        log("debug", f"site found: {site.description}")
        return StepResult(True, f"Site: {site.description or site.site}", {"site": site})


class FindAreaStep(ApiStep):
    """Pagine les areas actives et garde la dernière."""

    name = "find_area"

    def __init__(self, page_size: int = 2):
        self.page_size = page_size

    def execute(self, context, log):
        area = context["api"].last_active_area(page_size=self.page_size)
        context["state"]["area"] = area
        log("debug", f"Using area: {area.code}")
        return StepResult(True, f"Area: {area.code}", {"area": area})


class FindLineStep(ApiStep):
    name = "find_line"

    def execute(self, context, log):
        area = _require(context, "area")
        line = context["api"].first_line(area.id)
        context["state"]["line"] = line
        log("debug", f"Using line: {line.code}")
        return StepResult(True, f"Line: {line.code}", {"line": line})


class FindMachineStep(ApiStep):
    name = "find_machine"

    def execute(self, context, log):
        line = _require(context, "line")
        machine = context["api"].first_machine(line.id)
        context["state"]["machine"] = machine
        log("debug", f"Using machine: {machine.code}")
        return StepResult(True, f"Machine: {machine.code}", {"machine": machine})


class FindDispatchTypeStep(ApiStep):
    name = "find_dispatch_type"

    def execute(self, context, log):
        dispatch_type = context["api"].first_dispatch_type()
        context["state"]["dispatch_type"] = dispatch_type
        log("debug", f"Using Dispatch Type: {dispatch_type.code}")
        return StepResult(True, f"Dispatch type: {dispatch_type.code}", {"dispatch_type": dispatch_type})


# ---------------------------------------------------------------------- #
#  Pointages
# ---------------------------------------------------------------------- #


class ClockInOutStep(ApiStep):
    """Pointe l'utilisateur sur la ligne puis le dépointe."""

    name = "clock_in_out"

    def execute(self, context, log):
        api: DispatchApi = context["api"]
        user = context["config"].user
        line = _require(context, "line")
        clock_in = api.clock_in(user, line.code)
        log("debug", f"User clocked in: {clock_in}")
        clock_out = api.clock_out(user, line.code)
        log("debug", f"User clocked out: {clock_out}")
        return StepResult(True, f"{user} clocked in and out on {line.code}")


class BackdatedClockInStep(ApiStep):
    """
    Enregistre une session passée (start/end).
    Les dates sont exprimées dans le fuseau du site, au format minute.
    """

    name = "backdated_clock_in"

    def __init__(self, days_ago: int = 7, duration_hours: int = 8, now: NowFn | None = None):
        self.days_ago = days_ago
        self.duration_hours = duration_hours
        self.now = now

    def execute(self, context, log):
        config: DemoConfig = context["config"]
        line = _require(context, "line")
        start = _now_for(config, self.now) - datetime.timedelta(days=self.days_ago)
        end = start + datetime.timedelta(hours=self.duration_hours)
        response = context["api"].clock_in(
            config.user,
            line.code,
            start=format_minute(start),
            end=format_minute(end),
        )
        log("debug", f"Created backdated clockin: {response}")
        return StepResult(True, f"Backdated clock-in {format_minute(start)} -> {format_minute(end)}")


# ---------------------------------------------------------------------- #
#  Machines
# ---------------------------------------------------------------------- #


class CycleCountStep(ApiStep):
    """Fixe le compteur de cycles puis l'incrémente (sans mise à jour de lastupdated)."""

    name = "cycle_count"

    def __init__(self, initial: int = 832, increment: int = 5):
        self.initial = initial
        self.increment = increment

    def execute(self, context, log):
        api: DispatchApi = context["api"]
        machine = _require(context, "machine")
        response = api.set_cycle_count(machine.code, self.initial)
        log("debug", f"Set machine cycle count: {response}")
        response = api.increment_cycle_count(machine.code, self.increment, skip_lastupdated=True)
        log("debug", f"Incremented machine cycle count: {response}")
        return StepResult(True, f"Cycle count {machine.code}: {self.initial} + {self.increment}")


# ---------------------------------------------------------------------- #
#  Dispatches
# ---------------------------------------------------------------------- #


class OpenCloseDispatchStep(ApiStep):
    """Ouvre un dispatch (intervention requise) puis le clôt."""

    name = "open_close_dispatch"

    def __init__(self, description: str = DISPATCH_DESCRIPTION):
        self.description = description

    def execute(self, context, log):
        api: DispatchApi = context["api"]
        machine = _require(context, "machine")
        dispatch_type = _require(context, "dispatch_type")
        dispatch = api.open_dispatch(machine.id, dispatch_type.id, self.description)
        log("debug", f"Created open Dispatch: {dispatch.raw}")
        response = api.close_dispatch(dispatch.id)
        log("debug", f"Closed open Dispatch: {response}")
        return StepResult(True, f"Dispatch {dispatch.id} opened and closed", {"dispatch": dispatch})


class BackdatedDispatchStep(ApiStep):
    """Enregistre un dispatch déjà terminé (reporté il y a N jours, clos M minutes après)."""

    name = "backdated_dispatch"

    def __init__(
        self,
        days_ago: int = 60,
        duration_minutes: int = 34,
        description: str = DISPATCH_DESCRIPTION,
        now: NowFn | None = None,
    ):
        self.days_ago = days_ago
        self.duration_minutes = duration_minutes
        self.description = description
        self.now = now

    def execute(self, context, log):
        config: DemoConfig = context["config"]
        machine = _require(context, "machine")
        dispatch_type = _require(context, "dispatch_type")
        reported = _now_for(config, self.now) - datetime.timedelta(days=self.days_ago)
        completed = reported + datetime.timedelta(minutes=self.duration_minutes)
        response = context["api"].add_dispatch(
            machine.code,
            dispatch_type.code,
            self.description,
            reported=format_seconds(reported),
            completed=format_seconds(completed),
        )
        log("debug", f"Created backdated Dispatch: {response}")
        return StepResult(True, f"Backdated dispatch reported {format_seconds(reported)}")


# ---------------------------------------------------------------------- #
#  Production
# ---------------------------------------------------------------------- #


class RecordProductionStep(ApiStep):
    """
    Enregistre des données de production avec start=end="now" (pitch d'une seconde).
    En réel, utiliser une vraie plage horaire.
    """

    name = "record_production"

    def __init__(self, rng: random.Random | None = None, clock: Callable[[], float] = time.time):
        self.rng = rng or random.Random()
        self.clock = clock

    def execute(self, context, log):
        line = _require(context, "line")
        productcode = f"testproduct-{int(self.clock())}"
        actual = self.rng.randrange(10, 100)
        scrap = self.rng.randrange(5, 20)
        operator_count = self.rng.randrange(0, 10)
        response = context["api"].record_details(
            line.code,
            productcode,
            actual=actual,
            scrap=scrap,
            operator_count=operator_count,
        )
        log("debug", f"Recorded Pitch Details: {response}")
        return StepResult(
            True,
            f"Recorded {actual} {productcode} ({scrap} scrap) on {line.code}",
            {"productcode": productcode, "actual": actual, "scrap": scrap, "operator_count": operator_count},
        )


class DailySummaryStep(ApiStep):
    """Récupère le résumé de production journalier de la ligne (dernières 25 heures)."""

    name = "daily_summary"

    def __init__(self, now: NowFn | None = None):
        self.now = now

    def execute(self, context, log):
        config: DemoConfig = context["config"]
        line = _require(context, "line")
        end = _now_for(config, self.now)
        start = end - datetime.timedelta(days=1, hours=1)
        response = context["api"].daily_summary_by_line(
            line.code,
            format_minute(start),
            format_minute(end),
            show_products=True,
        )
        log("debug", f"Daily Summary Details for line: {response}")
        return StepResult(True, f"Daily summary for {line.code}", {"summary": response.get("data")})
