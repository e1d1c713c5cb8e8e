"""Endpoints Dispatch utilisés par la démo : découverte, pointages, cycles, dispatches, production."""

from __future__ import annotations

import logging
from typing import Any, Protocol
from urllib.parse import quote

from l2ldispatch.core.api.errors import ResponseShapeError
from l2ldispatch.core.api.params import Params, extend_params
from l2ldispatch.core.models import Area, Dispatch, DispatchType, Line, Machine, Site

logger = logging.getLogger(__name__)

API_PREFIX = "/api/1.0"


class ApiSender(Protocol):
    """Ce dont DispatchApi a besoin : un `send` bloquant (voir DispatchClient)."""

    def send(self, path: str, params: Params = ..., method: str = "GET") -> dict[str, Any]:
        ...


def _segment(value: Any) -> str:
    # Segment de chemin : "?", "#" et "/" ne doivent pas être lus comme syntaxe d'URL
    return quote(str(value), safe="")


def _records(payload: dict[str, Any], kind: str) -> list[Any]:
    data = payload.get("data")
    if not isinstance(data, list):
        raise ResponseShapeError(f"No data section found in {kind} result.")
    return data


def _first_record(payload: dict[str, Any], kind: str) -> Any:
    data = _records(payload, kind)
    if not data:
        raise ResponseShapeError(f"No data for the {kind}")
    return data[0]


class DispatchApi:
    """
    Appels typés vers l'API Dispatch.

    Les paramètres de base (`auth`, puis `site` une fois le site trouvé) sont
    ajoutés en tête de chaque requête.
    """

    def __init__(self, client: ApiSender, auth: str, site: str | None = None):
        self.client = client
        self.base_params: Params = [("auth", auth)]
        if site:
            self.base_params.append(("site", site))

    @property
    def site(self) -> str | None:
        for name, value in self.base_params:
            if name == "site":
                return value
        return None

    def _get(self, resource: str, extra: list[tuple[str, Any]]) -> dict[str, Any]:
        return self.client.send(f"{API_PREFIX}/{resource}", extend_params(self.base_params, extra), "GET")

    def _post(self, resource: str, extra: list[tuple[str, Any]]) -> dict[str, Any]:
        return self.client.send(f"{API_PREFIX}/{resource}", extend_params(self.base_params, extra), "POST")

    # ------------------------------------------------------------------ #
    #  Référentiel
    # ------------------------------------------------------------------ #

    def find_test_site(self, site: str) -> Site:
        """Cherche le site de test actif ; les appels suivants sont ensuite scopés sur ce site."""
        payload = self.client.send(
            f"{API_PREFIX}/sites/",
            extend_params(
                [p for p in self.base_params if p[0] != "site"],
                [("test_site", True), ("site", site), ("active", True)],
            ),
            "GET",
        )
        data = _records(payload, "site")
        if not data:
            raise ResponseShapeError(f"No test site data in results: {payload}")
        found = Site.from_api(data[0], site=site)
        self.base_params = [p for p in self.base_params if p[0] != "site"]
        self.base_params.append(("site", site))
        return found

    def list_areas(self, limit: int, offset: int = 0) -> list[Area]:
        payload = self._get("areas/", [("active", True), ("limit", limit), ("offset", offset)])
        return [Area.from_api(raw) for raw in _records(payload, "Area")]

    def last_active_area(self, page_size: int = 2) -> Area:
        """Parcourt toutes les pages d'areas actives et retourne la dernière."""
        if page_size < 1:
            raise ValueError("page_size must be >= 1")
        offset = 0
        last: Area | None = None
        while True:
            page = self.list_areas(page_size, offset)
            logger.debug("Areas offset=%d : %d résultat(s)", offset, len(page))
            if page:
                last = page[-1]
            if len(page) < page_size:
                break
            offset += len(page)
        if last is None:
            raise ResponseShapeError("Couldn't find active area to use.")
        return last

    def first_line(self, area_id: int) -> Line:
        payload = self._get(
            "lines/",
            [("active", True), ("area_id", area_id), ("enable_production", True)],
        )
        return Line.from_api(_first_record(payload, "Line"))

    def first_machine(self, line_id: int) -> Machine:
        payload = self._get("machines/", [("active", True), ("line_id", line_id)])
        return Machine.from_api(_first_record(payload, "Machine"))

    def first_dispatch_type(self) -> DispatchType:
        payload = self._get("dispatchtypes/", [("active", True)])
        return DispatchType.from_api(_first_record(payload, "Dispatch Types"))

    # ------------------------------------------------------------------ #
    #  Pointages
    # ------------------------------------------------------------------ #

    def clock_in(
        self,
        user: str,
        linecode: str,
        *,
        start: str | None = None,
        end: str | None = None,
    ) -> dict[str, Any]:
        """Pointage d'entrée ; avec start/end, enregistre une session passée."""
        extra: list[tuple[str, Any]] = [("active", True), ("linecode", linecode)]
        if start is not None:
            extra.append(("start", start))
        if end is not None:
            extra.append(("end", end))
        return self._post(f"users/clock_in/{_segment(user)}/", extra)

    def clock_out(self, user: str, linecode: str) -> dict[str, Any]:
        return self._post(f"users/clock_out/{_segment(user)}/", [("active", True), ("linecode", linecode)])

    # ------------------------------------------------------------------ #
    #  Machines
    # ------------------------------------------------------------------ #

    def set_cycle_count(self, code: str, count: int) -> dict[str, Any]:
        return self._post("machines/set_cycle_count/", [("code", code), ("cyclecount", count)])

    def increment_cycle_count(
        self,
        code: str,
        count: int,
        *,
        skip_lastupdated: bool = True,
    ) -> dict[str, Any]:
        """skip_lastupdated : pour les machines haute fréquence, ne met pas à jour lastupdated."""
        extra: list[tuple[str, Any]] = [("code", code)]
        if skip_lastupdated:
            extra.append(("skip_lastupdated", 1))
        extra.append(("cyclecount", count))
        return self._post("machines/increment_cycle_count/", extra)

    # ------------------------------------------------------------------ #
    #  Dispatches
    # ------------------------------------------------------------------ #

    def open_dispatch(self, machine_id: int, dispatchtype_id: int, description: str) -> Dispatch:
        payload = self._post(
            "dispatches/open/",
            [("machine", machine_id), ("description", description), ("dispatchtype", dispatchtype_id)],
        )
        data = payload.get("data")
        if not isinstance(data, dict):
            raise ResponseShapeError("No data section found in created Dispatch.")
        return Dispatch.from_api(data)

    def close_dispatch(self, dispatch_id: int) -> dict[str, Any]:
        return self._post(f"dispatches/close/{_segment(dispatch_id)}/", [])

    def add_dispatch(
        self,
        machinecode: str,
        dispatchtypecode: str,
        description: str,
        *,
        reported: str,
        completed: str,
    ) -> dict[str, Any]:
        """Enregistre un dispatch déjà terminé (dates au format secondes)."""
        return self._post(
            "dispatches/add/",
            [
                ("machinecode", machinecode),
                ("description", description),
                ("dispatchtypecode", dispatchtypecode),
                ("reported", reported),
                ("completed", completed),
            ],
        )

    # ------------------------------------------------------------------ #
    #  Production
    # ------------------------------------------------------------------ #

    def record_details(
        self,
        linecode: str,
        productcode: str,
        *,
        actual: int,
        scrap: int,
        operator_count: int,
        start: str = "now",
        end: str = "now",
    ) -> dict[str, Any]:
        return self._post(
            "pitchdetails/record_details/",
            [
                ("linecode", linecode),
                ("productcode", productcode),
                ("actual", actual),
                ("scrap", scrap),
                ("operator_count", operator_count),
                ("start", start),
                ("end", end),
            ],
        )

    def daily_summary_by_line(
        self,
        linecode: str,
        start: str,
        end: str,
        *,
        show_products: bool = True,
    ) -> dict[str, Any]:
        return self._post(
            "reporting/production/daily_summary_data_by_line/",
            [("linecode", linecode), ("start", start), ("end", end), ("show_products", show_products)],
        )
