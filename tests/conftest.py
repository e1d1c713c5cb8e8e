"""Fixtures pytest communes."""

from __future__ import annotations

from typing import Any

import pytest


class SenderStub:
    """
    Remplace DispatchClient : répond par chemin, enregistre (path, params, method).

    routes : chemin -> payload, Exception, ou liste (consommée dans l'ordre).
    """

    def __init__(self, routes: dict[str, Any]):
        self._routes = {path: (list(v) if isinstance(v, list) else v) for path, v in routes.items()}
        self.calls: list[tuple[str, list[tuple[str, str]], str]] = []

    def send(self, path: str, params=(), method: str = "GET") -> dict[str, Any]:
        self.calls.append((path, list(params), method))
        if path not in self._routes:
            raise AssertionError(f"No fake response configured for {path}")
        item = self._routes[path]
        if isinstance(item, list):
            if not item:
                raise AssertionError(f"No more fake responses configured for {path}")
            item = item.pop(0)
        if isinstance(item, Exception):
            raise item
        return item

    def paths(self) -> list[str]:
        return [path for path, _params, _method in self.calls]

    def params_for(self, path: str) -> list[tuple[str, str]]:
        for call_path, params, _method in self.calls:
            if call_path == path:
                return params
        raise AssertionError(f"{path} was never called")


@pytest.fixture
def sender_stub():
    return SenderStub


@pytest.fixture
def dispatch_routes() -> dict[str, Any]:
    """Réponses minimales d'un serveur Dispatch pour dérouler toute la démo."""
    return {
        "/api/1.0/sites/": {"success": True, "data": [{"site": "1", "description": "Test Site"}]},
        "/api/1.0/areas/": [
            {"success": True, "data": [{"id": 10, "code": "A1"}, {"id": 11, "code": "A2"}]},
            {"success": True, "data": [{"id": 12, "code": "A3"}]},
        ],
        "/api/1.0/lines/": {"success": True, "data": [{"id": 20, "code": "L1"}]},
        "/api/1.0/machines/": {"success": True, "data": [{"id": 30, "code": "M1"}]},
        "/api/1.0/dispatchtypes/": {"success": True, "data": [{"id": 40, "code": "DT1"}]},
        "/api/1.0/users/clock_in/jdoe/": {"success": True, "data": {}},
        "/api/1.0/users/clock_out/jdoe/": {"success": True, "data": {}},
        "/api/1.0/machines/set_cycle_count/": {"success": True, "data": {}},
        "/api/1.0/machines/increment_cycle_count/": {"success": True, "data": {}},
        "/api/1.0/dispatches/open/": {"success": True, "data": {"id": 501}},
        "/api/1.0/dispatches/close/501/": {"success": True, "data": {"id": 501}},
        "/api/1.0/dispatches/add/": {"success": True, "data": {"id": 502}},
        "/api/1.0/pitchdetails/record_details/": {"success": True, "data": {}},
        "/api/1.0/reporting/production/daily_summary_data_by_line/": {
            "success": True,
            "data": [{"linecode": "L1", "actual": 42}],
        },
    }
