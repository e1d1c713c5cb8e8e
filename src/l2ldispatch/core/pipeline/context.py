"""Contrat typé du contexte passé au pipeline (runner et steps)."""

from __future__ import annotations

from typing import Any, TypedDict

from l2ldispatch.core.api.endpoints import DispatchApi
from l2ldispatch.core.models import DemoConfig


class PipelineContext(TypedDict):
    """
    Contexte passé à chaque étape du pipeline et au runner.

    Clés requises :
        config : configuration de la démo (DemoConfig).
        api : endpoints Dispatch (DispatchApi) partagés par toutes les étapes.
        state : dictionnaire mutable des enregistrements découverts
            (site, area, line, machine, dispatch_type), alimenté étape par étape.
    """

    config: DemoConfig
    api: DispatchApi
    state: dict[str, Any]
