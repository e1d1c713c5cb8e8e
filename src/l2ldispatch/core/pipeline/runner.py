"""Orchestration du pipeline : exécution séquentielle, arrêt au premier échec, annulation."""

from __future__ import annotations

import logging

from l2ldispatch.core.pipeline.context import PipelineContext
from l2ldispatch.core.pipeline.steps import (
    CancelledCallback,
    ErrorCallback,
    LogCallback,
    ProgressCallback,
    Step,
    StepResult,
)

logger = logging.getLogger(__name__)


def _clamp(percent: float | None) -> float:
    local = float(percent) if percent is not None else 0.0
    return max(0.0, min(1.0, local))


class PipelineRunner:
    """
    Exécute une liste d'étapes dans l'ordre, une requête à la fois.
    Chaque étape dépend des données des précédentes : le premier échec arrête tout.
    """

    def __init__(self):
        self._cancelled = False

    def cancel(self) -> None:
        """Demande l'arrêt avant la prochaine étape (l'appel en cours n'est pas interrompu)."""
        self._cancelled = True

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def run(
        self,
        steps: list[Step],
        context: PipelineContext,
        *,
        on_progress: ProgressCallback | None = None,
        on_log: LogCallback | None = None,
        on_error: ErrorCallback | None = None,
        on_cancelled: CancelledCallback | None = None,
    ) -> list[StepResult]:
        """
        Exécute les étapes et retourne un StepResult par étape lancée.
        Le dernier résultat est en échec si le pipeline s'est arrêté sur une erreur.
        """
        self._cancelled = False
        results: list[StepResult] = []
        total_steps = len(steps)

        def log(level: str, msg: str) -> None:
            if on_log:
                on_log(level, msg)
                return
            getattr(logger, level.lower(), logger.info)(msg)

        for index, step in enumerate(steps):
            if self._cancelled:
                if on_cancelled:
                    on_cancelled()
                log("warning", "Pipeline cancelled")
                break

            def emit_progress(step_name: str, percent: float, message: str, _index: int = index) -> None:
                if not on_progress:
                    return
                local = _clamp(percent)
                overall = local if total_steps <= 0 else (_index + local) / total_steps
                on_progress(step_name, overall, message)

            log("info", f"Running step: {step.name}")
            emit_progress(step.name, 0.0, f"Starting: {step.name}")
            try:
                result = step.run(context, on_progress=emit_progress, on_log=on_log)
            except Exception as e:
                logger.exception("Step %s failed", step.name)
                if on_error:
                    on_error(step.name, e)
                results.append(StepResult(False, str(e), {"step_name": step.name}))
                break

            result.data = dict(result.data or {})
            result.data.setdefault("step_name", step.name)
            results.append(result)
            if not result.success:
                if on_error:
                    on_error(step.name, RuntimeError(result.message))
                log("error", f"{step.name}: {result.message}")
                break
            log("info", result.message or f"Done: {step.name}")
            emit_progress(step.name, 1.0, result.message or f"Done: {step.name}")
        return results
