"""Listes ordonnées de paramètres (nom, valeur) passées à l'API."""

from __future__ import annotations

from typing import Any, Iterable

Params = list[tuple[str, str]]


def as_param(value: Any) -> str:
    """Convertit une valeur Python en chaîne attendue par l'API (booléens en minuscules)."""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def extend_params(base: Iterable[tuple[str, str]], additions: Iterable[tuple[str, Any]]) -> Params:
    """Retourne une nouvelle liste : `base` puis `additions` (base n'est jamais modifiée)."""
    merged: Params = list(base)
    merged.extend((name, as_param(value)) for name, value in additions)
    return merged
