"""Modèle de données : configuration de la démo et enregistrements typés renvoyés par l'API."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping

from l2ldispatch.core.api.errors import ResponseShapeError


@dataclass(frozen=True)
class DemoConfig:
    """Configuration d'une exécution de la démo."""

    server: str
    """Nom d'hôte du serveur (ex: acme.leading2lean.com) ou URL complète."""
    site: str
    """Site sur lequel opérer."""
    user: str
    """Utilisateur utilisé pour les pointages."""
    api_key: str
    """Clé API, envoyée en paramètre `auth` à chaque appel."""
    debug: bool = False
    """Journalise les réponses complètes de l'API."""
    timeout_s: float = 30.0
    """Timeout réseau par requête (secondes)."""
    timezone: str | None = None
    """Fuseau IANA du site (None : fuseau local de la machine)."""
    area_page_size: int = 2
    """Taille de page pour le parcours des areas actives."""
    user_agent: str = "l2ldispatch/0.1 (demo)"

    @property
    def base_url(self) -> str:
        server = self.server.strip().rstrip("/")
        if "://" in server:
            return server
        return f"https://{server}"


def _require_int(raw: Mapping[str, Any], key: str, kind: str) -> int:
    value = raw.get(key)
    if isinstance(value, bool) or not isinstance(value, int):
        raise ResponseShapeError(f"No {kind} {key} found in results")
    return value


def _require_str(raw: Mapping[str, Any], key: str, kind: str) -> str:
    value = raw.get(key)
    if not isinstance(value, str):
        raise ResponseShapeError(f"No {kind} {key} found in results")
    return value


def _ensure_mapping(raw: Any, kind: str) -> Mapping[str, Any]:
    if not isinstance(raw, Mapping):
        raise ResponseShapeError(f"{kind} record is not an object: {raw!r}")
    return raw


@dataclass
class Site:
    """Site (usine) ; seule la description est exploitée par la démo."""

    site: str
    description: str
    raw: dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_api(cls, raw: Any, site: str = "") -> "Site":
        data = _ensure_mapping(raw, "site")
        description = data.get("description")
        return cls(
            site=str(data.get("site", site)),
            description="" if description is None else str(description),
            raw=dict(data),
        )


@dataclass
class Area:
    id: int
    code: str
    raw: dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_api(cls, raw: Any) -> "Area":
        data = _ensure_mapping(raw, "area")
        return cls(_require_int(data, "id", "area"), _require_str(data, "code", "area"), dict(data))


@dataclass
class Line:
    id: int
    code: str
    raw: dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_api(cls, raw: Any) -> "Line":
        data = _ensure_mapping(raw, "line")
        return cls(_require_int(data, "id", "line"), _require_str(data, "code", "line"), dict(data))


@dataclass
class Machine:
    id: int
    code: str
    raw: dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_api(cls, raw: Any) -> "Machine":
        data = _ensure_mapping(raw, "machine")
        return cls(_require_int(data, "id", "machine"), _require_str(data, "code", "machine"), dict(data))


@dataclass
class DispatchType:
    """Type de dispatch (catégorie d'intervention)."""

    id: int
    code: str
    raw: dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_api(cls, raw: Any) -> "DispatchType":
        data = _ensure_mapping(raw, "dispatch type")
        return cls(
            _require_int(data, "id", "dispatch type"),
            _require_str(data, "code", "dispatch type"),
            dict(data),
        )


@dataclass
class Dispatch:
    """Dispatch créé par l'API ; seul l'id est nécessaire pour le clore."""

    id: int
    raw: dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_api(cls, raw: Any) -> "Dispatch":
        data = _ensure_mapping(raw, "dispatch")
        return cls(_require_int(data, "id", "dispatch"), dict(data))
