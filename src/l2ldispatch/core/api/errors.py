"""Erreurs typées de l'API Dispatch (transport, statut HTTP, corps, JSON, logique métier)."""

from __future__ import annotations

from typing import Any


class DispatchApiError(Exception):
    """Erreur de base pour tout échec d'appel à l'API Dispatch."""

    pass


class TransportError(DispatchApiError):
    """Aucune réponse HTTP structurée reçue (réseau, DNS, timeout...)."""

    def __init__(self, detail: str):
        super().__init__(f"API call transport failure: {detail}")
        self.detail = detail


class HttpStatusError(DispatchApiError):
    """Réponse HTTP reçue mais statut différent de 200."""

    def __init__(self, status_code: int, detail: str | None = None):
        super().__init__(f"API call system failure, status: {status_code}, error: {detail}")
        self.status_code = status_code
        self.detail = detail


class EmptyBodyError(DispatchApiError):
    """Statut 200 sans aucun octet dans le corps."""

    def __init__(self):
        super().__init__("API call system failure, did not receive any data")


class MalformedJsonError(DispatchApiError):
    """Corps non JSON, ou JSON dont la racine n'est pas un objet."""

    def __init__(self, reason: str):
        super().__init__(f"Can't decode response as a json object: {reason}")
        self.reason = reason


class ApiLogicError(DispatchApiError):
    """Enveloppe valide mais `success` absent ou faux ; porte le champ `error`."""

    def __init__(self, error: Any = None):
        super().__init__(f"API call failed, error: {error!r}")
        self.error = error


class ResponseShapeError(DispatchApiError):
    """Réponse réussie dont `data` n'a pas la forme attendue par l'endpoint."""

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail
