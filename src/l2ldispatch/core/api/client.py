"""Client REST bloquant pour l'API Dispatch (https://<serveur>/api/1.0/...)."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Iterable
from urllib.parse import urlencode

import httpx

from l2ldispatch.core.api.errors import (
    ApiLogicError,
    EmptyBodyError,
    HttpStatusError,
    MalformedJsonError,
    TransportError,
)
from l2ldispatch.core.api.params import Params

logger = logging.getLogger(__name__)

USER_AGENT = "l2ldispatch/0.1 (demo)"
DEFAULT_TIMEOUT_S = 30.0
_METHODS = ("GET", "POST")


@dataclass
class ApiRequest:
    """Requête à émettre : hôte de base, chemin, paramètres ordonnés, méthode."""

    host: str
    path: str
    params: Params = field(default_factory=list)
    method: str = "GET"

    def __post_init__(self) -> None:
        self.method = (self.method or "GET").upper()
        if self.method not in _METHODS:
            raise ValueError(f"Unsupported method {self.method!r}, expected GET or POST")
        self.params = [(str(name), str(value)) for name, value in self.params]

    def encoded_params(self) -> str:
        """Forme application/x-www-form-urlencoded des paramètres, ordre conservé."""
        return urlencode(self.params)

    def to_httpx(self, user_agent: str = USER_AGENT) -> httpx.Request:
        """
        Construit la requête httpx.

        GET : paramètres dans la query string, pas de corps.
        POST : mêmes paramètres dans le corps urlencodé, query string vide.
        """
        url = httpx.URL(self.host).join(self.path)
        headers = {"User-Agent": user_agent, "Accept": "application/json"}
        encoded = self.encoded_params()
        if self.method == "POST":
            headers["Content-Type"] = "application/x-www-form-urlencoded"
            return httpx.Request("POST", url, headers=headers, content=encoded.encode("ascii"))
        if encoded:
            url = url.copy_with(query=encoded.encode("ascii"))
        return httpx.Request("GET", url, headers=headers)


def check_response(response: httpx.Response | None) -> dict[str, Any]:
    """
    Valide une réponse de l'API et retourne l'objet JSON complet.

    Ordre des contrôles : réponse présente, statut 200, corps non vide,
    JSON objet à la racine, puis champ `success` vrai.

    Raises:
        TransportError, HttpStatusError, EmptyBodyError, MalformedJsonError, ApiLogicError.
    """
    if response is None:
        raise TransportError("Expected an HTTP response, got none")
    if response.status_code != 200:
        raise HttpStatusError(response.status_code, response.reason_phrase or None)
    if not response.content:
        raise EmptyBodyError()
    try:
        payload = response.json()
    except ValueError as e:
        raise MalformedJsonError(str(e)) from e
    if not isinstance(payload, dict):
        raise MalformedJsonError(f"top-level json is {type(payload).__name__}, expected an object")
    if not payload.get("success"):
        raise ApiLogicError(payload.get("error"))
    return payload


class DispatchClient:
    """
    Client pour un serveur Dispatch donné.
    Un appel à la fois : chaque `send` bloque jusqu'à la réponse ou l'erreur réseau.
    """

    def __init__(
        self,
        host: str,
        *,
        timeout_s: float = DEFAULT_TIMEOUT_S,
        user_agent: str = USER_AGENT,
    ):
        self.host = host.rstrip("/")
        self.timeout_s = timeout_s
        self.user_agent = user_agent

    def _perform(self, request: httpx.Request) -> httpx.Response:
        with httpx.Client(timeout=self.timeout_s) as client:
            try:
                return client.send(request)
            except httpx.DecodingError as e:
                # Corps reçu mais illisible (gzip/deflate corrompu)
                raise MalformedJsonError(str(e) or type(e).__name__) from e
            except httpx.RequestError as e:
                raise TransportError(str(e) or type(e).__name__) from e

    def send(
        self,
        path: str,
        params: Iterable[tuple[str, str]] = (),
        method: str = "GET",
    ) -> dict[str, Any]:
        """Émet la requête, attend la réponse et retourne l'objet JSON validé."""
        api_request = ApiRequest(self.host, path, list(params), method)
        request = api_request.to_httpx(self.user_agent)
        logger.debug("%s %s", api_request.method, path)
        response = self._perform(request)
        payload = check_response(response)
        logger.debug("Réponse %s %s : %s", api_request.method, path, payload)
        return payload


def send(
    host: str,
    path: str,
    params: Iterable[tuple[str, str]] = (),
    method: str = "GET",
    *,
    timeout_s: float = DEFAULT_TIMEOUT_S,
) -> dict[str, Any]:
    """Raccourci sans état : `DispatchClient(host).send(path, params, method)`."""
    return DispatchClient(host, timeout_s=timeout_s).send(path, params, method)
