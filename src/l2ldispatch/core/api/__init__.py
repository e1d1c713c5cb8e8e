"""Client de l'API Dispatch : requêtes, contrôle des réponses, erreurs typées."""

from l2ldispatch.core.api.client import (
    ApiRequest,
    DispatchClient,
    check_response,
    send,
)
from l2ldispatch.core.api.errors import (
    ApiLogicError,
    DispatchApiError,
    EmptyBodyError,
    HttpStatusError,
    MalformedJsonError,
    ResponseShapeError,
    TransportError,
)
from l2ldispatch.core.api.params import Params, as_param, extend_params

__all__ = [
    "ApiLogicError",
    "ApiRequest",
    "DispatchApiError",
    "DispatchClient",
    "EmptyBodyError",
    "HttpStatusError",
    "MalformedJsonError",
    "Params",
    "ResponseShapeError",
    "TransportError",
    "as_param",
    "check_response",
    "extend_params",
    "send",
]
