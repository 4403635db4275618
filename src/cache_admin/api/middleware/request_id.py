"""
Request ID tracking middleware.

Gives every request a UUID4 identifier for log correlation and error responses.
"""
import uuid
from contextvars import ContextVar, Token
from typing import Any, Optional
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response
import structlog

REQUEST_ID_HEADER = "X-Request-ID"

request_id_var: ContextVar[Optional[str]] = ContextVar("request_id", default=None)

logger = structlog.get_logger(__name__)


def is_valid_uuid(value: str) -> bool:
    """Accept only canonical UUID4 strings from clients."""
    try:
        uuid_obj = uuid.UUID(value, version=4)
        return str(uuid_obj) == value and uuid_obj.version == 4
    except (ValueError, AttributeError):
        return False


def get_request_id() -> Optional[str]:
    return request_id_var.get(None)


def set_request_id(request_id: str) -> Token:
    return request_id_var.set(request_id)


def add_request_id_to_log(
    logger: Any, method_name: str, event_dict: dict
) -> dict:
    """Structlog processor adding the current request ID to every entry."""
    request_id = get_request_id()
    if request_id:
        event_dict.setdefault("request_id", request_id)
    return event_dict


class RequestIDMiddleware(BaseHTTPMiddleware):
    """
    Accepts a valid incoming ``X-Request-ID`` or generates one, stores it in
    ``request.state`` and a context variable, and echoes it on the response.
    """

    async def dispatch(self, request: Request, call_next) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER)

        if request_id:
            if not is_valid_uuid(request_id):
                logger.warning(
                    "Invalid X-Request-ID received, generating new one",
                    invalid_id=request_id,
                    client_ip=request.client.host if request.client else None
                )
                request_id = str(uuid.uuid4())
        else:
            request_id = str(uuid.uuid4())

        request.state.request_id = request_id
        token = set_request_id(request_id)
        try:
            response = await call_next(request)
        finally:
            request_id_var.reset(token)
        response.headers[REQUEST_ID_HEADER] = request_id
        return response
