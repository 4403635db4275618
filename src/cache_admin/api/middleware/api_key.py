"""
API key gate for agent callback routes.

Requests under ``/api/callback/`` must carry ``X-Api-Key`` matching an agent
whose key is active. The resolved agent is placed on ``request.state.agent``
for the route handlers. Every other path passes through untouched.
"""
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from cache_admin.api.middleware.errors import app_error_response
from cache_admin.domain.exceptions import ApiKeyInvalid, ApiKeyMissing, AppError
from cache_admin.infrastructure.agents import API_KEY_HEADER
from cache_admin.infrastructure.observability.logging import get_logger
from cache_admin.infrastructure.storage import open_repositories
from cache_admin.services.agents import AgentService

logger = get_logger(__name__)

CALLBACK_PREFIX = "/api/callback/"
EXEMPT_PATHS = {"/api/callback/health"}


def requires_api_key(path: str) -> bool:
    return path.startswith(CALLBACK_PREFIX) and path.rstrip("/") not in EXEMPT_PATHS


class ApiKeyValidationMiddleware(BaseHTTPMiddleware):
    """
    missing header -> 401, unknown or inactive key -> 401,
    store failure -> 500, otherwise continue with the agent attached.
    """

    async def dispatch(self, request: Request, call_next) -> Response:
        if not requires_api_key(request.url.path):
            return await call_next(request)

        api_key = request.headers.get(API_KEY_HEADER)
        if not api_key:
            return app_error_response(request, ApiKeyMissing())

        try:
            async with open_repositories() as repos:
                agent = await AgentService(repos.agents, repos.services).get_active_by_api_key(api_key)
        except AppError as e:
            return app_error_response(request, e)
        except Exception as e:
            logger.exception("API key lookup failed", path=request.url.path, error=str(e))
            return app_error_response(request, AppError("Error validating API key"))

        if agent is None:
            logger.warning("Rejected callback with unknown or inactive API key", path=request.url.path)
            return app_error_response(request, ApiKeyInvalid())

        request.state.agent = agent
        return await call_next(request)
