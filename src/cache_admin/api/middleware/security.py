"""Security headers middleware."""
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from cache_admin.config.settings import get_settings


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """
    Add security headers to all responses.

    HSTS is only sent in production.
    """

    async def dispatch(self, request: Request, call_next) -> Response:
        settings = get_settings()

        response = await call_next(request)

        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = settings.security_frame_options
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"

        if settings.security_hsts_enabled and settings.is_production:
            response.headers["Strict-Transport-Security"] = (
                f"max-age={settings.security_hsts_max_age}; includeSubDomains"
            )

        # Swagger UI needs inline scripts and a CDN
        if not request.url.path.startswith(("/docs", "/redoc")):
            response.headers["Content-Security-Policy"] = settings.security_csp_policy

        if "server" in response.headers:
            del response.headers["server"]

        return response
