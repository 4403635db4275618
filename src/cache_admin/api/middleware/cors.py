# src/cache_admin/api/middleware/cors.py
import logging
from urllib.parse import urlparse

from cache_admin.config.settings import Settings

logger = logging.getLogger(__name__)

DEFAULT_DEV_ORIGINS = [
    "http://localhost:4200",  # Angular dev server
    "http://localhost:3000",
    "http://127.0.0.1:4200",
    "http://127.0.0.1:3000",
]


def get_cors_middleware_config(settings: Settings) -> dict:
    """
    Get CORSMiddleware kwargs for the current environment.

    Local and dev environments fall back to localhost origins when none
    are configured.

    Raises:
        ValueError: If an origin is not a scheme://host URL
    """
    allowed_origins = list(settings.cors_origins)

    if settings.environment in ["local", "dev"] and not allowed_origins:
        allowed_origins = list(DEFAULT_DEV_ORIGINS)
        logger.info(
            f"CORS: No origins configured in {settings.environment} environment, "
            f"using default localhost origins: {allowed_origins}"
        )

    for origin in allowed_origins:
        if origin == "*":
            if settings.is_production:
                logger.warning(
                    "CORS: Wildcard origin '*' detected in PRODUCTION environment! "
                    "Please configure specific origins."
                )
            continue

        parsed = urlparse(origin)
        if not parsed.scheme or not parsed.netloc:
            raise ValueError(
                f"Invalid origin URL format: {origin}. "
                "Origins must include scheme and domain (e.g., 'http://localhost:4200')"
            )

    if settings.environment in ["staging", "prod"] and not allowed_origins:
        logger.warning(
            f"CORS: No origins configured in {settings.environment.upper()} environment! "
            "All cross-origin requests will be blocked."
        )

    # Browsers reject credentials with a wildcard origin
    allow_credentials = settings.cors_allow_credentials and "*" not in allowed_origins

    return {
        "allow_origins": allowed_origins,
        "allow_credentials": allow_credentials,
        "allow_methods": settings.cors_allow_methods,
        "allow_headers": settings.cors_allow_headers,
        "max_age": settings.cors_max_age,
    }
