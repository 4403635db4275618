"""
Structured logging configuration.

Use ``get_logger(__name__)`` from this module in request-facing code.
"""
from typing import Optional, Any
import logging
import structlog
from cache_admin.config.settings import get_settings
from cache_admin.api.middleware.request_id import add_request_id_to_log


SENSITIVE_KEYS = {
    "password",
    "password_hash",
    "secret",
    "token",
    "api_key",
    "apikey",
    "authorization",
    "jwt",
}


def mask_secret(value: str) -> str:
    return "****" if value else ""


def mask_secrets_in_dict(data: dict) -> dict:
    """Return a copy of ``data`` with values of sensitive-looking keys masked."""
    masked = {}
    for key, value in data.items():
        key_lower = key.lower().replace("-", "_")
        should_mask = any(sensitive in key_lower for sensitive in SENSITIVE_KEYS)

        if should_mask and isinstance(value, str):
            masked[key] = mask_secret(value)
        elif isinstance(value, dict):
            masked[key] = mask_secrets_in_dict(value)
        else:
            masked[key] = value

    return masked


def mask_secrets_processor(logger_obj: Any, method_name: str, event_dict: dict) -> dict:
    """Structlog processor that masks API keys, passwords and tokens."""
    return mask_secrets_in_dict(event_dict)


def configure_logging() -> None:
    """
    Configure structlog and the stdlib root logger.

    Processor chain: context variables, request id, level, ISO timestamp,
    secret masking, exception formatting, then JSON (production) or colored
    console rendering depending on ``log_format``.
    """
    settings = get_settings()

    if settings.log_format == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=True, pad_event=25)

    processors = [
        structlog.contextvars.merge_contextvars,
        add_request_id_to_log,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        mask_secrets_processor,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        renderer,
    ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(settings.log_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

    # Infrastructure modules log through the stdlib
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
    )

    # The Cosmos SDK logs every HTTP exchange at INFO
    logging.getLogger("azure").setLevel(logging.WARNING)


def get_logger(name: Optional[str] = None) -> structlog.BoundLogger:
    """
    Get a logger instance with structured logging support.

    Usage:
        >>> logger = get_logger(__name__)
        >>> logger.info("agent registered", agent_id="123")
    """
    return structlog.get_logger(name)
