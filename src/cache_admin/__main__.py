"""Run the API with ``python -m cache_admin``."""
import uvicorn

from cache_admin.config.settings import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run(
        "cache_admin.api.app:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_config=None,
    )


if __name__ == "__main__":
    main()
