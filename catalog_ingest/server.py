"""
REST API server entry point.

Run with:
    catalog-ingest-api

Or directly with uvicorn:
    uvicorn catalog_ingest.server:app --factory
"""
import uvicorn

from catalog_ingest.api.app import create_app
from catalog_ingest.config.settings import Settings
from catalog_ingest.logging.logger import Log


def app():
    """Application factory for `uvicorn --factory`."""
    settings = Settings()
    Log.configure(settings.log_level)
    return create_app(settings)


def main() -> None:
    settings = Settings()
    Log.configure(settings.log_level)
    uvicorn.run(
        create_app(settings),
        host=settings.api_host,
        port=settings.api_port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
