"""Main entry point for the dashboard."""
import logging

import uvicorn

from wordboard.config import settings
from wordboard.logging_config import setup_logging

logger = logging.getLogger(__name__)


def main() -> None:
    """Serve the dashboard."""
    setup_logging("Starting wordboard ...")

    if settings.notion.missing():
        # Requests will answer with a configuration error until this is fixed
        logger.warning("Missing %s; word requests will fail", " and ".join(settings.notion.missing()))

    logger.info("Listening on http://%s:%d", settings.server.host, settings.server.port)
    try:
        uvicorn.run(
            "wordboard.app:app",
            host=settings.server.host,
            port=settings.server.port,
            reload=settings.server.reload,
            log_config=None,
        )
    except KeyboardInterrupt:
        logger.info("Received keyboard interrupt, shutting down...")


if __name__ == "__main__":
    main()
