"""Main entry point for the Playback Service.

Starts the FastAPI app with uvicorn.
"""

import logging
import os

import uvicorn

from playback_service.main import app

logger = logging.getLogger(__name__)


def main() -> None:
    """Main entry point for the Playback Service."""
    port = int(os.getenv("PORT", "8080"))
    host = os.getenv("HOST", "0.0.0.0")

    logger.info(f"Starting Playback Service on {host}:{port}")

    config = uvicorn.Config(
        app,
        host=host,
        port=port,
        log_level=os.getenv("LOG_LEVEL", "info").lower(),
        access_log=True,
    )

    server = uvicorn.Server(config)
    server.run()


if __name__ == "__main__":
    main()
