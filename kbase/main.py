"""Main application entry point.

Runs the FastAPI service with uvicorn (port 8000 by default).
Environment variables are loaded from .env file.
"""

import logging
import os
import sys

from dotenv import load_dotenv

# Load environment variables before any other imports that might need them
load_dotenv()

# Configure logging
logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)
logger = logging.getLogger(__name__)


def main() -> None:
    """Application entry point.

    Set RELOAD=true to restart the server on code changes during development.
    """
    import uvicorn

    host = os.getenv("HOST", "0.0.0.0")
    port = int(os.getenv("PORT", "8000"))
    reload = os.getenv("RELOAD", "false").strip().lower() in ("1", "true", "yes", "on")

    logger.info(f"Starting knowledge base on http://localhost:{port}")
    logger.info(f"API docs available at http://localhost:{port}/docs")

    if reload:
        uvicorn.run(
            "kbase.api.app:app",
            host=host,
            port=port,
            reload=True,
            log_level=os.getenv("LOG_LEVEL", "info").lower(),
        )
        return

    from kbase.api.app import create_app

    uvicorn.run(
        create_app(),
        host=host,
        port=port,
        log_level=os.getenv("LOG_LEVEL", "info").lower(),
    )


if __name__ == "__main__":
    main()
