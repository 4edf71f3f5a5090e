"""Main application entry point.

Serves the NiceGUI chat interface, which talks to the remote document Q&A
service at API_BASE_URL. Environment variables are loaded from .env file.
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

# Keep per-request transport chatter out of the application log
for _name in ("httpx", "httpcore"):
    logging.getLogger(_name).setLevel(logging.WARNING)


def main() -> None:
    """Application entry point.

    HOST and PORT select where the UI listens (default 0.0.0.0:8080).
    """
    from nicegui import ui

    from edubot.config import get_client_config
    from edubot.ui.chat_page import chat_page  # noqa: F401 - Registers the page

    config = get_client_config()
    port = int(os.getenv("PORT", "8080"))

    logger.info(f"Remote service at {config.api_base_url}")
    logger.info(f"Chat UI available at http://localhost:{port}/")

    ui.run(
        title="EduBot",
        favicon="🤖",
        host=os.getenv("HOST", "0.0.0.0"),
        port=port,
        reload=False,
        storage_secret=os.getenv("NICEGUI_STORAGE_SECRET", "edubot-secret"),
    )


if __name__ == "__main__":
    main()
