import logging

from config.env import LOG_LEVEL


def configure_logging() -> None:
    """Configure logging defaults for the API process."""
    logging.basicConfig(
        level=(LOG_LEVEL or "INFO").upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
