"""
Logging for the API process and the editor helpers.

One console stream for everything; modules log through
logging.getLogger(__name__) and never attach handlers themselves.
"""

import logging

LOG_FORMAT = "%(asctime)s %(levelname)-8s [%(name)s] %(message)s"

# Per-request chatter from the HTTP client and the SQL layer
QUIET_LOGGERS = ("httpx", "httpcore", "sqlalchemy.engine")


def resolve_level(name: str) -> int:
    """Map a level name from settings to its number, INFO if unknown."""
    level = logging.getLevelName(name.strip().upper())
    return level if isinstance(level, int) else logging.INFO


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(level=resolve_level(level), format=LOG_FORMAT)
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    logging.getLogger("blogpad").debug(
        "Console logging at %s", logging.getLevelName(resolve_level(level))
    )
