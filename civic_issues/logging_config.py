import logging
import os
from typing import Dict, Optional

LOG_LEVEL_ENV = "CIVIC_LOG_LEVEL"
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

# Third-party loggers that are chatty at INFO for this service
QUIET_LOGGERS: Dict[str, int] = {
    "sqlalchemy.engine": logging.WARNING,
    # passlib logs a traceback at WARNING while probing the bcrypt version
    "passlib": logging.ERROR,
    "multipart": logging.WARNING,
    "python_multipart": logging.WARNING,
}


def resolve_log_level(value: Optional[str]) -> int:
    """Map a level name such as ``"debug"`` to its number; unknown names give INFO."""
    level = logging.getLevelName((value or "INFO").strip().upper())
    return level if isinstance(level, int) else logging.INFO


def configure_logging(level: Optional[int] = None) -> None:
    """
    Set up root logging for the API process.

    The level comes from ``CIVIC_LOG_LEVEL`` unless given. A root handler is
    only installed when none exists yet (uvicorn or pytest may have added
    one), but the level and the third-party quieting are applied every call.
    """
    if level is None:
        level = resolve_log_level(os.getenv(LOG_LEVEL_ENV))

    root_logger = logging.getLogger()
    if not root_logger.handlers:
        logging.basicConfig(format=LOG_FORMAT)
    root_logger.setLevel(level)

    for name, quiet_level in QUIET_LOGGERS.items():
        logging.getLogger(name).setLevel(max(level, quiet_level))
