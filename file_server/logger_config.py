import logging
import sys
from pathlib import Path
from typing import Optional

from file_server import config

LOGGER_NAME = "file_server"
LOG_FILE = "file_server.log"

# File output keeps the call site, the console only what happened
DETAILED_FORMAT = '%(asctime)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s'
BRIEF_FORMAT = '%(asctime)s - %(levelname)s - %(message)s'


def _configure(handler: logging.Handler, level: int, fmt: str) -> logging.Handler:
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt))
    return handler


def setup_logger(log_dir: Optional[str] = None):
    """Return the server logger, attaching its handlers on the first call only."""
    logger = logging.getLogger(LOGGER_NAME)
    if logger.handlers:
        return logger

    logs_dir = Path(log_dir or config.LOG_DIR)
    logs_dir.mkdir(exist_ok=True, parents=True)

    logger.setLevel(logging.DEBUG)
    logger.addHandler(
        _configure(logging.FileHandler(logs_dir / LOG_FILE), logging.DEBUG, DETAILED_FORMAT)
    )
    logger.addHandler(
        _configure(
            logging.StreamHandler(sys.stdout),
            logging.getLevelName(config.LOG_LEVEL.upper()),
            BRIEF_FORMAT,
        )
    )
    return logger
