import sys
from typing import Optional

from loguru import logger

LOG_FORMAT = "{time} | {level} | {module}:{function}:{line} | {message} | {extra}"


def setup_logging(level: str, log_path: Optional[str] = None) -> None:
    """Send logs to stderr and, when ``log_path`` is set, to a rotating file.

    Bound context (``logger.bind(field=...)``) is appended to every line so
    decode and handler failures keep their field/action/path.
    """
    logger.remove()
    logger.configure(extra={})
    logger.add(
        sys.stderr,
        level=level.upper(),
        format=LOG_FORMAT,
    )
    if log_path:
        logger.add(
            log_path,
            level="DEBUG",
            format=LOG_FORMAT,
            rotation="100 KB",
            compression="zip",
        )
