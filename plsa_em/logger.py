import os
import sys
from typing import Optional

from loguru import logger

from .config import LOG_LEVEL, LOG_ROTATION, LOG_RETENTION

_LOGGER_CONFIGURED = False


def configure_logging(level: str = LOG_LEVEL, log_dir: Optional[str] = None, force: bool = False) -> None:
    """
    Configure the global loguru logger once per process.

    - stderr sink at the given level
    - optional daily-rotated file sink under ``log_dir``
    """
    global _LOGGER_CONFIGURED
    if _LOGGER_CONFIGURED and not force:
        return

    logger.remove()
    logger.add(
        sys.stderr,
        level=level,
        format="{time:YYYY-MM-DD HH:mm:ss} | {level} | {message}",
    )

    if log_dir:
        os.makedirs(log_dir, exist_ok=True)
        logger.add(
            sink=os.path.join(log_dir, "{time:YYYY-MM-DD}.log"),
            rotation=LOG_ROTATION,
            retention=LOG_RETENTION,
            level=level,
            format="{time:YYYY-MM-DD HH:mm:ss} | {level} | {message}",
            enqueue=True,
        )

    _LOGGER_CONFIGURED = True
    logger.debug(f"Logger configured (level={level}, log_dir={log_dir})")
