"""
Logging — Diagnostic log file for console sessions

Operator output goes to stdout through the console; loguru records the
full detail (tracebacks, link lifecycle, origin switches) to a rotating
file so the interactive display stays one line per failure.
"""

import os
from typing import Optional, TYPE_CHECKING

from loguru import logger

if TYPE_CHECKING:
    from ..config import LoggingConfig


LOG_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level} | {name}:{line} | {message}"

_sink_id: Optional[int] = None


def setup_logging(settings: 'LoggingConfig') -> Optional[int]:
    """
    Route loguru to a rotating file under settings.dir. Runs once per
    process; later calls replace the previous sink.

    Returns:
        The loguru sink id, or None if the directory cannot be created
        (logging is then disabled rather than written to the terminal)
    """
    global _sink_id

    logger.remove()
    _sink_id = None
    try:
        os.makedirs(settings.dir, exist_ok=True)
    except OSError as e:
        print(f"Warning: logging disabled, cannot create {settings.dir}: {e}")
        return None

    _sink_id = logger.add(
        sink=os.path.join(settings.dir, "wmbrowse_{time:YYYY-MM-DD}.log"),
        rotation=settings.rotation,
        retention=settings.retention,
        level=settings.level.upper(),
        format=LOG_FORMAT,
        enqueue=True,
        backtrace=True,
        diagnose=False,
    )
    logger.info("-----------Logger initialized-----------")
    return _sink_id


def shutdown_logging() -> None:
    """Flush queued records before the process exits."""
    logger.complete()
    logger.remove()
