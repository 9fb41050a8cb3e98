"""
Basic logging configuration for the application.

``setup_logging`` attaches handlers to the root logger once.  The
scheduler library logs every job submission at INFO, which drowns the
``running <id>`` lines of the invoker, so its logger gets its own,
quieter level.  That level is applied on every call, even when the
root logger was configured elsewhere (e.g. by uvicorn or pytest).
"""

import logging
from pathlib import Path
from typing import Optional

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(
    level: str = "INFO",
    logfile: Optional[str] = None,
    scheduler_level: str = "WARNING",
) -> None:
    """Configure root logger.

    Parameters
    ----------
    level : str
        Root logging level name (e.g. ``"DEBUG"``, ``"INFO"``).  Case
        insensitive; unknown names fall back to ``INFO``.
    logfile : Optional[str]
        Path to a file that also receives log records.
    scheduler_level : str
        Level for the ``apscheduler`` logger.
    """
    logging.getLogger("apscheduler").setLevel(
        getattr(logging, scheduler_level.upper(), logging.WARNING)
    )

    root = logging.getLogger()
    if root.handlers:
        return

    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    handlers = [logging.StreamHandler()]
    if logfile:
        handlers.append(logging.FileHandler(Path(logfile).resolve(), encoding="utf-8"))
    for handler in handlers:
        handler.setFormatter(formatter)
        root.addHandler(handler)
