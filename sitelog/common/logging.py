import logging
import sys

from sitelog.config import settings

LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s | %(message)s"


def setup_logging(level: str | None = None) -> None:
    root = logging.getLogger("sitelog")
    root.setLevel((level or settings.LOG_LEVEL).upper())

    if not any(getattr(h, "_sitelog", False) for h in root.handlers):
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._sitelog = True  # type: ignore[attr-defined]
        root.addHandler(handler)

    # Quiet chatty libraries unless we're debugging
    if root.level > logging.DEBUG:
        logging.getLogger("httpx").setLevel(logging.WARNING)
        logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(f"sitelog.{name}")
