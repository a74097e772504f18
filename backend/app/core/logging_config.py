# app/core/logging_config.py
import logging
import sys

from app.core.config import settings

_CONFIGURED = False


def configure_logging(level: str | None = None) -> None:
    """Attach a single stdout handler to the root logger. Safe to call more than once."""
    global _CONFIGURED

    numeric_level = getattr(logging, (level or settings.LOG_LEVEL).upper(), logging.INFO)
    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)

    if _CONFIGURED:
        return

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter("%(asctime)s | %(name)s | %(levelname)s | %(message)s"))
    root_logger.addHandler(handler)

    # The HTTP clients underneath supabase log every request at INFO.
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)

    _CONFIGURED = True
