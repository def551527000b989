from __future__ import annotations

import logging
import sys

from quotebook.config import settings

# Client libraries under the Supabase SDK log every request at INFO
_NOISY_LOGGERS = ("httpx", "httpcore", "hpack", "postgrest", "gotrue")


def setup_logging(level: str | None = None) -> None:
    """Configure root logging for the API process."""
    level_name = (level or settings.log_level).upper()

    logging.basicConfig(
        level=getattr(logging, level_name, logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stdout
    )

    logging.getLogger("uvicorn").setLevel(logging.INFO)
    logging.getLogger("uvicorn.access").setLevel(logging.INFO)
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    logging.info("Logging configured", extra={"level": level_name})


def get_logger(name: str | None = None) -> logging.Logger:
    """Get a logger instance."""
    return logging.getLogger(name)
