from __future__ import annotations

import logging
import os

DEFAULT_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

_configured = False


def _resolve_level(level: str | int | None) -> str | int:
    if level is not None:
        return level.upper() if isinstance(level, str) else level
    env_level = os.getenv("LISTINGMATCH_LOG_LEVEL")
    if env_level:
        return env_level.upper()
    if os.getenv("LISTINGMATCH_ENV", "").lower() == "dev":
        return "DEBUG"
    return "INFO"


def configure_logging(level: str | int | None = None, force: bool = False) -> None:
    """Configure root logging once.

    Priority: explicit arg > LISTINGMATCH_LOG_LEVEL > DEBUG if LISTINGMATCH_ENV=dev > INFO.
    LISTINGMATCH_LOG_FORMAT replaces the default line format. Later calls are
    no-ops unless ``force`` is set.
    """
    global _configured
    if _configured and not force:
        return
    fmt = os.getenv("LISTINGMATCH_LOG_FORMAT") or DEFAULT_FORMAT
    logging.basicConfig(level=_resolve_level(level), format=fmt, force=force)
    _configured = True


def get_logger(name: str | None = None) -> logging.Logger:
    configure_logging()
    return logging.getLogger(name if name else "listingmatch")
