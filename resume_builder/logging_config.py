import logging
import sys

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

# INFO output from these drowns out request and export logs.
QUIET_LOGGERS = ("uvicorn.access", "sqlalchemy.engine", "urllib3", "httpx")


def resolve_level(level: int | str | None) -> int:
    """Level from an int, a name like "debug", or settings.log_level when None. Unknown names mean INFO."""
    if level is None:
        try:
            from resume_builder.config import settings
            level = settings.log_level
        except Exception:
            return logging.INFO
    if isinstance(level, str):
        resolved = getattr(logging, level.upper(), None)
        return resolved if isinstance(resolved, int) else logging.INFO
    return level


def setup_logging(level: int | str | None = None) -> None:
    """Route all records to stdout with one format. Calling it again replaces the handler."""
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root = logging.getLogger()
    root.setLevel(resolve_level(level))
    root.handlers.clear()
    root.addHandler(handler)
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
