"""Logging configuration for the TagWiki service."""

import logging

LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"

_configured = False


def _parse_level(value: str | int | None) -> int:
    """Map a level name such as 'debug' to a logging constant (INFO if unknown)."""
    if isinstance(value, int):
        return value
    if not value:
        return logging.INFO
    level = getattr(logging, value.strip().upper(), None)
    return level if isinstance(level, int) else logging.INFO


def configure_logging(level: str | int | None = None, *, force: bool = False) -> logging.Logger:
    """Initialize root logging once and return the service logger."""
    global _configured
    if not _configured or force:
        logging.basicConfig(level=_parse_level(level), format=LOG_FORMAT, force=force)
        _configured = True
    return logging.getLogger("tagwiki")
