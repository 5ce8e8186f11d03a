"""
Logging for the ``portfolio_financials`` package.

The FastAPI app calls ``configure_logging()`` once at startup.
Engine and service modules only call ``get_logger(__name__)``, so
the engine stays silent when a host application embeds it
without configuring logging.
"""

import logging

_PKG_LOGGER_NAME = "portfolio_financials"
_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
_CONFIGURED = False


def configure_logging(level: int | str | None = None) -> None:
    """
    Send package logs to stderr at the given level (default INFO).

    Level names such as "warning" are accepted, as read from the
    LOG_LEVEL setting. Only the first call has any effect.
    """
    global _CONFIGURED
    if _CONFIGURED:
        return

    if isinstance(level, str):
        level = getattr(logging, level.strip().upper(), None)
    if not isinstance(level, int):
        level = logging.INFO

    logger = logging.getLogger(_PKG_LOGGER_NAME)
    for handler in list(logger.handlers):
        if isinstance(handler, logging.NullHandler):
            logger.removeHandler(handler)

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(_FORMAT))
    logger.addHandler(handler)
    logger.setLevel(level)

    _CONFIGURED = True


def get_logger(name: str) -> logging.Logger:
    pkg_logger = logging.getLogger(_PKG_LOGGER_NAME)
    if not _CONFIGURED and not pkg_logger.handlers:
        pkg_logger.addHandler(logging.NullHandler())
    return logging.getLogger(name)
