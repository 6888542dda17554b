"""
Shared logger for the stitcher.

Every module logs through ``logger`` so one call can switch the whole
tool to debug output. Keeping it here also avoids circular imports
between the harvest and rendering packages.
"""

import logging

LOGGER_NAME = "den_stitcher"
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(message)s"


def setup_logger(
        name: str = LOGGER_NAME,
        level: int = logging.INFO,
        formatter: logging.Formatter | None = None,
        handler: logging.Handler | None = None,
) -> logging.Logger:
    """
    Return the named logger, attaching a handler on first use.

    Repeated calls return the same logger without stacking handlers.
    The logger does not propagate so messages are not printed twice
    when the root logger is configured too.

    Args:
        name: Logger name.
        level: Logging level (e.g., logging.INFO, logging.DEBUG).
        formatter: Optional custom formatter.
        handler: Optional custom handler, stderr by default.

    Returns:
        The configured logger.

    """
    logger_instance = logging.getLogger(name)
    logger_instance.setLevel(level)
    if not logger_instance.handlers:
        handler = handler or logging.StreamHandler()
        handler.setFormatter(formatter or logging.Formatter(LOG_FORMAT))
        logger_instance.addHandler(handler)
        logger_instance.propagate = False
    return logger_instance


def set_verbose(enabled: bool) -> None:  # noqa: FBT001
    """Switch the shared logger between debug and info output."""
    logger.setLevel(logging.DEBUG if enabled else logging.INFO)


logger = setup_logger()
