"""Logging helpers for applications embedding pymass"""
import logging

DEFAULT_FORMAT = "%(asctime)s | %(name)s | %(levelname)s | %(message)s"


def configure_logging(level: int = logging.INFO, fmt: str = DEFAULT_FORMAT) -> None:
    """Attach a stream handler to the root logger, or only set its level if one exists"""
    if not logging.getLogger().handlers:
        logging.basicConfig(level=level, format=fmt)
    else:
        logging.getLogger().setLevel(level)


def get_logger(name: str, level: int = None) -> logging.Logger:
    """Return the logger `name`, optionally forcing its level"""
    logger = logging.getLogger(name)
    if level is not None:
        logger.setLevel(level)
    return logger
