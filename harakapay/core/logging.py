import logging

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str = "INFO") -> logging.Logger:
    """Attach one stream handler to the ``harakapay`` logger tree."""
    logger = logging.getLogger("harakapay")
    logger.setLevel(level)
    if not any(getattr(h, "_harakapay", False) for h in logger.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._harakapay = True
        logger.addHandler(handler)
    return logger
