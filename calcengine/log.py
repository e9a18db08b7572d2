"""Logging setup for the calcengine package."""

import logging

LOGGER_NAME = "calcengine"
_HANDLER_NAME = "calcengine-stream"
_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level="WARNING"):
    """Attach one stream handler to the package logger and set its level.

    Safe to call on every Streamlit rerun: the handler is only added once.
    """
    numeric = getattr(logging, str(level).upper(), None)
    if not isinstance(numeric, int):
        raise ValueError(f"Unknown log level: {level!r}")

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(numeric)
    if not any(h.get_name() == _HANDLER_NAME for h in logger.handlers):
        handler = logging.StreamHandler()
        handler.set_name(_HANDLER_NAME)
        handler.setFormatter(logging.Formatter(_FORMAT))
        logger.addHandler(handler)
    return logger
