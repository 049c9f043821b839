"""
Logger setup used across the assessment engine.

Every module asks for its own named logger; the first call for a name
installs a single stream handler so repeated imports (uvicorn reloads,
test collection) never stack duplicate handlers.
"""
import logging
import os

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def get_logger(name: str = "assessment") -> logging.Logger:
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
        logger.setLevel(os.environ.get("ASSESSMENT_LOG_LEVEL", "INFO").upper())
    return logger
