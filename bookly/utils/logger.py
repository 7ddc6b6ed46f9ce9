"""Simple logger utility."""
import logging
import os

logger = logging.getLogger("bookly")
if not logger.handlers:
    h = logging.StreamHandler()
    fmt = logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s")
    h.setFormatter(fmt)
    logger.addHandler(h)
    logger.setLevel(os.getenv("LOG_LEVEL", "INFO").upper())
    logger.propagate = False

def get_logger(name: str = None) -> logging.Logger:
    if not name:
        return logger
    if name.startswith("bookly."):
        name = name[len("bookly."):]
    return logger.getChild(name)
