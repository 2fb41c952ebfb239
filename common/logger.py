import logging
import os
import sys
from typing import Optional

ROOT_LOGGER = "hyrox"
LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def _root_logger() -> logging.Logger:
    root = logging.getLogger(ROOT_LOGGER)
    if root.handlers:
        return root
    root.setLevel(os.environ.get("HYROX_LOG_LEVEL", "INFO").upper())

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(handler)
    root.propagate = False
    return root


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """
    Return a logger nested under the ``hyrox`` namespace so every module shares
    the single stdout handler configured on the root project logger.
    """
    root = _root_logger()
    if not name or name == ROOT_LOGGER:
        return root
    return root.getChild(name)
