import logging
import sys
from typing import Union

_CONFIGURED = False


def setup_logging(level: Union[int, str] = logging.INFO):
    """
    Configure logging idempotently.
    Safe to call multiple times; later calls only adjust the level.
    """
    global _CONFIGURED
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    root = logging.getLogger()
    if _CONFIGURED:
        root.setLevel(level)
        return

    if root.handlers:
        # Someone else (pytest, an embedding app) owns the handlers
        root.setLevel(level)
        _CONFIGURED = True
        return

    logging.basicConfig(
        level=level,
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stderr,
    )
    _CONFIGURED = True
