"""Logging configuration helpers."""

import logging


def configure_logging(level: int = logging.INFO) -> None:
    """Attach one stream handler to the "neurostack" logger.

    Called by the API factory; safe to call again from scripts or tests that
    build several apps, since an existing handler is left in place.
    """
    logger = logging.getLogger("neurostack")
    logger.setLevel(level)
    if logger.handlers:
        return
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter("%(levelname)s: %(name)s: %(message)s"))
    logger.addHandler(handler)
    logger.propagate = False
