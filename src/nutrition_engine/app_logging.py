"""Logging configuration helpers."""

import logging

LOGGER_NAME = "nutrition_engine"


def configure_logging(debug: bool = False) -> None:
    """Attach one stream handler to the package logger.

    Repeated calls only adjust the level, so debug resolution traces can be
    switched on without duplicating output.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(logging.DEBUG if debug else logging.INFO)
    if logger.handlers:
        return
    handler = logging.StreamHandler()
    handler.setFormatter(
        logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
    )
    logger.addHandler(handler)
    logger.propagate = False
