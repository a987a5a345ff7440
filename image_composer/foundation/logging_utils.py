"""Operational logging for compose runs."""

from __future__ import annotations

import logging
import os

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(message)s"


def setup_operational_logger(log_dir: str | None, compose_id: str) -> tuple[logging.Logger, str | None]:
    """
    Configure the `image_composer` logger for one compose run.

    INFO and above go to stderr. When `log_dir` is given, everything down to DEBUG
    is also written to `<log_dir>/<compose_id>.log` (UTF-8).
    """

    logger = logging.getLogger("image_composer")
    logger.setLevel(logging.DEBUG)
    logger.handlers.clear()

    formatter = logging.Formatter(LOG_FORMAT)

    stream_handler = logging.StreamHandler()
    stream_handler.setLevel(logging.INFO)
    stream_handler.setFormatter(formatter)
    logger.addHandler(stream_handler)

    log_file: str | None = None
    if log_dir:
        os.makedirs(log_dir, exist_ok=True)
        log_file = os.path.join(log_dir, f"{compose_id}.log")
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logger.propagate = False

    # The kernel logs under its own package name; route it to the same handlers.
    kernel_logger = logging.getLogger("manifestkit")
    kernel_logger.setLevel(logging.DEBUG)
    kernel_logger.handlers.clear()
    for handler in logger.handlers:
        kernel_logger.addHandler(handler)
    kernel_logger.propagate = False

    logger.info("Operational logging initialized for compose %s", compose_id)
    if log_file:
        logger.debug("Operational log file: %s", log_file)

    return logger, log_file
