"""
Logging configuration.

stdout carries protocol responses in stdio mode, so no handler may ever be
attached to it there. TCP mode logs to stderr as well as the optional file.
"""

import logging
import sys
from typing import List

from student_records.core.config import LoggingConfig

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(config: LoggingConfig, *, stdio_mode: bool) -> None:
    handlers: List[logging.Handler] = []
    if config.file:
        handlers.append(logging.FileHandler(config.file, mode="a", encoding="utf-8"))
    if not stdio_mode:
        handlers.append(logging.StreamHandler(sys.stderr))

    if not handlers:
        # stdio without a log file: nothing may be written anywhere
        logging.basicConfig(handlers=[logging.NullHandler()], force=True)
        logging.disable(logging.CRITICAL)
        return

    logging.disable(logging.NOTSET)
    logging.basicConfig(
        level=getattr(logging, config.level.upper(), logging.INFO),
        format=LOG_FORMAT,
        handlers=handlers,
        force=True,
    )
