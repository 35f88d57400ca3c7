import logging
import sys
from typing import Union

from .config import LOG_LEVEL

# Third-party loggers that are noisy at INFO.
_QUIET_LOGGERS = ("sqlalchemy.engine", "multipart")


def setup_logging(level: Union[int, str, None] = None) -> None:
    """Configure root logging with a single stderr handler.

    Call this once, early, from an entry point script. The app factory does
    not call it so that embedding code (and tests) keep their own setup.
    """
    if level is None:
        level = LOG_LEVEL

    root = logging.getLogger()
    root.setLevel(level)

    # Remove any pre-existing handlers to avoid duplicates.
    for handler in list(root.handlers):
        root.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        logging.Formatter(
            fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )
    root.addHandler(handler)

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    logging.captureWarnings(True)
