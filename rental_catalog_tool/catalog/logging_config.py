"""
Logging configuration for the catalogue.

Verbosity levels map to the -v flag count used by every command:
0 = WARNING, 1 = INFO, 2 = DEBUG, 3+ = DEBUG including boto3/botocore.
"""

import logging
import sys

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

_LIBRARY_LOGGERS = ("boto3", "botocore", "urllib3")


def setup_logging(verbosity: int = 0) -> None:
    """
    Configure root logging for the given verbosity.

    Args:
        verbosity: Number of -v flags passed on the command line
    """
    if verbosity <= 0:
        level = logging.WARNING
    elif verbosity == 1:
        level = logging.INFO
    else:
        level = logging.DEBUG

    logging.basicConfig(level=level, format=LOG_FORMAT, stream=sys.stderr, force=True)

    # AWS SDK loggers are very chatty; only let them through at -vvv
    library_level = logging.DEBUG if verbosity >= 3 else logging.WARNING
    for name in _LIBRARY_LOGGERS:
        logging.getLogger(name).setLevel(library_level)


def get_logger(name: str) -> logging.Logger:
    """Return a module logger."""
    return logging.getLogger(name)
