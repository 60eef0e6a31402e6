import logging
import sys
from typing import IO, Optional


logger = logging.getLogger("npminstall")


def configure_logging(debug: bool, stream: Optional[IO[str]] = None):
    """
    Configures the npminstall logger for command line use.

    Build output is plain text: the messages already carry their own indentation.
    """
    log_level = logging.DEBUG if debug else logging.INFO
    logger.setLevel(log_level)

    if logger.hasHandlers():
        return

    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
