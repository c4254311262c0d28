"""Process-wide logging for the API and the media cleanup worker."""

import logging
import sys

from app.core.config import get_settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

# SDK request logging floods INFO during batch deletes.
_QUIET_UNLESS_DEBUG = ("botocore", "boto3", "s3transfer", "urllib3")


def setup_logging() -> None:
    """Log to stdout at INFO, or DEBUG when DEBUG=true."""
    debug = get_settings().debug
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format=LOG_FORMAT,
        stream=sys.stdout,
    )
    if debug:
        return
    for name in _QUIET_UNLESS_DEBUG:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
