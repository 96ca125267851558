import logging
import sys
from logging import StreamHandler

from invitely.config.settings import settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging() -> None:
    logging.basicConfig(
        level=logging.DEBUG if settings.debug else logging.INFO,
        format=LOG_FORMAT,
        handlers=[StreamHandler(sys.stdout)],
    )
    # httpx logs every request line at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)
