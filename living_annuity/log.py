"""Process-wide logging setup used by the application factory."""

from __future__ import annotations

import logging
import sys
from typing import Union

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: Union[int, str] = logging.INFO) -> None:
    """Attach a stdout handler to the root logger once; later calls only adjust the level."""
    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(level=level, format=LOG_FORMAT, handlers=[logging.StreamHandler(sys.stdout)])
    root.setLevel(level)
    logging.getLogger(__name__).debug("logging configured at %s", logging.getLevelName(root.level))
