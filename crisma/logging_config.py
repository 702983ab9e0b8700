import logging
import sys
from typing import Union


def setup_logging(level: Union[int, str] = logging.INFO) -> logging.Logger:
    logger = logging.getLogger("crisma")
    if logger.handlers:
        return logger  # already configured
    logger.setLevel(level)
    handler = logging.StreamHandler(sys.stdout)
    fmt = logging.Formatter("[%(asctime)s] %(levelname)s %(name)s: %(message)s")
    handler.setFormatter(fmt)
    logger.addHandler(handler)
    # urllib3 logs every connection at DEBUG; keep it quiet
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    return logger
