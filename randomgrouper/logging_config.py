import logging
import sys


def setup_logging(level: int = logging.INFO) -> logging.Logger:
    """Send the package's log records to stdout; safe to call more than once."""
    logger = logging.getLogger("randomgrouper")
    logger.setLevel(level)
    logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s", datefmt="%H:%M:%S"))
    logger.addHandler(handler)
    return logger
