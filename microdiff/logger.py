import logging
import sys


def setup_logger(name="microdiff", level=logging.INFO):
    """
    Attach a single stdout handler to `name` and return the logger.
    Safe to call repeatedly; the library itself never calls it.
    """
    logger = logging.getLogger(name)
    logger.setLevel(level)

    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        formatter = logging.Formatter(
            "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    return logger
