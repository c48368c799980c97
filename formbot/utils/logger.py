import logging
from typing import Optional

LOGGER_NAME = "formbot"


def setup_logger(log_file: Optional[str] = "formbot.log", level: int = logging.INFO) -> logging.Logger:
    logger = logging.getLogger(LOGGER_NAME)
    if not logger.handlers:
        logger.setLevel(level)
        formatter = logging.Formatter("%(asctime)s %(levelname)s: %(message)s")

        if log_file:
            fh = logging.FileHandler(log_file, encoding="utf-8")
            fh.setFormatter(formatter)
            logger.addHandler(fh)

        ch = logging.StreamHandler()
        ch.setFormatter(formatter)
        logger.addHandler(ch)
    return logger


def get_logger() -> logging.Logger:
    """The shared formbot logger, configured or not."""
    return logging.getLogger(LOGGER_NAME)
