import logging
import os
from logging.handlers import RotatingFileHandler

from app.platform.config import settings

# Logs directory is relative to the working directory unless LOG_DIR is absolute
log_dir = os.path.join(os.getcwd(), settings.LOG_DIR)
log_file_path = os.path.join(log_dir, settings.LOG_FILE)

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def get_logger(name: str) -> logging.Logger:
    """
    Creates a logger instance that writes to console AND a rotating file.
    Handlers are attached only once per logger name.
    """
    logger = logging.getLogger(name)

    if logger.handlers:
        return logger

    level = logging.getLevelName(settings.LOG_LEVEL.upper())
    if not isinstance(level, int):
        level = logging.INFO
    logger.setLevel(level)
    logger.propagate = False

    formatter = logging.Formatter(LOG_FORMAT)

    os.makedirs(log_dir, exist_ok=True)
    file_handler = RotatingFileHandler(log_file_path, maxBytes=10_000_000, backupCount=5)
    file_handler.setFormatter(formatter)
    file_handler.setLevel(level)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    console_handler.setLevel(level)

    logger.addHandler(file_handler)
    logger.addHandler(console_handler)

    return logger
