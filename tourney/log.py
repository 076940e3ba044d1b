"""
Logging of the tournament application.

Every message goes to a rotating log file and to the console. The level comes from TOURNEY_LOG_LEVEL
(INFO by default), set it to DEBUG to see each pairing of a generated draw.
"""

import logging
from logging.handlers import RotatingFileHandler

from tourney.values import LOG_FILE, LOG_LEVEL

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_FILE_MAX_BYTES = 5 * 1024 * 1024
LOG_FILE_BACKUP_COUNT = 2


def get_log_level(level_name: str) -> int:
    """Level from its name, case insensitive. Unknown names fall back to INFO"""
    level = logging.getLevelName(level_name.strip().upper())
    return level if isinstance(level, int) else logging.INFO


def create_logger(name: str, log_file: str, level: int) -> logging.Logger:
    """
    Attach the file and console handlers to the named logger, once.
    The file is only opened on the first message.
    """
    new_logger = logging.getLogger(name)
    new_logger.setLevel(level)
    if len(new_logger.handlers) > 0:
        return new_logger

    formatter = logging.Formatter(LOG_FORMAT)
    file_handler = RotatingFileHandler(
        log_file, mode="a", maxBytes=LOG_FILE_MAX_BYTES, backupCount=LOG_FILE_BACKUP_COUNT, delay=True
    )
    console_handler = logging.StreamHandler()
    for handler in (file_handler, console_handler):
        handler.setLevel(level)
        handler.setFormatter(formatter)
        new_logger.addHandler(handler)
    return new_logger


logger = create_logger("tourney", LOG_FILE, get_log_level(LOG_LEVEL))


def print_debug_log(message: str) -> None:
    """ Print the detail only wanted while investigating a draw """
    logger.debug(message)


def print_log(message: str) -> None:
    """ Print the message to the log """
    logger.info(message)


def print_error_log(message: str) -> None:
    """ Print the error to the log """
    logger.error(message)


def print_warning_log(message: str) -> None:
    """ Print the warning to the log """
    logger.warning(message)
