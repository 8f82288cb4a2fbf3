import logging
import os
from typing import Optional, TextIO

from tqdm import tqdm

LOGGER_NAME = "docs_i18n"

FILE_FORMAT = '%(asctime)s - %(levelname)s - %(message)s'
CONSOLE_FORMAT = '%(levelname)s - %(message)s'


class TqdmLoggingHandler(logging.StreamHandler):
    """
    Stream handler that prints through ``tqdm.write``.

    The extraction and rendering commands show one progress bar per locale;
    writing log lines through tqdm keeps the bar on the last line of the terminal.
    """

    def emit(self, record: logging.LogRecord) -> None:
        try:
            tqdm.write(self.format(record), file=self.stream)
            self.flush()
        except RecursionError:
            raise
        except Exception:
            self.handleError(record)


def setup_logger(
        log_level_str: str,
        log_file_path: Optional[str],
        log_to_console: bool,
        console_stream: Optional[TextIO] = None
) -> logging.Logger:
    """
    Set up the package logger shared by all command-line scripts.

    Every module logs through a child of the ``docs_i18n`` logger, so
    configuring it here is enough for the whole toolchain. Calling it again
    replaces the previous handlers.

    Args:
        log_level_str: The logging level as a string (e.g., 'INFO', 'DEBUG').
        log_file_path: The path to the log file, or None/empty to skip the file log.
        log_to_console: Whether to log through the tqdm-aware console handler.
        console_stream: Stream for console output; stderr when omitted.

    Returns:
        The configured logger instance.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(getattr(logging, log_level_str.upper(), logging.INFO))

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    # Keep build output free of duplicates from a root handler set up by a host tool.
    logger.propagate = False

    if log_file_path:
        log_dir = os.path.dirname(log_file_path)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
        file_handler = logging.FileHandler(log_file_path, encoding='utf-8')
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT))
        logger.addHandler(file_handler)

    if log_to_console:
        console_handler = TqdmLoggingHandler(console_stream)
        console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
        logger.addHandler(console_handler)

    return logger
