"""
Logging configuration for Gear Forge.

Only the 'gearforge' logger tree is configured, so an embedding application
keeps control of its own root logger. Engine modules log through
logging.getLogger(__name__) and inherit these handlers.
"""

import logging
import sys
from typing import Optional
from colorama import Fore, Back, Style, init

init(autoreset=True)

LOGGER_NAME = 'gearforge'
DEFAULT_FORMAT = '%(asctime)s - %(levelname)s - %(name)s - %(message)s'


class ColoredFormatter(logging.Formatter):
    """
    Formatter that colours the level name.

    Upgrade and equip transitions log at DEBUG (cyan); rejected operations
    log at INFO (green) so a blacksmith session reads as a trace.
    """

    COLORS = {
        'DEBUG': Fore.CYAN,
        'INFO': Fore.GREEN,
        'WARNING': Fore.YELLOW,
        'ERROR': Fore.RED,
        'CRITICAL': Fore.RED + Back.WHITE + Style.BRIGHT,
    }

    ICONS = {
        'DEBUG': '🔍',
        'INFO': 'ℹ️ ',
        'WARNING': '⚠️ ',
        'ERROR': '❌',
        'CRITICAL': '🚨',
    }

    def format(self, record):
        levelname = record.levelname
        color = self.COLORS.get(levelname, '')
        record.levelname = f"{color}{self.ICONS.get(levelname, '')} {levelname}{Style.RESET_ALL}"
        try:
            return super().format(record)
        finally:
            record.levelname = levelname


def setup_logging(
    level: str = 'INFO',
    log_file: Optional[str] = None,
    format_string: Optional[str] = None,
    use_colors: bool = True
) -> logging.Logger:
    """
    Attach console (stderr) and optional file handlers to the gearforge logger.

    Calling it again replaces the handlers from the previous call. The
    console goes to stderr so `--json` output on stdout stays parseable.

    Args:
        level: Logging level name; unknown names mean INFO
        log_file: Optional file path; file output is never coloured
        format_string: Optional custom format string
        use_colors: Colour the console level names

    Returns:
        The configured 'gearforge' logger
    """
    format_string = format_string or DEFAULT_FORMAT
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(numeric_level)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(numeric_level)
    formatter_class = ColoredFormatter if use_colors else logging.Formatter
    console_handler.setFormatter(formatter_class(format_string))
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, encoding='utf-8')
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(format_string))
        logger.addHandler(file_handler)

    return logger


__all__ = ['ColoredFormatter', 'setup_logging', 'LOGGER_NAME']
