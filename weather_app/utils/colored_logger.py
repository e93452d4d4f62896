"""
Colored logging configuration for terminal output.
Provides colored output for the different components of the distributed app.
"""

import logging
import sys
from typing import Optional


# ANSI color codes
class Colors:
    """ANSI color codes for terminal output."""
    RESET = '\033[0m'
    BOLD = '\033[1m'

    RED = '\033[31m'
    GREEN = '\033[32m'
    YELLOW = '\033[33m'
    BLUE = '\033[34m'
    MAGENTA = '\033[35m'
    CYAN = '\033[36m'
    WHITE = '\033[37m'

    BRIGHT_BLACK = '\033[90m'
    BRIGHT_RED = '\033[91m'
    BRIGHT_BLUE = '\033[94m'


# Component-specific colors
COMPONENT_COLORS = {
    'apiservice': Colors.GREEN,
    'webfrontend': Colors.BRIGHT_BLUE,
    'telemetry': Colors.CYAN,
    'health': Colors.YELLOW,
    'apphost': Colors.MAGENTA,
    'default': Colors.WHITE
}


class ColoredFormatter(logging.Formatter):
    """Custom formatter that adds colors to log output."""

    LEVEL_COLORS = {
        'DEBUG': Colors.BRIGHT_BLACK,
        'INFO': Colors.WHITE,
        'WARNING': Colors.YELLOW,
        'ERROR': Colors.RED,
        'CRITICAL': Colors.BRIGHT_RED + Colors.BOLD,
    }

    def __init__(self, fmt: Optional[str] = None, datefmt: Optional[str] = None):
        """
        Initialize colored formatter.

        Args:
            fmt: Log format string
            datefmt: Date format string
        """
        if fmt is None:
            fmt = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        if datefmt is None:
            datefmt = '%Y-%m-%d %H:%M:%S'
        super().__init__(fmt, datefmt)

    def format(self, record: logging.LogRecord) -> str:
        """
        Format log record with colors.

        Warnings and errors keep their level color; other records use the
        component color when one was attached.
        """
        level_color = self.LEVEL_COLORS.get(record.levelname, Colors.WHITE)

        component_color = None
        if hasattr(record, 'component') and record.levelno < logging.WARNING:
            component_color = COMPONENT_COLORS.get(record.component, COMPONENT_COLORS['default'])

        formatted = super().format(record)
        return f"{component_color or level_color}{formatted}{Colors.RESET}"


class ComponentLogger(logging.LoggerAdapter):
    """Logger adapter tagging records with the component that emitted them."""

    def __init__(self, logger: logging.Logger, component: str):
        super().__init__(logger, {'component': component})
        self.component = component

    def process(self, msg, kwargs):
        extra = dict(kwargs.get('extra') or {})
        extra['component'] = self.component
        kwargs['extra'] = extra
        return msg, kwargs


def setup_colored_logging(level: int = logging.INFO) -> None:
    """
    Setup colored logging for the application.

    Args:
        level: Logging level (default: INFO)
    """
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(ColoredFormatter())

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    # Remove existing handlers to avoid duplicates
    root_logger.handlers.clear()
    root_logger.addHandler(console_handler)


def set_logging_level(level: int) -> None:
    """
    Change the level of the root logger and its console handlers.

    Args:
        level: Logging level, e.g. from configuration
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    for handler in root_logger.handlers:
        if isinstance(handler.formatter, ColoredFormatter):
            handler.setLevel(level)


def get_component_logger(name: str, component: str) -> ComponentLogger:
    """
    Get a component logger with colored output.

    Args:
        name: Logger name (usually __name__)
        component: Component tag (apiservice, webfrontend, telemetry, health, apphost)

    Returns:
        ComponentLogger instance
    """
    return ComponentLogger(logging.getLogger(name), component)
