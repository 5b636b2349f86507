"""
Logging configuration for tile-atlas.
"""

import logging
import logging.handlers
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..settings import AppSettings

CONSOLE_FORMAT = "%(asctime)s : %(levelname)-8s : %(message)s"

LEVEL_COLORS = {
    logging.DEBUG: "36",
    logging.INFO: "32",
    logging.WARNING: "33",
    logging.ERROR: "31",
    logging.CRITICAL: "35",
}


class ColoredFormatter(logging.Formatter):
    """Console formatter wrapping the level field in an ANSI color."""

    def format(self, record: logging.LogRecord) -> str:
        code = LEVEL_COLORS.get(record.levelno)
        if code is None:
            return super().format(record)

        # Pad before coloring so the escape codes don't break column alignment
        colored = logging.makeLogRecord(record.__dict__)
        colored.levelname = f"\033[{code}m{record.levelname:<8}\033[0m"
        return super().format(colored)


class CSVFormatter(logging.Formatter):
    """Semicolon-separated records for the log file.

    Columns: time, level, ms since startup, logger, line, message. A
    traceback, when present, is appended to the message field.
    """

    def format(self, record: logging.LogRecord) -> str:
        message = record.getMessage()
        if record.exc_info:
            message = f"{message}\n{self.formatException(record.exc_info)}"

        fields = (
            self.formatTime(record, self.datefmt),
            record.levelname,
            f"{int(record.relativeCreated)} ms",
            record.name,
            str(record.lineno),
            message,
        )
        return ";".join(self.quote(value) for value in fields)

    @staticmethod
    def quote(value: str) -> str:
        return '"' + value.replace('"', '""') + '"'


def setup_logging(settings: "AppSettings", verbose: bool = False) -> None:
    """
    Setup application logging with console and file handlers.

    Args:
        settings: AppSettings instance for all logging configuration
        verbose: Force DEBUG on the console regardless of settings
    """
    console_enabled = settings.console_logging
    console_level = "DEBUG" if verbose else settings.console_log_level
    use_colors = settings.console_use_colors
    file_enabled = settings.file_logging
    log_file = settings.log_file_path

    # Root captures all levels, handlers filter
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)

    project_logger = logging.getLogger("tile_atlas")
    project_logger.setLevel(logging.DEBUG)

    root_logger.handlers.clear()

    if console_enabled:
        if use_colors:
            console_formatter: logging.Formatter = ColoredFormatter(
                fmt=CONSOLE_FORMAT, datefmt="%H:%M:%S"
            )
        else:
            console_formatter = logging.Formatter(fmt=CONSOLE_FORMAT, datefmt="%H:%M:%S")

        console_handler = logging.StreamHandler()
        console_handler.setLevel(getattr(logging, console_level.upper(), logging.INFO))
        console_handler.setFormatter(console_formatter)
        root_logger.addHandler(console_handler)

    log_path = None
    if file_enabled:
        try:
            log_path = Path(log_file)
            log_path.parent.mkdir(parents=True, exist_ok=True)

            file_handler = logging.handlers.RotatingFileHandler(
                log_file,
                maxBytes=10 * 1024 * 1024,  # 10MB
                backupCount=5,
                encoding="utf-8",
            )
            file_handler.setLevel(logging.DEBUG)
            file_handler.setFormatter(CSVFormatter(datefmt="%Y-%m-%d %H:%M:%S"))
            root_logger.addHandler(file_handler)
        except OSError as e:
            # Keep going with console logging only
            root_logger.warning(f"Could not setup file logging: {e}")
            log_path = None

    # Suppress DEBUG logs from noisy libraries
    logging.getLogger("PIL").setLevel(logging.INFO)
    logging.getLogger("PIL.PngImagePlugin").setLevel(logging.INFO)

    logger = logging.getLogger(__name__)
    logger.info("Logging initialized")
    if console_enabled:
        logger.debug(f"Console logging: {console_level} (colors: {use_colors})")
    if log_path:
        logger.debug(f"File logging: DEBUG at {log_path.absolute()}")
