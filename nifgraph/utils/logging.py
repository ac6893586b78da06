import logging
import re
import sys
from pathlib import Path
from typing import TextIO

logger = logging.getLogger(__name__)

_ANSI_ESCAPE = re.compile(r"\033\[[0-9;]*m")

RESET = "\033[0m"
BOLD = "\033[1m"

LEVEL_COLORS = {
    "DEBUG": "\033[37m",  # White
    "INFO": "\033[32m",  # Green
    "WARNING": "\033[33m",  # Yellow
    "ERROR": "\033[31m",  # Red
    "CRITICAL": "\033[1;31m",  # Bold Red
}

# Icon and color per logging module, matched on the logger name prefix
MODULE_THEMES = {
    "nifgraph.loaders": ("📂", "\033[1;36m"),  # Bold Cyan
    "nifgraph.triples.generator": ("🔗", "\033[1;32m"),  # Bold Green
    "nifgraph.triples.document": ("📄", "\033[1;34m"),  # Bold Blue
    "nifgraph.triples.serializer": ("📝", "\033[1;35m"),  # Bold Magenta
    "nifgraph.triples.validator": ("✅", "\033[1;33m"),  # Bold Yellow
    "nifgraph.pipeline": ("⚙️ ", "\033[1;34m"),  # Bold Blue
    "nifgraph.utils": ("🛠️ ", "\033[1;90m"),  # Dark Gray
    "root": ("🚀", "\033[1;32m"),  # CLI messages
}
FALLBACK_THEME = ("•", BOLD)


def strip_ansi_codes(text: str) -> str:
    """Remove ANSI escape codes such as [31m or [1;33m from text."""
    return _ANSI_ESCAPE.sub("", text)


def theme_for(logger_name: str) -> tuple[str, str]:
    """Most specific (icon, color) theme for a logger name."""
    matches = [name for name in MODULE_THEMES if logger_name.startswith(name)]
    if not matches:
        return FALLBACK_THEME
    return MODULE_THEMES[max(matches, key=len)]


class PlainFormatter(logging.Formatter):
    """
    Formats records as ``time | LEVEL | module | message`` without colors.

    Used for log files and for console streams that are not terminals.
    """

    def columns(self, record: logging.LogRecord) -> tuple[str, str, str]:
        short_name = record.name.split(".")[-1]
        return f"{record.levelname:8}", f"{short_name:18}", strip_ansi_codes(record.getMessage())

    def format(self, record):
        level, module, message = self.columns(record)
        return f"{self.formatTime(record, self.datefmt)} | {level} | {module} | {message}"


class ColoredFormatter(PlainFormatter):
    """Terminal formatter: colored level, themed module icon, highlighted warnings."""

    def columns(self, record):
        level, module, message = super().columns(record)
        icon, module_color = theme_for(record.name)
        level_color = LEVEL_COLORS.get(record.levelname, RESET)

        if record.levelno >= logging.WARNING:
            message = f"{level_color}{message}{RESET}"
        return (
            f"{level_color}{level}{RESET}",
            f"{module_color}{icon} {module}{RESET}",
            message,
        )


# Root-logger file handler for the current run, if any
_file_handler: logging.FileHandler | None = None


def setup_colored_logging(
    level=logging.INFO,
    log_file: str | Path | None = None,
    stream: TextIO | None = None,
):
    """
    Replace the root handlers with a single console handler.

    Console output goes to stderr so rendered documents on stdout stay clean,
    and colors are only used when the stream is a terminal.

    Args:
        level: Logging level (default: INFO)
        log_file: Optional path to log file for persistent logging
        stream: Console stream (default: sys.stderr)
    """
    stream = stream or sys.stderr
    is_terminal = hasattr(stream, "isatty") and stream.isatty()
    formatter_class = ColoredFormatter if is_terminal else PlainFormatter

    console_handler = logging.StreamHandler(stream)
    console_handler.setFormatter(formatter_class(datefmt="%H:%M:%S"))

    root_logger = logging.getLogger()
    root_logger.handlers = [console_handler]
    root_logger.setLevel(level)

    if log_file:
        add_file_handler(log_file, level)

    for noisy in ("rdflib", "pyshacl"):
        logging.getLogger(noisy).setLevel(logging.WARNING)


def add_file_handler(log_file: str | Path, level=logging.DEBUG) -> logging.FileHandler:
    """
    Attach a plain-text file handler to the root logger.

    Any previously attached handler is closed first, so one run writes one file.

    Args:
        log_file: Path to the log file (parent directories are created)
        level: Logging level for the file (default: DEBUG)

    Returns:
        The created FileHandler
    """
    global _file_handler

    remove_file_handler()

    log_path = Path(log_file)
    log_path.parent.mkdir(parents=True, exist_ok=True)

    _file_handler = logging.FileHandler(str(log_path), mode="w", encoding="utf-8")
    _file_handler.setLevel(level)
    _file_handler.setFormatter(PlainFormatter(datefmt="%Y-%m-%d %H:%M:%S"))

    logging.getLogger().addHandler(_file_handler)
    logger.info("File logging enabled: %s", log_path)

    return _file_handler


def remove_file_handler() -> None:
    """Detach and close the run's file handler, if one is attached."""
    global _file_handler

    if _file_handler is not None:
        logging.getLogger().removeHandler(_file_handler)
        _file_handler.close()
        _file_handler = None


def get_file_handler() -> logging.FileHandler | None:
    return _file_handler
