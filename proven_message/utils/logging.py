import logging
import re
import sys
from pathlib import Path


def strip_ansi_codes(text: str) -> str:
    """Remove ANSI escape codes from text."""
    ansi_escape = re.compile(r"\033\[[0-9;]*m")
    return ansi_escape.sub("", text)


class ColoredFormatter(logging.Formatter):
    """Console formatter coloring by level and by message-building stage."""

    RESET = "\033[0m"
    BOLD = "\033[1m"

    COLORS = {
        "DEBUG": "\033[37m",  # White
        "INFO": "\033[32m",  # Green
        "WARNING": "\033[33m",  # Yellow
        "ERROR": "\033[31m",  # Red
        "CRITICAL": "\033[1;31m",  # Bold Red
    }

    # Build stages, most specific first
    STAGE_THEMES = {
        "proven_message.triples.normalizer": ("~", "\033[1;36m"),  # Bold Cyan
        "proven_message.triples.rules": ("+", "\033[1;33m"),  # Bold Yellow
        "proven_message.message.projector": (">", "\033[1;32m"),  # Bold Green
        "proven_message.message.codec": ("#", "\033[1;35m"),  # Bold Magenta
        "proven_message.builder": ("*", "\033[1;34m"),  # Bold Blue
        "proven_message.model": ("@", "\033[1;38;5;202m"),  # Bold Orange
        "proven_message.main": ("$", "\033[1;32m"),  # Bold Green
        "__main__": ("$", "\033[1;32m"),
        "root": ("-", "\033[1;90m"),  # Dark Gray
    }

    def format(self, record):
        icon, stage_color = "", ""
        for name, theme in self.STAGE_THEMES.items():
            if record.name.startswith(name):
                icon, stage_color = theme
                break

        if not icon:
            icon = "."
            stage_color = self.BOLD

        level_color = self.COLORS.get(record.levelname, self.RESET)
        level_name = f"{level_color}{record.levelname:8}{self.RESET}"

        short_name = record.name.split(".")[-1]
        stage_display = f"{stage_color}{icon} {short_name:12}{self.RESET}"

        message = record.getMessage()
        if record.levelno >= logging.WARNING:
            message = f"{level_color}{message}{self.RESET}"

        timestamp = self.formatTime(record, self.datefmt)
        return f"{timestamp} | {level_name} | {stage_display} | {message}"


class PlainFormatter(logging.Formatter):
    """Plain text formatter for file logging (no ANSI codes)."""

    def format(self, record):
        timestamp = self.formatTime(record, self.datefmt)
        short_name = record.name.split(".")[-1]
        message = strip_ansi_codes(record.getMessage())
        return f"{timestamp} | {record.levelname:8} | {short_name:12} | {message}"


_file_handler: logging.FileHandler | None = None


def setup_colored_logging(level=logging.INFO, log_file: str | Path | None = None):
    """
    Set up global logging with the ColoredFormatter.

    Console output goes to stderr so that stdout carries only CLI results.

    Args:
        level: Logging level (default: INFO)
        log_file: Optional path to a plain-text log file
    """
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(ColoredFormatter(datefmt="%H:%M:%S"))

    root_logger = logging.getLogger()
    root_logger.handlers = []
    root_logger.addHandler(console_handler)
    root_logger.setLevel(level)

    if log_file:
        add_file_handler(log_file, level)

    # pyshacl and rdflib log every shape and parse step at INFO
    logging.getLogger("pyshacl").setLevel(logging.WARNING)
    logging.getLogger("rdflib").setLevel(logging.WARNING)


def add_file_handler(log_file: str | Path, level=logging.DEBUG) -> logging.FileHandler:
    """
    Add a file handler to the root logger.

    Args:
        log_file: Path to the log file
        level: Logging level for the file

    Returns:
        The created FileHandler
    """
    global _file_handler

    if _file_handler:
        remove_file_handler()

    log_path = Path(log_file)
    log_path.parent.mkdir(parents=True, exist_ok=True)

    _file_handler = logging.FileHandler(str(log_path), mode="w", encoding="utf-8")
    _file_handler.setLevel(level)
    _file_handler.setFormatter(PlainFormatter(datefmt="%Y-%m-%d %H:%M:%S"))

    logging.getLogger().addHandler(_file_handler)
    logging.info("File logging enabled: %s", log_path)

    return _file_handler


def remove_file_handler() -> None:
    """Remove the file handler from the root logger."""
    global _file_handler

    if _file_handler:
        logging.getLogger().removeHandler(_file_handler)
        _file_handler.close()
        _file_handler = None
