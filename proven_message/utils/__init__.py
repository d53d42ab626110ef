"""
Proven message - Utilities package.
"""

from .logging import (
    ColoredFormatter,
    PlainFormatter,
    add_file_handler,
    remove_file_handler,
    setup_colored_logging,
)

__all__ = [
    "ColoredFormatter",
    "PlainFormatter",
    "setup_colored_logging",
    "add_file_handler",
    "remove_file_handler",
]
