"""Logging utilities for Tilesmith sessions.

Provides color-coded output to distinguish editing operations from playtest
transitions, errors and completions.
"""

import os
from enum import Enum


class Color(Enum):
    """ANSI color codes for terminal output."""

    # Colors for operation types
    BLUE = "\033[94m"      # Editor operations (paint, layers, tools)
    YELLOW = "\033[93m"    # Playtest transitions
    RED = "\033[91m"       # Errors
    GREEN = "\033[92m"     # Success/completion
    CYAN = "\033[96m"      # Info/metadata

    # Formatting
    BOLD = "\033[1m"
    RESET = "\033[0m"


# Markers for operation types (color-blind accessible)
LOG_TAG_EDIT = "[•]"
LOG_TAG_PLAY = "[>]"
LOG_TAG_ERROR = "[!]"
LOG_TAG_SUCCESS = "[✓]"
LOG_TAG_INFO = "[i]"


def colored(text: str, color: Color, bold: bool = False) -> str:
    """Wrap text in ANSI color codes if colors are enabled.

    Args:
        text: Text to colorize
        color: Color to apply
        bold: Whether to make text bold

    Returns:
        Colorized text if TILESMITH_NO_COLOR is not set, otherwise plain text
    """
    if os.getenv("TILESMITH_NO_COLOR"):
        return text

    prefix = color.value
    if bold:
        prefix = Color.BOLD.value + prefix

    return f"{prefix}{text}{Color.RESET.value}"


def _quiet() -> bool:
    return os.getenv("LOG_LEVEL", "INFO").upper() == "QUIET"


def log_edit(message: str) -> None:
    """Log an editor operation (blue)."""
    if not _quiet():
        print(colored(f"{LOG_TAG_EDIT} {message}", Color.BLUE))


def log_play(message: str) -> None:
    """Log a playtest transition (yellow)."""
    if not _quiet():
        print(colored(f"{LOG_TAG_PLAY} {message}", Color.YELLOW))


def log_error(message: str) -> None:
    """Log an error (red). Never silenced."""
    print(colored(f"{LOG_TAG_ERROR} {message}", Color.RED))


def log_success(message: str) -> None:
    """Log a success (green)."""
    if not _quiet():
        print(colored(f"{LOG_TAG_SUCCESS} {message}", Color.GREEN))


def log_info(message: str) -> None:
    """Log metadata/info (cyan)."""
    if not _quiet():
        print(colored(f"{LOG_TAG_INFO} {message}", Color.CYAN))
