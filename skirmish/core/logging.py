"""
Logging configuration module for the combat core.

Sets up rich colored output for the "skirmish" logger and formats the
records the combat core writes: plain messages with a trailing
"[key=value ...]" context, and combat log events prefixed with the round
and sequence number they were recorded at.
"""

import logging
from typing import Any

from rich.console import Console
from rich.logging import RichHandler


def setup_logging(level: int = logging.INFO) -> None:
    """
    Sets up logging configuration with rich colored output.

    Args:
        level (int): The logging level to set. Defaults to logging.INFO.

    """
    console = Console(width=120, force_terminal=True, force_jupyter=False)

    rich_handler = RichHandler(
        console=console,
        show_time=True,
        show_level=True,
        show_path=False,
        markup=False,
        rich_tracebacks=True,
    )
    rich_handler.setFormatter(logging.Formatter("%(name)s - %(message)s"))

    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[rich_handler],
    )


logger = logging.getLogger("skirmish")


def format_context(message: str, context: dict[str, Any] | None = None) -> str:
    """
    Appends a "[key=value ...]" suffix to a message.

    Entries whose value is None are left out, and an empty context leaves
    the message untouched.
    """
    if context:
        pairs = [f"{k}={v}" for k, v in context.items() if v is not None]
        if pairs:
            message = f"{message} [{' '.join(pairs)}]"
    return message


def log_combat_event(
    round_number: int,
    sequence: int,
    message: str,
    context: dict[str, Any] | None = None,
) -> None:
    """
    Logs one combat log entry at debug level.

    Args:
        round_number (int): The round the entry belongs to.
        sequence (int): The entry's position in the combat log.
        message (str): The entry's human-readable message.
        context (dict[str, Any] | None): Optional context dictionary.

    """
    logger.debug(format_context(f"[{round_number}:{sequence}] {message}", context))


def log_error(message: str, context: dict[str, Any] | None = None) -> None:
    """
    Logs an error message with optional context.

    Args:
        message (str): The error message.
        context (dict[str, Any] | None): Optional context dictionary.

    """
    logger.error(format_context(message, context))


def log_info(message: str, context: dict[str, Any] | None = None) -> None:
    """Logs an info message with optional context."""
    logger.info(format_context(message, context))


def log_debug(message: str, context: dict[str, Any] | None = None) -> None:
    """Logs a debug message with optional context."""
    logger.debug(format_context(message, context))
