"""
Utilities module for the combat core.

Provides console printing with rich formatting, the singleton metaclass used
by the content repository, and a health bar helper for presentation.
"""

from __future__ import annotations

from typing import Any, Generic, TypeVar

from rich.console import Console
from rich.rule import Rule

# Initialize the rich console.
_console = Console(markup=True, width=120, force_terminal=True, force_jupyter=False)


def cprint(*args: Any, **kwargs: Any) -> None:
    """
    Custom print function to handle colored output.

    Args:
        *args: Arguments to pass to the console print function.
        **kwargs: Keyword arguments to pass to the console print function.

    """
    _console.print(*args, **kwargs)


def crule(*args: Any, **kwargs: Any) -> None:
    """
    Custom print function to handle colored output with a rule.

    Args:
        *args: Arguments to pass to the Rule constructor.
        **kwargs: Keyword arguments to pass to the Rule constructor.

    """
    _console.print(Rule(*args, **kwargs))


def ccapture(content: Any) -> str:
    """
    Captures console output as a string.

    Args:
        content (Any): The content to capture.

    Returns:
        str: The captured output as a string.

    """
    with _console.capture() as capture:
        _console.print(content, markup=True, end="")
    return capture.get()


# ---- Singleton Metaclass ----


_T = TypeVar("_T")


class Singleton(type, Generic[_T]):
    """Metaclass that returns the same instance every time."""

    _instances: dict[Singleton[_T], _T] = {}

    def __call__(cls, *args: Any, **kwargs: Any) -> _T:
        if cls not in cls._instances:
            cls._instances[cls] = super().__call__(*args, **kwargs)
        elif args or kwargs:
            cls._instances[cls].__init__(*args, **kwargs)  # type: ignore[misc]
        return cls._instances[cls]


def make_bar(current: int, maximum: int, length: int = 10, color: str = "green") -> str:
    """
    Builds a rich-markup bar for a current/maximum pair.

    Args:
        current (int): The current value.
        maximum (int): The maximum value.
        length (int): Number of cells in the bar.
        color (str): Rich color of the filled cells.

    Returns:
        str: The markup string.

    """
    if maximum <= 0:
        return "[dim]" + "░" * length + "[/]"
    filled = max(0, min(length, round(length * current / maximum)))
    return f"[{color}]" + "█" * filled + "[/][dim]" + "░" * (length - filled) + "[/]"
