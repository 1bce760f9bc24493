#!/usr/bin/env python3
"""
Colored terminal output for the cafce command line.

Status and error lines go to stderr through Rich, leaving stdout free for
values that scripts capture (such as the computed key).
"""

from typing import Optional

from rich.console import Console
from rich.text import Text


class ColorOutput:
    """Rich console wrapper for colored status lines."""

    def __init__(self, force_terminal: Optional[bool] = None):
        """
        Initialize ColorOutput.

        Args:
            force_terminal: Force terminal mode (True/False) or auto-detect (None)
        """
        self.console = Console(stderr=True, force_terminal=force_terminal, soft_wrap=True)

    def _print(self, message: str, style: str) -> None:
        # Text() keeps paths like "[key]" from being parsed as Rich markup
        self.console.print(Text(message, style=style))

    def print_green(self, message: str) -> None:
        """Print message in green color."""
        self._print(message, "green")

    def print_yellow(self, message: str) -> None:
        """Print message in yellow color."""
        self._print(message, "yellow")

    def print_red(self, message: str) -> None:
        """Print message in red color."""
        self._print(message, "red")

    def print_field(self, name: str, value: str) -> None:
        """Print a "name: value" line with a bold name."""
        text = Text()
        text.append(f"{name}: ", style="bold")
        text.append(value)
        self.console.print(text)


# Global instance for easy access
_color_output = ColorOutput()


def print_green(message: str) -> None:
    """Print message in green color (global function)."""
    _color_output.print_green(message)


def print_yellow(message: str) -> None:
    """Print message in yellow color (global function)."""
    _color_output.print_yellow(message)


def print_red(message: str) -> None:
    """Print message in red color (global function)."""
    _color_output.print_red(message)


def print_field(name: str, value: str) -> None:
    """Print a "name: value" line (global function)."""
    _color_output.print_field(name, value)
