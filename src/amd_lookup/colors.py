"""Terminal color utilities for lookup-amd output.

Respects the NO_COLOR environment variable (https://no-color.org/) and
FORCE_COLOR.

Example:
    >>> from amd_lookup.colors import Colors
    >>> c = Colors(enabled=False)
    >>> c.cyan("js/b.js")
    'js/b.js'
"""

import os
import sys
from typing import Optional, TextIO


class Colors:
    """ANSI color helper with automatic terminal detection.

    Attributes:
        enabled: Whether colors are emitted.
    """

    RESET = "\033[0m"
    BOLD = "\033[1m"
    DIM = "\033[2m"
    RED = "\033[31m"
    GREEN = "\033[32m"
    YELLOW = "\033[33m"
    CYAN = "\033[36m"

    def __init__(self, enabled: Optional[bool] = None, stream: Optional[TextIO] = None):
        """Initialize Colors.

        Args:
            enabled: Force colors on/off. If None, auto-detect.
            stream: Stream the output goes to (default: stdout), used for
                TTY detection.
        """
        self.stream = stream if stream is not None else sys.stdout
        if enabled is not None:
            self.enabled = enabled
        else:
            self.enabled = self._should_enable_colors()

    def _should_enable_colors(self) -> bool:
        if os.environ.get("NO_COLOR"):
            return False
        if os.environ.get("FORCE_COLOR"):
            return True
        if not hasattr(self.stream, "isatty") or not self.stream.isatty():
            return False
        return os.environ.get("TERM", "") != "dumb"

    def _colorize(self, text: str, color: str) -> str:
        if not self.enabled:
            return text
        return f"{color}{text}{self.RESET}"

    def green(self, text: str) -> str:
        """Green text (resolved paths)."""
        return self._colorize(text, self.GREEN)

    def yellow(self, text: str) -> str:
        """Yellow text (aliases, plugin tags)."""
        return self._colorize(text, self.YELLOW)

    def cyan(self, text: str) -> str:
        """Cyan text (labels)."""
        return self._colorize(text, self.CYAN)

    def dim(self, text: str) -> str:
        """Dim text (absent values)."""
        return self._colorize(text, self.DIM)

    def error(self, text: str) -> str:
        """Error message (bold red)."""
        if not self.enabled:
            return text
        return f"{self.BOLD}{self.RED}{text}{self.RESET}"


def get_colors(no_color: bool = False, stream: Optional[TextIO] = None) -> Colors:
    """Get a Colors instance for ``stream``, disabled when ``no_color`` is set."""
    if no_color:
        return Colors(enabled=False, stream=stream)
    return Colors(stream=stream)
