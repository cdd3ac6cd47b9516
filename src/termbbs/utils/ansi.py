"""ANSI SGR styling for outgoing lines.

A styled segment is wrapped as ``ESC[<fg>;<bg>m text ESC[37;40m``, i.e.
the terminal is explicitly reset to white on black afterwards.
"""

from __future__ import annotations

import enum
import re

from pydantic import BaseModel, ConfigDict

ANSI_ESCAPE_RE = re.compile(r"\x1b\[[0-9;]*[A-Za-z]")

RESET_FG = 37
RESET_BG = 40


class AnsiColor(int, enum.Enum):
    """Colour offsets; foreground code is 30 + value, background 40 + value."""

    BLACK = 0
    RED = 1
    GREEN = 2
    YELLOW = 3
    BLUE = 4
    MAGENTA = 5
    CYAN = 6
    WHITE = 7
    DEFAULT = 9


class AnsiStyle(BaseModel):
    model_config = ConfigDict(frozen=True)

    fg: AnsiColor | None = None
    bg: AnsiColor | None = None

    @property
    def fg_code(self) -> int:
        return 30 + (self.fg if self.fg is not None else AnsiColor.DEFAULT)

    @property
    def bg_code(self) -> int:
        return 40 + (self.bg if self.bg is not None else AnsiColor.DEFAULT)

    def apply(self, text: str) -> str:
        return f"\x1b[{self.fg_code};{self.bg_code}m{text}\x1b[{RESET_FG};{RESET_BG}m"


def strip_ansi(text: str) -> str:
    """Remove ANSI escape sequences from text."""
    return ANSI_ESCAPE_RE.sub("", text)


# Styles used by the session
ERROR = AnsiStyle(fg=AnsiColor.RED)
SUCCESS = AnsiStyle(fg=AnsiColor.GREEN)
HEADING = AnsiStyle(fg=AnsiColor.CYAN)
