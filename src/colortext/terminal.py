"""Write annotated strings to a terminal.

Arbitrary RGB colors are mapped onto the sixteen standard terminal colors by
nearest Euclidean distance, then drawn with a ``rich`` console. The palette
is a parameter, so mapping can be tested without a terminal.
"""

from __future__ import annotations

import logging
import sys
from functools import lru_cache
from typing import TYPE_CHECKING, NamedTuple, TextIO

from rich.console import Console
from rich.text import Text

from colortext.annotated import AnnotatedString
from colortext.color import (
    BLACK,
    BLUE,
    CYAN,
    DARK_BLUE,
    DARK_CYAN,
    DARK_GRAY,
    DARK_GREEN,
    DARK_MAGENTA,
    DARK_RED,
    DARK_YELLOW,
    GRAY,
    GREEN,
    MAGENTA,
    RED,
    WHITE,
    YELLOW,
    Color,
)

if TYPE_CHECKING:
    from collections.abc import Iterator, Sequence

    from colortext.config import Settings

logger = logging.getLogger(__name__)


class PaletteEntry(NamedTuple):
    """A drawable terminal color.

    Attributes:
        name: Console color name.
        color: The RGB value the entry stands for.
        style: The ``rich`` style name used to draw it.
    """

    name: str
    color: Color
    style: str


CONSOLE_PALETTE: tuple[PaletteEntry, ...] = (
    PaletteEntry("black", BLACK, "black"),
    PaletteEntry("dark_blue", DARK_BLUE, "blue"),
    PaletteEntry("dark_green", DARK_GREEN, "green"),
    PaletteEntry("dark_cyan", DARK_CYAN, "cyan"),
    PaletteEntry("dark_red", DARK_RED, "red"),
    PaletteEntry("dark_magenta", DARK_MAGENTA, "magenta"),
    PaletteEntry("dark_yellow", DARK_YELLOW, "yellow"),
    PaletteEntry("gray", GRAY, "white"),
    PaletteEntry("dark_gray", DARK_GRAY, "bright_black"),
    PaletteEntry("blue", BLUE, "bright_blue"),
    PaletteEntry("green", GREEN, "bright_green"),
    PaletteEntry("cyan", CYAN, "bright_cyan"),
    PaletteEntry("red", RED, "bright_red"),
    PaletteEntry("magenta", MAGENTA, "bright_magenta"),
    PaletteEntry("yellow", YELLOW, "bright_yellow"),
    PaletteEntry("white", WHITE, "bright_white"),
)


def nearest_palette_color(
    color: Color, palette: Sequence[PaletteEntry] = CONSOLE_PALETTE
) -> PaletteEntry:
    """Return the palette entry closest to ``color`` (alpha ignored).

    Ties go to the entry listed first.
    """
    if not palette:
        msg = "Palette must contain at least one entry"
        raise ValueError(msg)
    return min(palette, key=lambda entry: Color.distance(entry.color, color))


def to_rich_text(
    value: AnnotatedString, palette: Sequence[PaletteEntry] = CONSOLE_PALETTE
) -> Text:
    """Convert runs to a ``rich`` Text with one palette style per run."""
    text = Text()
    for run in value.render_runs():
        text.append(run.text, style=nearest_palette_color(run.color, palette).style)
    return text


class TerminalWriter:
    """Draws annotated strings on a console and reads plain lines back.

    Args:
        console: Target console. Defaults to stdout, configured from the
            ``terminal`` settings.
        palette: Colors the terminal can draw.
        settings: Settings to use instead of ``get_settings()``.
    """

    def __init__(
        self,
        console: Console | None = None,
        palette: Sequence[PaletteEntry] = CONSOLE_PALETTE,
        settings: Settings | None = None,
    ) -> None:
        if settings is None:
            from colortext.config import get_settings

            settings = get_settings()
        if console is None:
            console = Console(
                force_terminal=settings.terminal.force_terminal,
                no_color=settings.terminal.no_color,
                highlight=False,
            )
        self.console = console
        self.palette = tuple(palette)
        self.default_color = settings.color.default_color

    def _print(self, value: AnnotatedString, end: str) -> None:
        if not isinstance(value, AnnotatedString):
            msg = f"Expected AnnotatedString, got {type(value).__name__}"
            raise TypeError(msg)
        self.console.print(
            to_rich_text(value, self.palette),
            end=end,
            soft_wrap=True,
            highlight=False,
        )

    def write(self, value: AnnotatedString) -> None:
        """Write ``value``; the console style resets after the last run."""
        self._print(value, end="")

    def write_line(self, value: AnnotatedString) -> None:
        """Write ``value`` followed by a newline."""
        self._print(value, end="\n")

    def read_line(self, stream: TextIO | None = None) -> AnnotatedString:
        """Read one line and wrap it in the default color.

        The trailing newline is removed. End of input yields an empty string.
        """
        line = (stream or sys.stdin).readline()
        if not line:
            logger.debug("read_line hit end of input")
            return AnnotatedString()
        return self._wrap(line)

    def iter_lines(self, stream: TextIO | None = None) -> Iterator[AnnotatedString]:
        """Yield every remaining line of ``stream`` as ``read_line`` would."""
        for line in stream or sys.stdin:
            yield self._wrap(line)

    def _wrap(self, line: str) -> AnnotatedString:
        return AnnotatedString(line.rstrip("\r\n"), self.default_color)


@lru_cache(maxsize=1)
def get_writer() -> TerminalWriter:
    """Return a shared writer for stdout."""
    return TerminalWriter()


def write(value: AnnotatedString) -> None:
    get_writer().write(value)


def write_line(value: AnnotatedString) -> None:
    get_writer().write_line(value)


def read_line(stream: TextIO | None = None) -> AnnotatedString:
    return get_writer().read_line(stream)
