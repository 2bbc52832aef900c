"""RGBA color values.

``Color`` is an immutable value type. Patterns come in two shapes:

- hex: ``#RRGGBB`` or ``#RRGGBBAA`` (case-insensitive)
- decimal: ``R,G,B`` or ``R,G,B,A``

Alpha defaults to 255 (opaque) when omitted.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING

from colortext.errors import FormatError

if TYPE_CHECKING:
    from colortext.annotated import AnnotatedString

_CHANNEL_MAX = 255

# Render styles accepted by Color.format(). "hex4" is kept as an alias for
# "hex-with-alpha".
FORMAT_STYLES: frozenset[str] = frozenset(
    ("hex", "hex-with-alpha", "hex4", "rgb", "rgba")
)


def _parse_channel(part: str, base: int, pattern: str) -> int:
    try:
        value = int(part, base)
    except ValueError as exc:
        msg = f"Invalid color channel {part!r}"
        raise FormatError(msg, pattern) from exc
    if not 0 <= value <= _CHANNEL_MAX:
        msg = f"Color channel {value} out of range 0-255"
        raise FormatError(msg, pattern)
    return value


@dataclass(frozen=True, slots=True)
class Color:
    """An RGBA color with 8-bit channels.

    Attributes:
        red: Red channel, 0-255.
        green: Green channel, 0-255.
        blue: Blue channel, 0-255.
        alpha: Opacity, 0 (transparent) to 255 (opaque).
    """

    red: int
    green: int
    blue: int
    alpha: int = _CHANNEL_MAX

    def __post_init__(self) -> None:
        for name in ("red", "green", "blue", "alpha"):
            value = getattr(self, name)
            # bool is an int subclass but never a meaningful channel
            if not isinstance(value, int) or isinstance(value, bool):
                msg = f"Color channel {name} must be an int, got {value!r}"
                raise FormatError(msg)
            if not 0 <= value <= _CHANNEL_MAX:
                msg = f"Color channel {name}={value} out of range 0-255"
                raise FormatError(msg)

    # ------------------------------------------------------------------
    # Parsing and formatting
    # ------------------------------------------------------------------

    @classmethod
    def parse(cls, pattern: str) -> Color:
        """Parse a hex (``#RRGGBB[AA]``) or decimal (``R,G,B[,A]``) pattern.

        Raises:
            FormatError: If the pattern is empty, has the wrong shape, or any
                channel is not an integer in 0-255.

        Example:
            >>> Color.parse("#FF0000")
            Color(red=255, green=0, blue=0, alpha=255)
            >>> Color.parse("0,128,0")
            Color(red=0, green=128, blue=0, alpha=255)
        """
        if not pattern:
            msg = "Empty color pattern"
            raise FormatError(msg, pattern)

        if pattern.startswith("#"):
            if len(pattern) not in (7, 9):
                msg = "Hex color must be 7 or 9 characters long (#RRGGBB or #RRGGBBAA)"
                raise FormatError(msg, pattern)
            digits = pattern[1:]
            # int(..., 16) accepts "+F" and "_F"; a channel must be two hex digits
            if not all(c in "0123456789abcdefABCDEF" for c in digits):
                msg = "Invalid hex color"
                raise FormatError(msg, pattern)
            return cls(
                *(
                    _parse_channel(digits[i : i + 2], 16, pattern)
                    for i in range(0, len(digits), 2)
                )
            )

        if not pattern[0].isdigit():
            msg = "Color pattern must start with '#' or a digit"
            raise FormatError(msg, pattern)

        parts = pattern.split(",")
        if len(parts) not in (3, 4):
            msg = "Decimal color must have 3 or 4 comma-separated parts (R,G,B[,A])"
            raise FormatError(msg, pattern)
        return cls(*(_parse_channel(part, 10, pattern) for part in parts))

    def format(self, style: str = "hex") -> str:
        """Render as ``hex``, ``hex-with-alpha`` (``hex4``), ``rgb`` or ``rgba``.

        Raises:
            FormatError: If ``style`` is not one of the known styles.
        """
        r, g, b, a = self.red, self.green, self.blue, self.alpha
        match style:
            case "hex":
                return f"#{r:02X}{g:02X}{b:02X}"
            case "hex-with-alpha" | "hex4":
                return f"#{r:02X}{g:02X}{b:02X}{a:02X}"
            case "rgb":
                return f"rgb({r}, {g}, {b})"
            case "rgba":
                return f"rgba({r}, {g}, {b}, {a})"
        msg = "Unknown color format, use 'hex', 'hex-with-alpha', 'rgb' or 'rgba'"
        raise FormatError(msg, style)

    def __format__(self, spec: str) -> str:
        return self.format(spec or "hex")

    def __str__(self) -> str:
        return self.format("hex")

    # ------------------------------------------------------------------
    # Arithmetic
    # ------------------------------------------------------------------

    def with_alpha(self, alpha: int) -> Color:
        """Return a copy of this color with a different alpha."""
        return replace(self, alpha=alpha)

    @staticmethod
    def layer_over(base: Color, top: Color) -> Color:
        """Composite ``top`` over ``base`` (source-over alpha blending).

        Channels are rounded to the nearest integer. A fully transparent
        result is white with alpha 0.

        Example:
            >>> Color.layer_over(Color(255, 0, 0), Color(255, 255, 255, 128))
            Color(red=255, green=128, blue=128, alpha=255)
        """
        alpha_base = base.alpha / _CHANNEL_MAX
        alpha_top = top.alpha / _CHANNEL_MAX
        result_alpha = alpha_top + alpha_base * (1 - alpha_top)
        if result_alpha == 0:
            return Color(255, 255, 255, 0)

        def blend(top_channel: int, base_channel: int) -> int:
            value = (
                top_channel * alpha_top + base_channel * alpha_base * (1 - alpha_top)
            ) / result_alpha
            return min(_CHANNEL_MAX, round(value))

        return Color(
            blend(top.red, base.red),
            blend(top.green, base.green),
            blend(top.blue, base.blue),
            min(_CHANNEL_MAX, round(result_alpha * _CHANNEL_MAX)),
        )

    def layer_with(self, top: Color) -> Color:
        """Composite ``top`` over this color."""
        return Color.layer_over(self, top)

    @staticmethod
    def distance(a: Color, b: Color) -> float:
        """Euclidean distance over red, green and blue; alpha is ignored."""
        return math.sqrt(
            (a.red - b.red) ** 2 + (a.green - b.green) ** 2 + (a.blue - b.blue) ** 2
        )

    def for_text(self, text: str) -> AnnotatedString:
        """Wrap ``text`` as an annotated string in this color."""
        from colortext.annotated import AnnotatedString

        return AnnotatedString(text, self)


# ---------------------------------------------------------------------------
# Named colors (the sixteen console colors)
# ---------------------------------------------------------------------------
BLACK = Color(0, 0, 0)
DARK_BLUE = Color(0, 0, 128)
DARK_GREEN = Color(0, 128, 0)
DARK_CYAN = Color(0, 128, 128)
DARK_RED = Color(128, 0, 0)
DARK_MAGENTA = Color(128, 0, 128)
DARK_YELLOW = Color(128, 128, 0)
GRAY = Color(128, 128, 128)
DARK_GRAY = Color(169, 169, 169)
BLUE = Color(0, 0, 255)
GREEN = Color(0, 255, 0)
CYAN = Color(0, 255, 255)
RED = Color(255, 0, 0)
MAGENTA = Color(255, 0, 255)
YELLOW = Color(255, 255, 0)
WHITE = Color(255, 255, 255)

NAMED_COLORS: dict[str, Color] = {
    "black": BLACK,
    "dark_blue": DARK_BLUE,
    "dark_green": DARK_GREEN,
    "dark_cyan": DARK_CYAN,
    "dark_red": DARK_RED,
    "dark_magenta": DARK_MAGENTA,
    "dark_yellow": DARK_YELLOW,
    "gray": GRAY,
    "dark_gray": DARK_GRAY,
    "blue": BLUE,
    "green": GREEN,
    "cyan": CYAN,
    "red": RED,
    "magenta": MAGENTA,
    "yellow": YELLOW,
    "white": WHITE,
}


def resolve_color(value: str) -> Color:
    """Look up a named color, falling back to ``Color.parse``."""
    named = NAMED_COLORS.get(value.strip().lower().replace("-", "_"))
    if named is not None:
        return named
    return Color.parse(value)
