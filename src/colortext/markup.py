"""Tagged-text markup for annotated strings.

Format:

- ``>[PATTERN]`` switches the color for all following text. ``PATTERN`` is
  anything ``Color.parse`` accepts (``#RRGGBB``, ``#RRGGBBAA``, ``R,G,B``,
  ``R,G,B,A``).
- ``>>[`` is an escape: it produces a literal ``>[`` and does not switch
  color. Only that occurrence is affected.
- ``>[`` without a closing ``]`` is an error.

Example::

    >[#FF0000]Hello>[#0000FF]World   ->  ("Hello", red), ("World", blue)
    >>[#FF0000]Hello                 ->  (">[#FF0000]Hello", default)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from lark import Lark
from lark.exceptions import UnexpectedInput

from colortext.color import WHITE, Color
from colortext.errors import FormatError

if TYPE_CHECKING:
    from colortext.annotated import AnnotatedString

logger = logging.getLogger(__name__)

COLOR_OPEN = ">["
COLOR_CLOSE = "]"
ESCAPED_OPEN = ">>["

# Styles the encoder can emit. All of them re-parse through Color.parse.
# "auto" writes #RRGGBB for opaque colors and #RRGGBBAA otherwise.
ENCODE_FORMATS: frozenset[str] = frozenset(
    ("auto", "hex", "hex-with-alpha", "decimal")
)


class MarkupTokenType(Enum):
    """Token types for the markup lexer."""

    TEXT = "TEXT"
    ESCAPE = "ESCAPE"
    COLOR = "COLOR"


@dataclass(frozen=True, slots=True)
class MarkupToken:
    """A token from the markup lexer.

    Attributes:
        type: TEXT, ESCAPE or COLOR.
        value: The raw matched string.
        start_pos: Start offset in the input.
        end_pos: End offset in the input.
    """

    type: MarkupTokenType
    value: str
    start_pos: int
    end_pos: int

    @property
    def pattern(self) -> str:
        """The color pattern inside a COLOR token's brackets."""
        return self.value[len(COLOR_OPEN) : -len(COLOR_CLOSE)]


# Literals and the bracketed COLOR form are tried where TEXT refuses to start:
# TEXT stops in front of any ">[" or ">>[".
_MARKUP_GRAMMAR = (
    'ESCAPE: ">>["\n'
    r'COLOR: ">[" /[^\]]*/ "]"' + "\n"
    r"TEXT: /(?:(?!>>?\[).)+/s"
)

# Compile once at module load
_markup_lexer = Lark(_MARKUP_GRAMMAR, parser=None, lexer="basic")


def tokenize_markup(markup: str) -> list[MarkupToken]:
    """Split markup into TEXT, ESCAPE and COLOR tokens.

    Raises:
        FormatError: If a ``>[`` has no closing ``]``.

    Example:
        >>> [(t.type.value, t.value) for t in tokenize_markup(">[#FF0000]Hi")]
        [('COLOR', '>[#FF0000]'), ('TEXT', 'Hi')]
    """
    if not markup:
        return []

    tokens: list[MarkupToken] = []
    try:
        for lark_token in _markup_lexer.lex(markup):
            start_pos = lark_token.start_pos if lark_token.start_pos is not None else 0
            end_pos = lark_token.end_pos if lark_token.end_pos is not None else 0
            tokens.append(
                MarkupToken(
                    type=MarkupTokenType[lark_token.type],
                    value=lark_token.value,
                    start_pos=start_pos,
                    end_pos=end_pos,
                )
            )
    except UnexpectedInput as exc:
        pos = getattr(exc, "pos_in_stream", None)
        msg = f"Unterminated color pattern at offset {pos}, expected '{COLOR_CLOSE}'"
        raise FormatError(msg, markup) from exc
    return tokens


def parse_markup(markup: str, default: Color = WHITE) -> AnnotatedString:
    """Parse markup into an annotated string.

    Text before the first color tag takes ``default``.

    Raises:
        FormatError: On an unterminated tag or an invalid color pattern.
    """
    from colortext.annotated import AnnotatedString

    runs: list[tuple[str, Color]] = []
    color = default
    pending: list[str] = []

    for token in tokenize_markup(markup):
        if token.type is MarkupTokenType.TEXT:
            pending.append(token.value)
        elif token.type is MarkupTokenType.ESCAPE:
            pending.append(COLOR_OPEN)
        else:
            if pending:
                runs.append(("".join(pending), color))
                pending = []
            try:
                color = Color.parse(token.pattern)
            except FormatError as exc:
                msg = f"Invalid color tag at offset {token.start_pos}: {exc}"
                raise FormatError(msg, token.value) from exc

    if pending:
        runs.append(("".join(pending), color))
    return AnnotatedString.from_runs(runs)


def _format_pattern(color: Color, color_format: str) -> str:
    match color_format:
        case "auto":
            return color.format("hex" if color.alpha == 255 else "hex-with-alpha")
        case "decimal":
            return f"{color.red},{color.green},{color.blue},{color.alpha}"
        case "hex" | "hex-with-alpha":
            return color.format(color_format)
    msg = f"Unknown markup color format, use one of {sorted(ENCODE_FORMATS)}"
    raise FormatError(msg, color_format)


def encode_markup(
    value: AnnotatedString,
    color_format: str | None = None,
    explicit_leading: bool | None = None,
    default: Color = WHITE,
) -> str:
    """Serialise an annotated string to markup.

    Each run becomes ``>[PATTERN]text`` with literal ``>[`` escaped as
    ``>>[``. Unset options fall back to the ``markup`` settings.

    Args:
        value: The string to encode.
        color_format: ``auto``, ``hex``, ``hex-with-alpha`` or ``decimal``.
            ``hex`` drops alpha and is only lossless for opaque colors.
        explicit_leading: If False, the tag for a leading run in ``default``
            is omitted.
        default: The color ``parse_markup`` will assume for untagged text.

    Raises:
        FormatError: If a run other than the last ends with ``>`` (the next
            tag would read as an escape), or ``color_format`` is unknown.
    """
    if color_format is None or explicit_leading is None:
        from colortext.config import get_settings

        settings = get_settings().markup
        if color_format is None:
            color_format = settings.color_format
        if explicit_leading is None:
            explicit_leading = settings.explicit_leading

    runs = value.render_runs()
    parts: list[str] = []
    for i, run in enumerate(runs):
        if run.text.endswith(">") and i + 1 < len(runs):
            msg = (
                f"Run {i} ends with '>' and is followed by a color change; "
                "markup cannot represent that boundary"
            )
            raise FormatError(msg, run.text)
        if i or explicit_leading or run.color != default:
            parts.append(
                f"{COLOR_OPEN}{_format_pattern(run.color, color_format)}{COLOR_CLOSE}"
            )
        parts.append(run.text.replace(COLOR_OPEN, ESCAPED_OPEN))

    if color_format == "hex" and any(run.color.alpha != 255 for run in runs):
        logger.warning("Encoding translucent colors as 'hex' drops their alpha")
    return "".join(parts)
