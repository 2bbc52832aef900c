"""Convert text plus markers into ordered (text, color) runs.

This is the single rendering primitive: the terminal writer and the markup
encoder both consume its output.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, NamedTuple

from colortext.color import WHITE, Color
from colortext.errors import InvariantError

if TYPE_CHECKING:
    from collections.abc import Sequence

    from colortext.markers import ColorMarker


class Run(NamedTuple):
    """A maximal span of text drawn in one color."""

    text: str
    color: Color


def render_runs(
    text: str, markers: Sequence[ColorMarker], default: Color = WHITE
) -> list[Run]:
    """Slice ``text`` between consecutive marker offsets.

    The last run extends to the end of the text. Text before the first
    marker, if any, is emitted in ``default``.

    Raises:
        InvariantError: If the markers are unsorted or out of range. Marker
            lists held by ``AnnotatedString`` are normalised, so this only
            fires on a defect.

    Example:
        >>> from colortext.markers import ColorMarker
        >>> from colortext.color import RED, BLUE
        >>> [(r.text, str(r.color)) for r in render_runs(
        ...     "HelloWorld", [ColorMarker(RED, 0), ColorMarker(BLUE, 5)])]
        [('Hello', '#FF0000'), ('World', '#0000FF')]
    """
    runs: list[Run] = []
    if not text:
        if markers:
            msg = f"Empty text carries {len(markers)} marker(s)"
            raise InvariantError(msg)
        return runs

    previous = -1
    for marker in markers:
        if not 0 <= marker.start < len(text) or marker.start <= previous:
            msg = (
                f"Marker at {marker.start} breaks ordering/range "
                f"(previous={previous}, length={len(text)})"
            )
            raise InvariantError(msg)
        previous = marker.start

    if not markers or markers[0].start > 0:
        head_end = markers[0].start if markers else len(text)
        runs.append(Run(text[:head_end], default))

    for i, marker in enumerate(markers):
        end = markers[i + 1].start if i + 1 < len(markers) else len(text)
        runs.append(Run(text[marker.start : end], marker.color))
    return runs
