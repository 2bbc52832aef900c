"""Color markers and the marker-list normalisation pass.

A marker says "from this offset until the next marker (or end of text) the
active color is ``color``". Every marker list held by an ``AnnotatedString``
goes through ``normalize_markers`` so that it is:

1. restricted to offsets in ``[0, text_length)``
2. sorted strictly ascending by offset
3. free of duplicate offsets (the later marker wins)
4. free of adjacent markers with the same color
"""

from __future__ import annotations

import bisect
import logging
from dataclasses import dataclass, replace
from operator import attrgetter
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from colortext.color import Color

logger = logging.getLogger(__name__)

_start = attrgetter("start")


@dataclass(frozen=True, slots=True)
class ColorMarker:
    """A color change anchored at a character offset.

    Attributes:
        color: The color active from ``start`` onwards.
        start: 0-based character offset into the owning text.
    """

    color: Color
    start: int

    def shifted(self, delta: int) -> ColorMarker:
        """Return a copy moved by ``delta`` characters."""
        return replace(self, start=self.start + delta)


def normalize_markers(
    markers: Iterable[ColorMarker], text_length: int
) -> tuple[ColorMarker, ...]:
    """Restore the marker-list invariants for a text of ``text_length``.

    Markers at the same offset resolve last-write-wins: the one appearing
    later in ``markers`` replaces the earlier one. A marker repeating its
    predecessor's color is absorbed into the predecessor's run.

    Idempotent: normalising an already normal list returns it unchanged.

    Example:
        >>> from colortext.color import RED, BLUE
        >>> normalize_markers(
        ...     [ColorMarker(RED, 4), ColorMarker(RED, 0), ColorMarker(BLUE, 4)], 6
        ... )  # doctest: +NORMALIZE_WHITESPACE
        (ColorMarker(color=Color(red=255, green=0, blue=0, alpha=255), start=0),
         ColorMarker(color=Color(red=0, green=0, blue=255, alpha=255), start=4))
    """
    candidates = list(markers)
    in_range = [m for m in candidates if 0 <= m.start < text_length]
    if len(in_range) != len(candidates):
        logger.debug(
            "Dropped %d marker(s) outside [0, %d)",
            len(candidates) - len(in_range),
            text_length,
        )

    # list.sort is stable, so insertion order survives among equal offsets
    in_range.sort(key=_start)

    result: list[ColorMarker] = []
    for marker in in_range:
        if result and result[-1].start == marker.start:
            result.pop()
        if result and result[-1].color == marker.color:
            continue
        result.append(marker)
    return tuple(result)


def is_normalized(markers: Sequence[ColorMarker], text_length: int) -> bool:
    """Check the marker-list invariants without rebuilding the list."""
    for i, marker in enumerate(markers):
        if not 0 <= marker.start < text_length:
            return False
        if i and (
            markers[i - 1].start >= marker.start or markers[i - 1].color == marker.color
        ):
            return False
    return True


def shift_markers(markers: Iterable[ColorMarker], delta: int) -> list[ColorMarker]:
    """Move every marker by ``delta`` characters."""
    if delta == 0:
        return list(markers)
    return [m.shifted(delta) for m in markers]


def color_at(markers: Sequence[ColorMarker], index: int, default: Color) -> Color:
    """Return the color active at ``index``.

    ``markers`` must be sorted by offset. Offsets before the first marker
    take ``default``.
    """
    pos = bisect.bisect_right(markers, index, key=_start) - 1
    if pos < 0:
        return default
    return markers[pos].color


def slice_markers(
    markers: Sequence[ColorMarker], start: int, stop: int, default: Color
) -> list[ColorMarker]:
    """Markers for the substring ``[start, stop)`` rebased to offset 0.

    The color active at ``start`` is re-anchored at 0, so a run that began
    before the cut keeps its color.
    """
    if stop <= start:
        return []
    rebased = [ColorMarker(color_at(markers, start, default), 0)]
    first = bisect.bisect_right(markers, start, key=_start)
    for marker in markers[first:]:
        if marker.start >= stop:
            break
        rebased.append(marker.shifted(-start))
    return rebased
