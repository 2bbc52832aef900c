"""Annotated strings: text overlaid with color markers.

``AnnotatedString`` is immutable. Every operation returns a new instance
whose marker list has been rebuilt through ``normalize_markers``; no code
path constructs an instance from an un-normalised list.

Concatenation is the explicit ``concat()`` function (or method); there is no
``+`` overload and no implicit conversion from ``str``.
"""

from __future__ import annotations

import logging
from enum import Flag, auto
from typing import TYPE_CHECKING

from colortext.color import WHITE, Color
from colortext.errors import RangeError
from colortext.markers import (
    ColorMarker,
    color_at,
    normalize_markers,
    shift_markers,
    slice_markers,
)
from colortext.render import Run, render_runs

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Iterator, Sequence

logger = logging.getLogger(__name__)

DEFAULT_COLOR = WHITE


class SplitOptions(Flag):
    """Options for ``AnnotatedString.split``."""

    NONE = 0
    REMOVE_EMPTY_ENTRIES = auto()
    TRIM_ENTRIES = auto()


def _require(value: object, what: str) -> AnnotatedString:
    if not isinstance(value, AnnotatedString):
        msg = (
            f"{what} must be an AnnotatedString, got {type(value).__name__}; "
            "wrap plain text with AnnotatedString.from_text()"
        )
        raise TypeError(msg)
    return value


class AnnotatedString:
    """Text plus a normalised list of color markers.

    A non-empty instance always has a marker at offset 0. The empty string
    has no markers.

    Args:
        text: The plain text.
        color: Color for the whole text. Defaults to white.
    """

    __slots__ = ("_markers", "_text")

    _text: str
    _markers: tuple[ColorMarker, ...]

    def __init__(self, text: str = "", color: Color | None = None) -> None:
        if not isinstance(text, str):
            msg = f"text must be str, got {type(text).__name__}"
            raise TypeError(msg)
        self._text = text
        self._markers = normalize_markers(
            [ColorMarker(DEFAULT_COLOR if color is None else color, 0)], len(text)
        )

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def _build(cls, text: str, markers: Iterable[ColorMarker]) -> AnnotatedString:
        """Create an instance from a candidate marker list.

        A default-colored marker is placed at offset 0 ahead of ``markers``
        so that explicit markers at 0 win and uncovered leading text gets
        the default color.
        """
        instance = cls.__new__(cls)
        instance._text = text
        instance._markers = normalize_markers(
            [ColorMarker(DEFAULT_COLOR, 0), *markers], len(text)
        )
        return instance

    @classmethod
    def from_text(cls, text: str) -> AnnotatedString:
        """Wrap plain text in the default color."""
        return cls(text)

    @classmethod
    def from_markers(
        cls, text: str, markers: Iterable[ColorMarker]
    ) -> AnnotatedString:
        """Build from text and an arbitrary marker list.

        The list is normalised: out-of-range markers are dropped, duplicate
        offsets resolve to the later marker, and repeated colors merge.
        """
        return cls._build(text, markers)

    @classmethod
    def from_runs(cls, runs: Iterable[tuple[str, Color]]) -> AnnotatedString:
        """Build from ``(text, color)`` pairs in order."""
        parts: list[str] = []
        markers: list[ColorMarker] = []
        offset = 0
        for text, color in runs:
            markers.append(ColorMarker(color, offset))
            parts.append(text)
            offset += len(text)
        return cls._build("".join(parts), markers)

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def text(self) -> str:
        return self._text

    @property
    def markers(self) -> tuple[ColorMarker, ...]:
        return self._markers

    def to_text(self) -> str:
        """Return the plain text with all color information dropped."""
        return self._text

    def color_at(self, index: int) -> Color:
        """Return the color of the character at ``index``.

        Raises:
            RangeError: If ``index`` is outside the text.
        """
        length = len(self._text)
        if index < 0:
            index += length
        if not 0 <= index < length:
            msg = f"Character index {index} out of range for length {length}"
            raise RangeError(msg)
        return color_at(self._markers, index, DEFAULT_COLOR)

    def render_runs(self) -> list[Run]:
        """Return the ordered ``(text, color)`` runs."""
        return render_runs(self._text, self._markers, DEFAULT_COLOR)

    @property
    def run_count(self) -> int:
        return len(self._markers)

    def run(self, index: int) -> Run:
        """Return the run at ``index`` (negative indices count from the end).

        Raises:
            RangeError: If ``index`` is outside ``[-run_count, run_count)``.
        """
        runs = self.render_runs()
        if not -len(runs) <= index < len(runs):
            msg = f"Run index {index} out of range for {len(runs)} run(s)"
            raise RangeError(msg)
        return runs[index]

    # ------------------------------------------------------------------
    # Python protocol
    # ------------------------------------------------------------------

    def __len__(self) -> int:
        return len(self._text)

    def __bool__(self) -> bool:
        return bool(self._text)

    def __iter__(self) -> Iterator[Run]:
        return iter(self.render_runs())

    def __str__(self) -> str:
        return self._text

    def __repr__(self) -> str:
        runs = ", ".join(f"({r.text!r}, {r.color!r})" for r in self.render_runs())
        return f"AnnotatedString.from_runs([{runs}])"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, AnnotatedString):
            return NotImplemented
        return self._text == other._text and self._markers == other._markers

    def __hash__(self) -> int:
        return hash((self._text, self._markers))

    def __getitem__(self, key: int | slice) -> AnnotatedString:
        if isinstance(key, slice):
            start, stop, step = key.indices(len(self._text))
            if step == 1:
                return self.substring(start, stop)
            positions = range(start, stop, step)
            return AnnotatedString.from_runs(
                (self._text[i], color_at(self._markers, i, DEFAULT_COLOR))
                for i in positions
            )
        color = self.color_at(key)
        return AnnotatedString(self._text[key], color)

    # ------------------------------------------------------------------
    # String algebra
    # ------------------------------------------------------------------

    def concat(self, *others: AnnotatedString) -> AnnotatedString:
        """Append ``others`` to this string. See :func:`concat`."""
        return concat(self, *others)

    def substring(self, start: int, stop: int | None = None) -> AnnotatedString:
        """Return ``text[start:stop]`` with markers rebased to the cut.

        Indices follow ``str`` slicing (negative values count from the end
        and out-of-range values are clamped). The color active at ``start``
        is re-anchored at offset 0.
        """
        start, stop, _ = slice(start, stop).indices(len(self._text))
        return AnnotatedString._build(
            self._text[start:stop],
            slice_markers(self._markers, start, stop, DEFAULT_COLOR),
        )

    def pad_left(self, width: int, fillchar: str = " ") -> AnnotatedString:
        """Right-align in ``width`` characters.

        The padding takes the color of the first run; every marker shifts by
        the pad width so colors keep pointing at the same characters.
        """
        pad = width - len(self._text)
        if pad <= 0:
            return self
        padded = self._text.rjust(width, fillchar)
        lead = [ColorMarker(self._markers[0].color, 0)] if self._markers else []
        return AnnotatedString._build(padded, lead + shift_markers(self._markers, pad))

    def pad_right(self, width: int, fillchar: str = " ") -> AnnotatedString:
        """Left-align in ``width`` characters; the last run absorbs the padding."""
        if width <= len(self._text):
            return self
        return AnnotatedString._build(self._text.ljust(width, fillchar), self._markers)

    def replace(
        self, old: str, replacement: AnnotatedString, count: int = -1
    ) -> AnnotatedString:
        """Replace occurrences of plain text ``old`` with ``replacement``.

        Matches are found left to right without overlap, like ``str.replace``.
        The inserted segment keeps its own colors; after it, the color the
        original text had right after the match resumes.

        Args:
            old: Plain text to search for. Must not be empty.
            replacement: Annotated text to splice in.
            count: Maximum number of replacements; negative means all.

        Example:
            >>> from colortext.color import BLUE
            >>> s = AnnotatedString("Hello, World!")
            >>> s = s.replace("World", BLUE.for_text("Universe"))
            >>> [(r.text, str(r.color)) for r in s]
            [('Hello, ', '#FFFFFF'), ('Universe', '#0000FF'), ('!', '#FFFFFF')]
        """
        _require(replacement, "replacement")
        if not old:
            msg = "replace() needs a non-empty substring to search for"
            raise ValueError(msg)

        text = self._text
        length = len(text)
        parts: list[str] = []
        markers: list[ColorMarker] = []
        delta = 0
        pos = 0
        replaced = 0

        def carry(start: int, stop: int) -> None:
            parts.append(text[start:stop])
            markers.extend(
                m.shifted(delta) for m in self._markers if start <= m.start < stop
            )

        while count < 0 or replaced < count:
            hit = text.find(old, pos)
            if hit == -1:
                break
            carry(pos, hit)
            insert_at = hit + delta
            before = color_at(self._markers, max(hit - 1, 0), DEFAULT_COLOR)
            markers.append(ColorMarker(before, insert_at))
            markers.extend(shift_markers(replacement.markers, insert_at))
            parts.append(replacement.text)

            match_end = hit + len(old)
            delta += len(replacement) - len(old)
            if match_end < length:
                resume = color_at(self._markers, match_end, DEFAULT_COLOR)
                markers.append(ColorMarker(resume, match_end + delta))
            pos = match_end
            replaced += 1

        if not replaced:
            return self
        carry(pos, length)
        logger.debug("Replaced %d occurrence(s) of %r", replaced, old)
        return AnnotatedString._build("".join(parts), markers)

    def split(
        self,
        separators: str | Sequence[str],
        limit: int = 0,
        options: SplitOptions = SplitOptions.NONE,
    ) -> list[AnnotatedString]:
        """Split on any of ``separators``.

        At each position the first listed separator that matches wins.
        Each segment carries the color active where it starts.

        Args:
            separators: A separator or a sequence of them. Empty strings are
                ignored; with none left the whole string is one segment.
            limit: If positive, the maximum number of segments. Once
                ``limit - 1`` segments are produced, the rest of the text is
                returned unsplit as the last segment.
            options: ``TRIM_ENTRIES`` strips whitespace from each segment,
                ``REMOVE_EMPTY_ENTRIES`` drops empty segments (after trimming).
        """
        if isinstance(separators, str):
            separators = [separators]
        seps = [s for s in separators if s]
        trim = SplitOptions.TRIM_ENTRIES in options
        remove_empty = SplitOptions.REMOVE_EMPTY_ENTRIES in options

        segments: list[AnnotatedString] = []

        def emit(start: int, stop: int) -> None:
            segment = self.substring(start, stop)
            if trim:
                segment = segment.trim()
            if remove_empty and not segment:
                return
            segments.append(segment)

        text = self._text
        start = 0
        i = 0
        while seps and i < len(text):
            if limit > 0 and len(segments) >= limit - 1:
                break
            match = next((s for s in seps if text.startswith(s, i)), None)
            if match is None:
                i += 1
                continue
            emit(start, i)
            i += len(match)
            start = i
        emit(start, len(text))

        logger.debug("Split into %d segment(s)", len(segments))
        return segments

    def join(self, parts: Iterable[AnnotatedString]) -> AnnotatedString:
        """Concatenate ``parts`` with this string between them."""
        return join(self, parts)

    def _strip(
        self, chars: str | None, leading: bool, trailing: bool
    ) -> AnnotatedString:
        matches: Callable[[str], bool] = (
            str.isspace if chars is None else chars.__contains__
        )
        text = self._text
        start = 0
        stop = len(text)
        if leading:
            while start < stop and matches(text[start]):
                start += 1
        if trailing:
            while stop > start and matches(text[stop - 1]):
                stop -= 1
        if start == 0 and stop == len(text):
            return self
        return self.substring(start, stop)

    def trim(self, chars: str | None = None) -> AnnotatedString:
        """Strip leading and trailing whitespace (or ``chars``)."""
        return self._strip(chars, leading=True, trailing=True)

    def trim_start(self, chars: str | None = None) -> AnnotatedString:
        """Strip leading whitespace (or ``chars``)."""
        return self._strip(chars, leading=True, trailing=False)

    def trim_end(self, chars: str | None = None) -> AnnotatedString:
        """Strip trailing whitespace (or ``chars``)."""
        return self._strip(chars, leading=False, trailing=True)

    # ------------------------------------------------------------------
    # Color and case transforms
    # ------------------------------------------------------------------

    def recolor(self, mapping: Callable[[Color], Color]) -> AnnotatedString:
        """Rebuild the marker list with ``mapping`` applied to every color."""
        return AnnotatedString._build(
            self._text, [ColorMarker(mapping(m.color), m.start) for m in self._markers]
        )

    def with_color(self, color: Color) -> AnnotatedString:
        """Return the same text in a single color."""
        return AnnotatedString(self._text, color)

    def upper(self) -> AnnotatedString:
        """Upper-case each run separately, so length changes keep colors aligned."""
        return AnnotatedString.from_runs((r.text.upper(), r.color) for r in self)

    def lower(self) -> AnnotatedString:
        """Lower-case each run separately."""
        return AnnotatedString.from_runs((r.text.lower(), r.color) for r in self)

    # Plain-text queries
    def find(self, sub: str, start: int = 0) -> int:
        return self._text.find(sub, start)

    def startswith(self, prefix: str) -> bool:
        return self._text.startswith(prefix)

    def endswith(self, suffix: str) -> bool:
        return self._text.endswith(suffix)


def concat(*parts: AnnotatedString) -> AnnotatedString:
    """Concatenate annotated strings.

    Each part's markers shift by the combined length of the parts before it.
    Markers landing on the same offset resolve last-write-wins, which only
    happens when an earlier part is empty.
    """
    texts: list[str] = []
    markers: list[ColorMarker] = []
    offset = 0
    for part in parts:
        _require(part, "concat() argument")
        texts.append(part.text)
        markers.extend(shift_markers(part.markers, offset))
        offset += len(part)
    return AnnotatedString._build("".join(texts), markers)


def join(
    separator: AnnotatedString, parts: Iterable[AnnotatedString]
) -> AnnotatedString:
    """Concatenate ``parts`` with ``separator`` between consecutive items."""
    _require(separator, "separator")
    pieces: list[AnnotatedString] = []
    for i, part in enumerate(parts):
        if i:
            pieces.append(separator)
        pieces.append(part)
    return concat(*pieces)
