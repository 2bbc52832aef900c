"""Tests for palette mapping and the terminal writer."""

from __future__ import annotations

import io

import pytest
from rich.console import Console

from colortext import terminal
from colortext.annotated import AnnotatedString
from colortext.color import BLACK, BLUE, DARK_RED, RED, WHITE, Color
from colortext.config import ColorConfig, Settings, TerminalConfig
from colortext.terminal import (
    CONSOLE_PALETTE,
    PaletteEntry,
    TerminalWriter,
    nearest_palette_color,
    to_rich_text,
)


class TestNearestPaletteColor:
    """Euclidean nearest match against the sixteen console colors."""

    @pytest.mark.parametrize("entry", CONSOLE_PALETTE, ids=lambda e: e.name)
    def test_exact_palette_colors_map_to_themselves(self, entry: PaletteEntry) -> None:
        assert nearest_palette_color(entry.color) == entry

    def test_near_red(self) -> None:
        assert nearest_palette_color(Color(200, 0, 0)).name == "red"

    def test_near_dark_red(self) -> None:
        assert nearest_palette_color(Color(100, 10, 10)).color == DARK_RED

    def test_alpha_ignored(self) -> None:
        assert nearest_palette_color(RED.with_alpha(0)).name == "red"

    def test_tie_goes_to_first_entry(self) -> None:
        # Equidistant (64) from black and dark_red
        assert nearest_palette_color(Color(64, 0, 0)).color == BLACK

    def test_custom_palette(self) -> None:
        palette = [PaletteEntry("a", BLUE, "blue"), PaletteEntry("b", RED, "red")]
        assert nearest_palette_color(Color(250, 5, 5), palette).name == "b"

    def test_empty_palette(self) -> None:
        with pytest.raises(ValueError, match="at least one"):
            nearest_palette_color(RED, [])


class TestToRichText:
    def test_one_span_per_run(self) -> None:
        value = AnnotatedString.from_runs([("ab", RED), ("cd", Color(0, 0, 200))])
        text = to_rich_text(value)
        assert text.plain == "abcd"
        assert [(s.start, s.end, s.style) for s in text.spans] == [
            (0, 2, "bright_red"),
            (2, 4, "bright_blue"),
        ]

    def test_empty(self) -> None:
        assert to_rich_text(AnnotatedString()).plain == ""


class TestTerminalWriter:
    """Writing through a forced-terminal console into a buffer."""

    def test_write_emits_ansi_per_run(
        self, writer: TerminalWriter, output: io.StringIO
    ) -> None:
        writer.write(AnnotatedString.from_runs([("Hello", RED), ("World", BLUE)]))
        out = output.getvalue()
        assert "\x1b[91mHello" in out
        assert "\x1b[94mWorld" in out
        assert out.endswith("\x1b[0m")

    def test_write_line_appends_newline(
        self, writer: TerminalWriter, output: io.StringIO
    ) -> None:
        writer.write_line(AnnotatedString("hi"))
        assert output.getvalue().endswith("\n")
        assert "hi" in output.getvalue()

    def test_markup_like_text_is_not_interpreted(
        self, writer: TerminalWriter, output: io.StringIO
    ) -> None:
        writer.write(AnnotatedString("[bold]x[/bold]"))
        assert "[bold]x[/bold]" in output.getvalue()

    def test_rejects_plain_str(self, writer: TerminalWriter) -> None:
        with pytest.raises(TypeError, match="AnnotatedString"):
            writer.write("hi")  # type: ignore[arg-type]

    def test_no_color_console(self, output: io.StringIO) -> None:
        console = Console(file=output, force_terminal=True, no_color=True)
        settings = Settings(_env_file=None)  # type: ignore[call-arg]
        TerminalWriter(console=console, settings=settings).write(
            RED.for_text("plain")
        )
        assert "\x1b[91m" not in output.getvalue()
        assert "plain" in output.getvalue()

    def test_default_console_follows_settings(self) -> None:
        settings = Settings(
            _env_file=None,  # type: ignore[call-arg]
            terminal=TerminalConfig(force_terminal=True, no_color=True),
        )
        writer = TerminalWriter(settings=settings)
        assert writer.console.is_terminal
        assert writer.console.no_color


class TestReading:
    """read_line / iter_lines wrap input in the default color."""

    def test_read_line_strips_newline(self, writer: TerminalWriter) -> None:
        value = writer.read_line(io.StringIO("first\r\nsecond\n"))
        assert value == AnnotatedString("first", WHITE)

    def test_read_line_at_eof(self, writer: TerminalWriter) -> None:
        assert writer.read_line(io.StringIO("")) == AnnotatedString()

    def test_blank_line_is_empty_not_eof(self, writer: TerminalWriter) -> None:
        stream = io.StringIO("\nlast")
        assert writer.read_line(stream) == AnnotatedString()
        assert writer.read_line(stream).text == "last"

    def test_iter_lines(self, writer: TerminalWriter) -> None:
        lines = list(writer.iter_lines(io.StringIO("a\nb\n")))
        assert [line.text for line in lines] == ["a", "b"]

    def test_default_color_from_settings(self, console: Console) -> None:
        settings = Settings(
            _env_file=None,  # type: ignore[call-arg]
            color=ColorConfig(default="red"),
        )
        writer = TerminalWriter(console=console, settings=settings)
        assert writer.read_line(io.StringIO("x\n")) == RED.for_text("x")


class TestModuleFunctions:
    """Module-level helpers go through the shared stdout writer."""

    def test_write_line(self, capsys: pytest.CaptureFixture[str]) -> None:
        terminal.write_line(AnnotatedString("shared"))
        terminal.write(AnnotatedString("!"))
        out = capsys.readouterr().out
        assert "shared" in out
        assert "!" in out

    def test_read_line(self) -> None:
        assert terminal.read_line(io.StringIO("z\n")).text == "z"

    def test_writer_is_cached(self) -> None:
        assert terminal.get_writer() is terminal.get_writer()
