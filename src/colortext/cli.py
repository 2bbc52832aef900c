"""Command-line tool for colortext.

Renders markup to the terminal, re-encodes it, inspects runs, echoes stdin
and runs a short demo of the string operations.
"""

from __future__ import annotations

import argparse
import sys
from typing import TYPE_CHECKING

from rich.console import Console
from rich.table import Table
from rich.text import Text

from colortext import setup_logging
from colortext.annotated import AnnotatedString, SplitOptions, concat
from colortext.color import BLUE, RED, resolve_color
from colortext.config import get_settings
from colortext.errors import FormatError
from colortext.markup import ENCODE_FORMATS, encode_markup, parse_markup
from colortext.terminal import TerminalWriter, nearest_palette_color

if TYPE_CHECKING:
    from collections.abc import Sequence

console = Console(highlight=False)
err_console = Console(stderr=True, highlight=False)


def _writer() -> TerminalWriter:
    return TerminalWriter()


def _cmd_render(args: argparse.Namespace) -> int:
    writer = _writer()
    default = get_settings().color.default_color
    for markup in args.markup:
        writer.write_line(parse_markup(markup, default=default))
    return 0


def _cmd_encode(args: argparse.Namespace) -> int:
    default = get_settings().color.default_color
    value = parse_markup(args.markup, default=default)
    console.print(
        encode_markup(value, color_format=args.format, default=default),
        markup=False,
        soft_wrap=True,
    )
    return 0


def _cmd_runs(args: argparse.Namespace) -> int:
    value = parse_markup(args.markup, default=get_settings().color.default_color)
    table = Table(title=f"{value.run_count} run(s)")
    table.add_column("#", justify="right")
    table.add_column("Offset", justify="right")
    table.add_column("Text")
    table.add_column("Color")
    table.add_column("Palette")
    offset = 0
    for i, run in enumerate(value.render_runs()):
        entry = nearest_palette_color(run.color)
        table.add_row(
            str(i),
            str(offset),
            Text(repr(run.text)),
            run.color.format("hex-with-alpha"),
            Text(entry.name, style=entry.style),
        )
        offset += len(run.text)
    console.print(table)
    return 0


def _cmd_echo(args: argparse.Namespace) -> int:
    writer = _writer()
    color = resolve_color(args.color) if args.color else None
    for line in writer.iter_lines():
        writer.write_line(line if color is None else line.with_color(color))
    return 0


def _cmd_demo(_args: argparse.Namespace) -> int:
    writer = _writer()

    greeting = AnnotatedString("Hello, World!")
    writer.write_line(greeting.replace("World", BLUE.for_text("Universe")))

    word = concat(
        AnnotatedString("Hello "), RED.for_text("Word"), AnnotatedString("!")
    ).replace("or", BLUE.for_text("orl"))
    writer.write_line(word)

    for part in word.split("l", options=SplitOptions.REMOVE_EMPTY_ENTRIES):
        writer.write_line(part)

    padded = RED.for_text("right").pad_left(12).concat(BLUE.for_text("|"))
    writer.write_line(padded)
    writer.write_line(AnnotatedString(encode_markup(word)))
    return 0


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for all subcommands."""
    parser = argparse.ArgumentParser(
        prog="colortext",
        description="Render and inspect color-annotated text.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log debug output to stderr.",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    render = sub.add_parser("render", help="Render markup to the terminal.")
    render.add_argument("markup", nargs="+", help="Markup such as '>[#FF0000]hi'.")
    render.set_defaults(func=_cmd_render)

    encode = sub.add_parser("encode", help="Parse markup and print it normalised.")
    encode.add_argument("markup")
    encode.add_argument(
        "--format",
        choices=sorted(ENCODE_FORMATS),
        default=None,
        help="Color pattern style (default from COLORTEXT_MARKUP__COLOR_FORMAT).",
    )
    encode.set_defaults(func=_cmd_encode)

    runs = sub.add_parser("runs", help="Show the runs markup parses into.")
    runs.add_argument("markup")
    runs.set_defaults(func=_cmd_runs)

    echo = sub.add_parser("echo", help="Echo stdin lines, optionally colored.")
    echo.add_argument("--color", help="Color name or pattern, e.g. red or #00FF00.")
    echo.set_defaults(func=_cmd_echo)

    demo = sub.add_parser("demo", help="Show replace/split/pad on sample text.")
    demo.set_defaults(func=_cmd_demo)

    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    log_config = get_settings().log
    if args.verbose:
        log_config = log_config.model_copy(update={"level": "DEBUG"})
    setup_logging(log_config)

    try:
        return args.func(args)
    except FormatError as exc:
        err_console.print(Text.assemble(("Error: ", "red"), str(exc)))
        return 1


if __name__ == "__main__":
    sys.exit(main())
