"""Tests for the colortext command line tool."""

from __future__ import annotations

import io
import logging

import pytest

import colortext
from colortext.cli import build_parser, main


class TestParser:
    def test_subcommand_required(self) -> None:
        with pytest.raises(SystemExit):
            build_parser().parse_args([])

    def test_unknown_format_rejected(self) -> None:
        with pytest.raises(SystemExit):
            build_parser().parse_args(["encode", "x", "--format", "cmyk"])


class TestEncode:
    def test_normalises_markup(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert main(["encode", ">[255,0,0]a>[#FF0000]b>[0,0,255]c"]) == 0
        assert capsys.readouterr().out.strip() == ">[#FF0000]ab>[#0000FF]c"

    def test_format_option(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert main(["encode", "--format", "decimal", ">[#FF0000]a"]) == 0
        assert capsys.readouterr().out.strip() == ">[255,0,0,255]a"

    def test_untagged_text_gets_default(
        self, capsys: pytest.CaptureFixture[str], monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("COLORTEXT_COLOR__DEFAULT", "green")
        assert main(["encode", "plain"]) == 0
        assert capsys.readouterr().out.strip() == ">[#00FF00]plain"

    def test_escape_survives(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert main(["encode", ">>[x"]) == 0
        assert capsys.readouterr().out.strip() == ">[#FFFFFF]>>[x"


class TestErrors:
    def test_unterminated_tag(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert main(["render", ">[#FF0000"]) == 1
        err = capsys.readouterr().err
        assert "Error:" in err
        assert "Unterminated" in err

    def test_bad_echo_color(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert main(["echo", "--color", "mauve"]) == 1
        assert "mauve" in capsys.readouterr().err


class TestCommands:
    def test_render(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert main(["render", ">[#FF0000]Hello>[#0000FF]World", "second"]) == 0
        out = capsys.readouterr().out
        assert "HelloWorld" in out
        assert "second" in out

    def test_runs_table(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert main(["runs", ">[#FF0000]Hello>[#0000C8]World"]) == 0
        out = capsys.readouterr().out
        assert "2 run(s)" in out
        assert "#FF0000FF" in out
        assert "'World'" in out
        assert "blue" in out

    def test_echo(
        self, capsys: pytest.CaptureFixture[str], monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setattr("sys.stdin", io.StringIO("one\ntwo\n"))
        assert main(["echo", "--color", "red"]) == 0
        assert capsys.readouterr().out.split() == ["one", "two"]

    def test_demo(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert main(["demo"]) == 0
        out = capsys.readouterr().out
        assert "Hello, Universe!" in out
        assert "Hello World!" in out
        assert ">[#0000FF]orl" in out

    def test_verbose_enables_debug(self) -> None:
        assert main(["-v", "encode", "x"]) == 0
        assert colortext._installed_handlers[0].level == logging.DEBUG

    def test_log_level_from_settings(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("COLORTEXT_LOG__LEVEL", "ERROR")
        assert main(["encode", "x"]) == 0
        assert colortext._installed_handlers[0].level == logging.ERROR
