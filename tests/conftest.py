"""Shared pytest fixtures for colortext tests."""

from __future__ import annotations

import io
import logging
import os
from typing import TYPE_CHECKING

import pytest
from rich.console import Console

import colortext
from colortext.config import Settings, get_settings
from colortext.terminal import TerminalWriter, get_writer

if TYPE_CHECKING:
    from collections.abc import Iterator


@pytest.fixture(autouse=True)
def _isolated_settings(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Drop COLORTEXT_* env vars and cached singletons around every test."""
    for key in list(os.environ):
        if key.startswith("COLORTEXT_"):
            monkeypatch.delenv(key)
    get_settings.cache_clear()
    get_writer.cache_clear()
    yield
    get_settings.cache_clear()
    get_writer.cache_clear()


@pytest.fixture(autouse=True)
def _reset_logging() -> Iterator[None]:
    """Remove handlers installed by setup_logging during a test."""
    yield
    root = logging.getLogger()
    for handler in colortext._installed_handlers:
        root.removeHandler(handler)
        handler.close()
    colortext._installed_handlers.clear()


@pytest.fixture
def settings() -> Settings:
    """Default settings that ignore any .env file."""
    return Settings(_env_file=None)  # type: ignore[call-arg]


@pytest.fixture
def output() -> io.StringIO:
    """Buffer a test console writes into."""
    return io.StringIO()


@pytest.fixture
def console(output: io.StringIO) -> Console:
    """A console that always emits 16-color ANSI codes into ``output``."""
    return Console(
        file=output,
        force_terminal=True,
        color_system="standard",
        width=200,
        highlight=False,
    )


@pytest.fixture
def writer(console: Console, settings: Settings) -> TerminalWriter:
    return TerminalWriter(console=console, settings=settings)
