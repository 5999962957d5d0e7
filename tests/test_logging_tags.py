"""Tests for logging tags in session output ([•] edit, [>] play, [✓] / [!] persistence)."""

from __future__ import annotations

import contextlib
import io

import pytest

from tilesmith.logging_utils import Color, colored, log_error, log_info
from tilesmith.paint import Tool
from tilesmith.persistence import InMemoryPersistence
from tilesmith.session import PLAY_HINT, EditorSession


def _capture(fn, *args) -> str:
    buf = io.StringIO()
    with contextlib.redirect_stdout(buf):
        fn(*args)
    return buf.getvalue()


def test_edit_operations_use_edit_tag():
    session = EditorSession()

    out = _capture(session.select_tool, Tool.ERASE)
    out += _capture(session.toggle_visible, "enemies")

    assert "[•] Tool: erase" in out
    assert "[•] Layer 'enemies' hidden" in out


def test_play_transitions_use_play_tag():
    session = EditorSession()

    out = _capture(session.enter_play)
    out += _capture(session.exit_play)

    assert f"[>] Playtest started at (2, 8). {PLAY_HINT}" in out
    assert "[>] Playtest stopped after 0 ticks" in out


@pytest.mark.asyncio
async def test_save_and_failed_load_tags():
    session = EditorSession(persistence=InMemoryPersistence())

    buf = io.StringIO()
    with contextlib.redirect_stdout(buf):
        assert await session.load() is False
        await session.save()
    out = buf.getvalue()

    assert "[!] No saved level found" in out
    assert "[✓] Level saved!" in out


@pytest.mark.asyncio
async def test_invalid_blob_reports_reason():
    persistence = InMemoryPersistence()
    await persistence.save("not json")
    session = EditorSession(persistence=persistence)

    buf = io.StringIO()
    with contextlib.redirect_stdout(buf):
        await session.load()

    assert "[!] No level loaded: blob is not valid JSON" in buf.getvalue()


def test_quiet_level_silences_all_but_errors(monkeypatch):
    monkeypatch.setenv("LOG_LEVEL", "QUIET")

    assert _capture(log_info, "hidden") == ""
    assert "[!] shown" in _capture(log_error, "shown")


def test_colored_respects_no_color(monkeypatch):
    monkeypatch.delenv("TILESMITH_NO_COLOR", raising=False)
    assert colored("x", Color.RED) == f"{Color.RED.value}x{Color.RESET.value}"
    assert colored("x", Color.RED, bold=True).startswith(Color.BOLD.value)

    monkeypatch.setenv("TILESMITH_NO_COLOR", "1")
    assert colored("x", Color.RED) == "x"
