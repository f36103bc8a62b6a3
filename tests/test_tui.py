"""Tests for the Textual TUI."""

import asyncio

import pytest

pytest.importorskip("textual")

from textual.widgets import Input  # noqa: E402

from perceptual.tui import VolumeTUI  # noqa: E402
from perceptual.volume import VolumeControl  # noqa: E402


def test_command_input_sets_level():
    control = VolumeControl(level=0.5)

    async def run():
        app = VolumeTUI(control)
        async with app.run_test() as pilot:
            app.query_one("#cmd", Input).value = "/vol 25%"
            await pilot.press("enter")
            await pilot.pause()

    asyncio.run(run())
    assert control.level == pytest.approx(0.25)


def test_nudge_and_mute_actions():
    control = VolumeControl(level=0.5, step=0.1)

    async def run():
        app = VolumeTUI(control)
        async with app.run_test() as pilot:
            app.action_nudge(1)
            app.action_toggle_mute()
            await pilot.pause()

    asyncio.run(run())
    assert control.muted
    control.unmute()
    assert control.level == pytest.approx(0.6)
