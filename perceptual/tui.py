"""Perceptual volume Textual TUI (screen-reader friendly).

- Level readout
- Output log
- Command input (same slash commands as the REPL)
- Ctrl+Up/Ctrl+Down move the slider one step, Ctrl+T toggles mute

Run:
    perceptual tui
"""

from __future__ import annotations

from typing import Callable, Dict, List, Optional

from textual.app import App, ComposeResult
from textual.widgets import Header, Footer, Input, Log, Static

from .commands import build_command_table, execute
from .volume import VolumeControl


class VolumeTUI(App):
    CSS = """
    Screen { layout: vertical; }
    #level { height: 3; }
    #out { height: 1fr; }
    #cmd { height: 3; }
    """

    BINDINGS = [
        ("ctrl+up", "nudge(1)", "Up"),
        ("ctrl+down", "nudge(-1)", "Down"),
        ("ctrl+t", "toggle_mute", "Mute"),
        ("ctrl+q", "quit", "Quit"),
    ]

    def __init__(self, control: Optional[VolumeControl] = None) -> None:
        super().__init__()
        self.control = control if control is not None else VolumeControl()
        self.commands: Dict[str, Callable[[VolumeControl, List[str]], str]] = build_command_table()

    def compose(self) -> ComposeResult:
        yield Header(show_clock=False)
        yield Static(self.control.status(), id="level")
        yield Log(id="out", highlight=True)
        yield Input(placeholder="Command here, e.g. /vol 50%. /help lists commands.", id="cmd")
        yield Footer()

    def on_mount(self) -> None:
        self.query_one("#cmd", Input).focus()
        self._log("Perceptual volume ready. Ctrl+Up/Down moves the level.\n")

    def _log(self, text: str) -> None:
        self.query_one("#out", Log).write(text)

    def _refresh_level(self) -> None:
        self.query_one("#level", Static).update(self.control.status())

    def on_input_submitted(self, event: Input.Submitted) -> None:
        line = (event.value or "").strip()
        event.input.value = ""
        if not line:
            return
        self._log(f"> {line}\n")
        if line.lower() in ("/q", "/quit", "/exit"):
            self.exit()
            return
        out = execute(self.control, line, self.commands)
        if out:
            self._log(out + "\n")
        self._refresh_level()

    def action_nudge(self, steps: int) -> None:
        self.control.nudge(steps)
        self._refresh_level()

    def action_toggle_mute(self) -> None:
        self.control.toggle_mute()
        self._refresh_level()


def main(control: Optional[VolumeControl] = None) -> None:
    VolumeTUI(control).run()
