"""Tests for the slash command handlers."""

import pytest

from perceptual.commands import (
    build_command_table,
    cmd_amp,
    cmd_boost,
    cmd_db,
    cmd_perc,
    cmd_range,
    cmd_table,
    execute,
)
from perceptual.volume import VolumeControl


@pytest.fixture
def control():
    return VolumeControl(level=0.5, step=0.1)


@pytest.fixture
def commands():
    return build_command_table()


def test_command_table(commands):
    for name in ("amp", "perc", "db", "vol", "up", "down", "mute", "unmute",
                 "table", "range", "boost", "status", "help"):
        assert name in commands


def test_amp(control):
    out = cmd_amp(control, ["0.5", "unity"])
    lines = out.splitlines()
    assert lines[0] == "50% -> 0.056234"
    assert lines[1] == "100% -> 1.000000"


def test_perc(control):
    out = cmd_perc(control, ["1"])
    assert out == "1.000000 -> 1.000000 (100%)"


def test_db(control):
    assert cmd_db(control, ["0.5"]) == "50% -> -25.0 dB"
    assert cmd_db(control, ["mute"]) == "0% -> -inf dB"
    cmd_db(control, ["set", "3"])
    assert control.level == pytest.approx(1.5)
    assert cmd_db(control, ["set"]).startswith("ERROR")
    assert cmd_db(control, ["set", "x"]).startswith("ERROR")


def test_conversion_errors(control):
    assert cmd_amp(control, []) == "ERROR: /amp requires at least 1 argument"
    assert cmd_amp(control, ["loudish"]) == "ERROR: invalid value 'loudish'"
    assert cmd_perc(control, ["-1"]).startswith("ERROR")


def test_level_commands(control, commands):
    assert "50%" in execute(control, "/vol", commands)
    execute(control, "/vol 75%", commands)
    assert control.level == pytest.approx(0.75)
    execute(control, "/up 2", commands)
    assert control.level == pytest.approx(0.95)
    execute(control, "/down", commands)
    assert control.level == pytest.approx(0.85)
    assert "MUTED" in execute(control, "/mute", commands)
    execute(control, "/unmute", commands)
    assert control.level == pytest.approx(0.85)
    assert execute(control, "/up x", commands) == "ERROR: invalid count 'x'"


def test_table(control):
    lines = cmd_table(control, ["4"]).splitlines()
    assert len(lines) == 6
    assert "-inf dB" in lines[1]
    assert "100%" in lines[3]
    assert "200%" in lines[-1]
    assert cmd_table(control, ["0"]).startswith("ERROR")


def test_table_without_boost(control):
    cmd_boost(control, ["off"])
    lines = cmd_table(control, ["2"]).splitlines()
    assert "100%" in lines[-1]


def test_range(control):
    assert cmd_range(control, []) == "Range: 50 dB"
    assert cmd_range(control, ["60"]) == "Range: 60 dB"
    assert control.range_db == 60.0
    assert cmd_range(control, ["-5"]).startswith("ERROR")
    assert control.range_db == 60.0
    assert cmd_range(control, ["wide"]) == "ERROR: invalid range 'wide'"


def test_boost(control):
    assert cmd_boost(control, []) == "Boost: 6 dB (on)"
    assert cmd_boost(control, ["12"]) == "Boost: 12 dB (on)"
    control.set_level(1.8)
    assert cmd_boost(control, ["off"]) == "Boost: 12 dB (off)"
    assert control.level == 1.0
    assert cmd_boost(control, ["on"]) == "Boost: 12 dB (on)"
    assert cmd_boost(control, ["0"]).startswith("ERROR")
    assert cmd_boost(control, ["lots"]).startswith("ERROR")


def test_execute_dispatch_errors(control, commands):
    assert execute(control, "vol", commands) == "ERROR: must start with /"
    assert execute(control, "/", commands) == "ERROR: empty command"
    assert execute(control, "/nope", commands) == "Unknown: nope"
    assert "Presets:" in execute(control, "/help", commands)


def test_vol_nan_is_an_error(control, commands):
    assert execute(control, "/vol nan", commands) == "ERROR: invalid value 'nan'"
    assert execute(control, "/amp inf", commands) == "ERROR: invalid value 'inf'"
    assert control.level == 0.5
