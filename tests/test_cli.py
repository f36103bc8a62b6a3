"""Tests for the command line entry point."""

import json

import pytest

from perceptual.cli import build_parser, main


@pytest.fixture(autouse=True)
def isolated_home(tmp_path, monkeypatch):
    monkeypatch.setenv("PERCEPTUAL_HOME", str(tmp_path))
    return tmp_path


def test_to_amp(capsys):
    assert main(["to-amp", "0.5", "100%"]) == 0
    out = capsys.readouterr().out.splitlines()
    assert out == ["50% -> 0.056234", "100% -> 1.000000"]


def test_to_amp_with_range(capsys):
    assert main(["--range", "60", "to-amp", "0.5"]) == 0
    assert capsys.readouterr().out.strip() == "50% -> 0.031623"


def test_to_perc(capsys):
    assert main(["--boost-range", "12", "to-perc", "1"]) == 0
    assert "100%" in capsys.readouterr().out


def test_bad_value_exit_code(capsys):
    assert main(["to-amp", "loudish"]) == 1
    assert "ERROR" in capsys.readouterr().err


def test_bad_range_exit_code(capsys):
    assert main(["--range", "0", "table"]) == 1
    assert "range_db" in capsys.readouterr().err


def test_table(capsys):
    assert main(["table", "--steps", "4"]) == 0
    assert len(capsys.readouterr().out.strip().splitlines()) == 6


def test_config_file(tmp_path, capsys):
    path = tmp_path / "prefs.json"
    path.write_text(json.dumps({"range_db": 60}), encoding="utf-8")
    assert main(["--config", str(path), "to-amp", "0.5"]) == 0
    assert capsys.readouterr().out.strip() == "50% -> 0.031623"


def test_argparse_errors_exit_2():
    with pytest.raises(SystemExit) as exc:
        main([])
    assert exc.value.code == 2
    with pytest.raises(SystemExit) as exc:
        main(["apply", "in.wav", "out.wav", "--level", "nonsense"])
    assert exc.value.code == 2


def test_parser_accepts_levels():
    args = build_parser().parse_args(["apply", "a.wav", "b.wav", "--level", "50%",
                                      "--fade-to", "quiet"])
    assert args.level == 0.5
    assert args.fade_to == 0.25


def test_repl(monkeypatch, capsys):
    lines = iter(["/vol 50%", "", "/amp 1", "/q"])
    monkeypatch.setattr("builtins.input", lambda prompt="": next(lines))
    assert main(["repl"]) == 0
    out = capsys.readouterr().out
    assert "Volume: 50%" in out
    assert "100% -> 1.000000" in out


def test_repl_eof(monkeypatch):
    def raise_eof(prompt=""):
        raise EOFError
    monkeypatch.setattr("builtins.input", raise_eof)
    assert main(["repl"]) == 0
