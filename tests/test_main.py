"""Tests for the python -m bytestuff entry point."""

import io
import sys

import pytest
import structlog

from bytestuff.__main__ import main


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch, tmp_path):
    """Isolate from any real BYTESTUFF_* variables or .env file."""
    for var in ("VARIANT", "APPEND_DELIMITER", "MAX_FRAME_SIZE", "HEX", "LOG_LEVEL"):
        monkeypatch.delenv(f"BYTESTUFF_{var}", raising=False)
    monkeypatch.chdir(tmp_path)
    yield
    structlog.reset_defaults()
    structlog.contextvars.clear_contextvars()


def _stdin(monkeypatch, data: bytes):
    monkeypatch.setattr(sys, "stdin", io.TextIOWrapper(io.BytesIO(data)))


def test_encode_hex(monkeypatch, capsys):
    monkeypatch.setenv("BYTESTUFF_HEX", "true")
    _stdin(monkeypatch, b"2fa2009273 26\n")
    assert main(["encode"]) == 0
    assert capsys.readouterr().out == "032fa2049273" + "26\n"


def test_encode_hex_reduced_with_delimiter(monkeypatch, capsys):
    monkeypatch.setenv("BYTESTUFF_HEX", "true")
    monkeypatch.setenv("BYTESTUFF_VARIANT", "cobsr")
    monkeypatch.setenv("BYTESTUFF_APPEND_DELIMITER", "true")
    _stdin(monkeypatch, b"2fa200927326")
    assert main(["encode"]) == 0
    assert capsys.readouterr().out == "032fa226927300\n"


def test_encode_raw(monkeypatch, capsysbinary):
    _stdin(monkeypatch, b"\x11\x22\x00\x33")
    assert main(["encode"]) == 0
    assert capsysbinary.readouterr().out == b"\x03\x11\x22\x02\x33"


def test_encode_logs_to_stderr(monkeypatch, capsys):
    monkeypatch.setenv("BYTESTUFF_HEX", "true")
    _stdin(monkeypatch, b"00")
    main(["encode"])
    err = capsys.readouterr().err
    assert '"event": "encoded"' in err
    assert '"service": "encode"' in err


def test_decode_hex_multiple_frames(monkeypatch, capsys):
    monkeypatch.setenv("BYTESTUFF_HEX", "true")
    _stdin(monkeypatch, b"0311220233 00 0101")
    assert main(["decode"]) == 0
    assert capsys.readouterr().out == "11220033\n00\n"


def test_decode_raw(monkeypatch, capsysbinary):
    _stdin(monkeypatch, b"\x03\x11\x22\x02\x33\x00")
    assert main(["decode"]) == 0
    assert capsysbinary.readouterr().out == b"\x11\x22\x00\x33"


def test_decode_malformed_exits_nonzero(monkeypatch, capsys):
    monkeypatch.setenv("BYTESTUFF_HEX", "true")
    _stdin(monkeypatch, b"050102")
    assert main(["decode"]) == 1
    assert capsys.readouterr().out == ""


def test_unknown_command(capsys):
    assert main(["bogus"]) == 1
    err = capsys.readouterr().err
    assert "Unknown command: bogus" in err
    assert "Usage" in err


def test_no_command(capsys):
    assert main([]) == 1
    assert "Usage" in capsys.readouterr().err


@pytest.mark.parametrize("command", ["encode", "decode"])
@pytest.mark.parametrize("text", [b"zz", b"0", "éé".encode("utf-8")])
def test_bad_hex_input_exits_nonzero(monkeypatch, capsys, command, text):
    monkeypatch.setenv("BYTESTUFF_HEX", "true")
    _stdin(monkeypatch, text)
    assert main([command]) == 1
    captured = capsys.readouterr()
    assert captured.out == ""
    assert '"event": "invalid hex input"' in captured.err


def test_decode_raw_concatenates_payloads(monkeypatch, capsysbinary):
    _stdin(monkeypatch, b"\x02\x11\x00\x02\x22\x00")
    assert main(["decode"]) == 0
    assert capsysbinary.readouterr().out == b"\x11\x22"


def test_usage_explains_raw_decode_output(capsys):
    main([])
    assert "BYTESTUFF_HEX=1 for one hex line per frame" in capsys.readouterr().err
