"""Tests for the CLI's JSON logging setup."""

import json
import sys

import pytest
import structlog

from bytestuff.logging_config import configure_logging


@pytest.fixture(autouse=True)
def _reset_structlog():
    yield
    structlog.reset_defaults()
    structlog.contextvars.clear_contextvars()


def _entries(text):
    return [json.loads(line) for line in text.strip().splitlines()]


def test_codec_event_rendered_as_json_line(capsys):
    configure_logging("encode")
    structlog.get_logger().info("encoded", variant="cobsr", input_size=6, output_size=6)
    (entry,) = _entries(capsys.readouterr().out)
    assert entry["event"] == "encoded"
    assert entry["variant"] == "cobsr"
    assert entry["input_size"] == 6
    assert entry["output_size"] == 6


def test_entry_carries_command_level_and_iso_time(capsys):
    configure_logging("decode")
    structlog.get_logger().warning("frame dropped")
    (entry,) = _entries(capsys.readouterr().out)
    assert entry["service"] == "decode"
    assert entry["level"] == "warning"
    assert "T" in entry["timestamp"]


def test_rebinding_replaces_previous_command(capsys):
    configure_logging("encode")
    configure_logging("decode")
    structlog.get_logger().info("decoded")
    (entry,) = _entries(capsys.readouterr().out)
    assert entry["service"] == "decode"


def test_threshold_hides_lower_levels(capsys):
    configure_logging("decode", level="warning")
    log = structlog.get_logger()
    log.info("decoded")
    log.error("invalid hex input")
    entries = _entries(capsys.readouterr().out)
    assert [e["event"] for e in entries] == ["invalid hex input"]


def test_stderr_keeps_stdout_free_for_data(capsys):
    configure_logging("encode", stream=sys.stderr)
    structlog.get_logger().info("encoded")
    captured = capsys.readouterr()
    assert captured.out == ""
    assert _entries(captured.err)[0]["event"] == "encoded"


def test_unknown_level_name_rejected():
    with pytest.raises(ValueError, match="Invalid log level"):
        configure_logging("encode", level="NOPE")
