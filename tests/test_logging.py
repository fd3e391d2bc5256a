"""
Tests for moveitup.logging module.
"""

from __future__ import annotations

from moveitup.logging import (
    DefaultLogger,
    SilentLogger,
    get_global_logger,
    get_logger,
    set_global_logger,
)


def test_default_logger_levels(capsys):
    """Test which levels print for a plain logger."""
    logger = DefaultLogger()
    logger.step(1, 5, "Authenticating...")
    logger.verbose("HTTP", "hidden")
    logger.debug("HTTP", "hidden")
    logger.error("boom")

    captured = capsys.readouterr()
    assert captured.out == "[1/5] Authenticating...\n"
    assert captured.err == "Error: boom\n"


def test_debug_implies_verbose(capsys):
    """Test that debug mode also prints verbose messages."""
    logger = get_logger(debug=True)
    logger.verbose("HTTP", "GET /x")
    logger.debug("HTTP", "body")

    assert capsys.readouterr().out == "[HTTP] GET /x\n[HTTP] body\n"


def test_silent_logger_prints_nothing(capsys):
    """Test that SilentLogger suppresses every level."""
    logger = SilentLogger()
    logger.step(1, 1, "x")
    logger.verbose("A", "x")
    logger.debug("A", "x")
    logger.error("x")

    captured = capsys.readouterr()
    assert captured.out == captured.err == ""


def test_global_logger_roundtrip():
    """Test that set_global_logger changes get_global_logger."""
    assert isinstance(get_global_logger(), SilentLogger)

    logger = DefaultLogger(verbose=True)
    set_global_logger(logger)

    assert get_global_logger() is logger
