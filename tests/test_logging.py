"""
Tests for sitewrap.logging module.
"""

from __future__ import annotations

import io

from sitewrap.logging import (
    DefaultLogger,
    SilentLogger,
    get_global_logger,
    get_logger,
    set_global_logger,
)


def test_step_always_printed() -> None:
    """Test that step lines are printed without verbose mode."""
    out = io.StringIO()
    DefaultLogger(stream=out).step(1, 3, "Locating app")

    assert out.getvalue() == "[1/3] Locating app\n"


def test_verbose_respects_flag() -> None:
    """Test that verbose lines need verbose mode."""
    quiet, loud = io.StringIO(), io.StringIO()
    DefaultLogger(stream=quiet).verbose("UPGRADE", "hidden")
    DefaultLogger(verbose=True, stream=loud).verbose("UPGRADE", "shown")

    assert quiet.getvalue() == ""
    assert loud.getvalue() == "[UPGRADE] shown\n"


def test_debug_implies_verbose() -> None:
    """Test that debug mode also prints verbose lines."""
    out = io.StringIO()
    logger = DefaultLogger(debug=True, stream=out)
    logger.verbose("CORE", "v")
    logger.debug("CORE", "d")

    assert out.getvalue() == "[CORE] v\n[CORE] d\n"


def test_warning_goes_to_error_stream() -> None:
    """Test that warnings are written to the error stream."""
    out, err = io.StringIO(), io.StringIO()
    DefaultLogger(stream=out, error_stream=err).warning("USERAGENT", "fallback")

    assert out.getvalue() == ""
    assert err.getvalue() == "[USERAGENT] WARNING: fallback\n"


def test_global_logger_round_trip() -> None:
    """Test that the global logger can be replaced."""
    logger = get_logger(verbose=True)
    set_global_logger(logger)

    assert get_global_logger() is logger

    set_global_logger(SilentLogger())
    assert isinstance(get_global_logger(), SilentLogger)
