import io
import logging

import structlog

from phind.logging_setup import configure_logging, install_library_defaults, level_for_verbosity


def test_level_for_verbosity():
    assert level_for_verbosity(0) == logging.WARNING
    assert level_for_verbosity(1) == logging.INFO
    assert level_for_verbosity(2) == logging.DEBUG
    assert level_for_verbosity(5) == logging.DEBUG


def test_configure_logging_writes_events_to_given_stream():
    stream = io.StringIO()
    configure_logging(verbosity=1, stream=stream)
    structlog.get_logger("phind.tests").info("walk_checked", paths=3)
    assert "walk_checked" in stream.getvalue()
    assert "paths=3" in stream.getvalue()
    assert logging.getLogger("phind").level == logging.INFO


def test_library_defaults_leave_existing_configuration():
    stream = io.StringIO()
    configure_logging(verbosity=1, stream=stream)
    install_library_defaults()
    structlog.get_logger("phind.tests").info("still_configured")
    assert "still_configured" in stream.getvalue()
