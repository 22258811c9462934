"""
Unit tests for logging setup.
"""

import logging

from autoschedule.core.logger import setup_logger, setup_logging


def test_module_logger_is_namespaced_and_propagates(caplog):
    logger = setup_logger("services.example")

    assert logger.name == "autoschedule.services.example"
    assert setup_logger("autoschedule.api").name == "autoschedule.api"
    with caplog.at_level(logging.INFO, logger="autoschedule"):
        logger.info("placed 'Write report'")

    assert "placed 'Write report'" in caplog.text


def test_setup_logging_keeps_host_handlers():
    root = logging.getLogger()
    package = logging.getLogger("autoschedule")
    saved_handlers, saved_level = root.handlers[:], package.level
    host = logging.NullHandler()
    try:
        root.handlers = [host]
        setup_logging("debug")

        assert root.handlers == [host]
        assert package.level == logging.DEBUG
    finally:
        root.handlers = saved_handlers
        package.setLevel(saved_level)


def test_setup_logging_installs_handler_on_bare_root():
    root = logging.getLogger()
    package = logging.getLogger("autoschedule")
    saved_handlers, saved_level = root.handlers[:], package.level
    try:
        root.handlers = []
        setup_logging()

        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0], logging.StreamHandler)
        assert package.level == logging.INFO
    finally:
        root.handlers = saved_handlers
        package.setLevel(saved_level)
