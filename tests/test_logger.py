# File: tests/test_logger.py
import logging
import sys
from logging.handlers import RotatingFileHandler

import pytest

from doc_scout.logger import LOGGER_NAME, configure, get_logger


@pytest.fixture()
def restore_logger():
    root = logging.getLogger(LOGGER_NAME)
    saved = (list(root.handlers), root.level, root.propagate)
    yield root
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()
    handlers, level, propagate = saved
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(level)
    root.propagate = propagate


def test_child_loggers_hang_off_package_logger():
    assert get_logger().name == LOGGER_NAME
    assert get_logger("crawler").name == f"{LOGGER_NAME}.crawler"
    assert get_logger("crawler").parent is logging.getLogger(LOGGER_NAME)


def test_console_goes_to_stderr(restore_logger):
    root = configure(level="DEBUG")
    assert root is restore_logger
    assert root.level == logging.DEBUG
    assert not root.propagate
    assert len(root.handlers) == 1
    assert root.handlers[0].stream is sys.stderr


def test_file_handler_rotates_and_receives_records(restore_logger, tmp_path):
    log_file = tmp_path / "scout.log"
    configure(level="INFO", log_file=log_file, log_format="%(name)s:%(message)s")
    get_logger("engine").info("hello file")
    for handler in restore_logger.handlers:
        handler.flush()

    file_handlers = [h for h in restore_logger.handlers if isinstance(h, RotatingFileHandler)]
    assert len(file_handlers) == 1
    assert file_handlers[0].maxBytes == 5 * 1024 * 1024
    assert "DocScout.engine:hello file" in log_file.read_text(encoding="utf-8")


def test_replace_handlers_false_appends(restore_logger):
    configure(level="INFO")
    configure(level="INFO", replace_handlers=False)
    assert len(restore_logger.handlers) == 2
    configure(level="INFO")
    assert len(restore_logger.handlers) == 1
