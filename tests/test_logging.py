import logging

import pytest

from healthaudit.utils import setup_logging


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    for handler in root.handlers:
        handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


def test_setup_logging_writes_file(tmp_path, restore_root_logger):
    log_file = tmp_path / "_logs" / "healthaudit.log"
    assert setup_logging(str(log_file), level="debug") == str(log_file)

    logging.getLogger("extractor").debug("raw oracle response")
    for handler in logging.getLogger().handlers:
        handler.flush()

    content = log_file.read_text()
    assert "DEBUG extractor - raw oracle response" in content
