"""Tests for operation-aware logging setup."""

import logging

import pytest

from vagabond.config_schema import LoggingConfig
from vagabond.logging_utils import (
    OperationFilter, clear_operation_context, get_operation_context,
    set_operation_context, setup_main_logging
)


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    for handler in root.handlers[:]:
        root.removeHandler(handler)
        handler.close()
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(level)


class TestOperationContext:

    def test_set_and_clear(self):
        set_operation_context('apply')
        assert get_operation_context() == 'apply'

        clear_operation_context()
        assert get_operation_context() is None

    def test_filter_adds_operation(self):
        record = logging.LogRecord('t', logging.INFO, __file__, 1, "msg", None, None)

        set_operation_context('rollback')
        OperationFilter().filter(record)
        clear_operation_context()

        assert record.operation == 'rollback'

    def test_filter_without_operation(self):
        record = logging.LogRecord('t', logging.INFO, __file__, 1, "msg", None, None)

        OperationFilter().filter(record)

        assert record.operation == 'no_operation'


class TestSetupMainLogging:

    def test_writes_to_rotating_file(self, tmp_path, restore_root_logger):
        log_file = tmp_path / 'logs' / 'vagabond.log'
        setup_main_logging(LoggingConfig(log_file=log_file))

        set_operation_context('apply')
        logging.getLogger('vagabond.test').info("Applied A with password=hunter2")
        clear_operation_context()
        for handler in logging.getLogger().handlers:
            handler.flush()

        text = log_file.read_text(encoding='utf-8')
        assert "[apply]" in text
        assert "Applied A" in text
        assert "hunter2" not in text

    def test_debug_flag_overrides_level(self, tmp_path, restore_root_logger):
        setup_main_logging(LoggingConfig(log_file=tmp_path / 'v.log'), debug=True)

        assert logging.getLogger().level == logging.DEBUG
        assert logging.getLogger('cassandra').level == logging.WARNING
