"""
Tests for secret-redacting logging.
"""

import logging

from cipherhub.core.logging import SecureLogFilter, configure_root_logger, get_secure_logger


def make_record(msg, args=()):
    return logging.LogRecord("test", logging.INFO, __file__, 1, msg, args, None)


class TestSecureLogFilter:
    def test_redacts_secret_assignment(self):
        record = make_record("derived secret=abcdef012345")
        SecureLogFilter().filter(record)
        assert "abcdef012345" not in record.getMessage()

    def test_redacts_key_argument(self):
        record = make_record("loaded %s", ("key=hunter2",))
        SecureLogFilter().filter(record)
        assert "hunter2" not in record.getMessage()

    def test_redacts_long_hex(self):
        record = make_record("value %s", ("ab" * 64,))
        SecureLogFilter().filter(record)
        assert "ab" * 64 not in record.getMessage()

    def test_redacts_bytes_arguments(self):
        record = make_record("raw %s", (b"\x00key-bytes",))
        SecureLogFilter().filter(record)
        assert record.getMessage() == "raw [REDACTED]"

    def test_keeps_plain_messages(self):
        record = make_record("Encryption handler initialized: driver=%s keyed=%s", ("Sodium", True))
        assert SecureLogFilter().filter(record) is True
        assert record.getMessage() == "Encryption handler initialized: driver=Sodium keyed=True"


class TestLoggerSetup:
    def test_single_handler(self):
        first = get_secure_logger("cipherhub.tests.single", level="DEBUG")
        second = get_secure_logger("cipherhub.tests.single")
        assert first is second
        assert len(first.handlers) == 1
        assert first.propagate is False

    def test_console_disabled(self):
        logger = get_secure_logger("cipherhub.tests.quiet", enable_console=False)
        assert logger.handlers == []

    def test_root_logger_has_filter(self):
        root = logging.getLogger()
        saved_handlers, saved_level = root.handlers[:], root.level
        try:
            configure_root_logger(level="WARNING")
            assert root.level == logging.WARNING
            assert any(isinstance(f, SecureLogFilter) for f in root.handlers[0].filters)
        finally:
            root.handlers[:] = saved_handlers
            root.setLevel(saved_level)
