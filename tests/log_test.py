"""
Тесты модуля журнала.
"""

import logging
import unittest

from meshvox import log


def _raise_value_error():
    raise ValueError("boom")


class LogFacadeTest(unittest.TestCase):
    """Тесты для meshvox.log."""

    def tearDown(self):
        log.set_level(logging.NOTSET)

    def test_error_with_exception_and_context(self):
        """Исключение с контекстом пишется с префиксом и трассировкой."""
        try:
            _raise_value_error()
        except ValueError as e:
            with self.assertLogs(log.get_logger(), level=logging.ERROR) as captured:
                log.error(e, "Failed to load voxels")

        self.assertEqual(len(captured.records), 1)
        message = captured.records[0].getMessage()
        self.assertTrue(message.startswith("Failed to load voxels: ValueError: boom"))
        self.assertIn("Traceback (most recent call last)", message)
        self.assertIn("_raise_value_error", message)

    def test_warn_with_exception_without_context(self):
        """Без контекста сообщение начинается с типа исключения."""
        try:
            _raise_value_error()
        except ValueError as e:
            with self.assertLogs(log.get_logger(), level=logging.WARNING) as captured:
                log.warn(e)

        record = captured.records[0]
        self.assertEqual(record.levelno, logging.WARNING)
        self.assertTrue(record.getMessage().startswith("ValueError: boom"))

    def test_plain_messages(self):
        """Строковые сообщения на своих уровнях."""
        with self.assertLogs(log.get_logger(), level=logging.DEBUG) as captured:
            log.debug("d")
            log.info("i")
            log.warning("w")
            log.error("e")

        levels = [record.levelno for record in captured.records]
        self.assertEqual(levels, [logging.DEBUG, logging.INFO, logging.WARNING, logging.ERROR])
        self.assertEqual([r.getMessage() for r in captured.records], ["d", "i", "w", "e"])

    def test_exception_inside_handler(self):
        """exception() берёт текущее исключение."""
        with self.assertLogs(log.get_logger(), level=logging.ERROR) as captured:
            try:
                _raise_value_error()
            except ValueError:
                log.exception("Voxelization failed")

        record = captured.records[0]
        self.assertEqual(record.getMessage(), "Voxelization failed")
        self.assertIsNotNone(record.exc_info)

    def test_set_level(self):
        """set_level меняет порог логгера meshvox."""
        log.set_level("ERROR")

        logger = log.get_logger()
        self.assertEqual(logger.level, logging.ERROR)
        self.assertFalse(logger.isEnabledFor(logging.INFO))
        self.assertTrue(logger.isEnabledFor(logging.ERROR))


if __name__ == "__main__":
    unittest.main()
