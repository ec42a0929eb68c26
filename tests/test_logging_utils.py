#!/usr/bin/env python3
"""Tests for console logging setup."""

import io
import logging
import unittest

from trello_aid_export.logging_utils import setup_cli_logging


class TestSetupCliLogging(unittest.TestCase):
    """Test setup_cli_logging."""

    def setUp(self):
        self.root_logger = logging.getLogger()
        self.saved_handlers = list(self.root_logger.handlers)
        self.saved_level = self.root_logger.level
        self.stream = io.StringIO()

    def tearDown(self):
        self.root_logger.handlers = self.saved_handlers
        self.root_logger.setLevel(self.saved_level)

    def test_handler_is_installed_once(self):
        first = setup_cli_logging(stream=self.stream)
        second = setup_cli_logging(verbose=True, stream=self.stream)

        self.assertIs(first, second)
        self.assertEqual(self.root_logger.handlers.count(first), 1)
        self.assertEqual(
            len(self.root_logger.handlers), len(self.saved_handlers) + 1
        )
        self.assertEqual(first.level, logging.DEBUG)

    def test_format_and_level(self):
        setup_cli_logging(stream=self.stream)

        log = logging.getLogger("trello_aid_export.test")
        log.debug("per-card detail")
        log.info("Wrote 3 rows to output.csv")

        self.assertEqual(self.stream.getvalue(), "INFO: Wrote 3 rows to output.csv\n")

    def test_noisy_loggers_are_quietened(self):
        setup_cli_logging(verbose=True, stream=self.stream)

        self.assertEqual(logging.getLogger("urllib3").level, logging.INFO)


if __name__ == "__main__":
    unittest.main()
