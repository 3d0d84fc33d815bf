# Copyright (c) 2026 TrailLensCo
# All rights reserved.
#
# This file is proprietary and confidential.
# Unauthorized copying, distribution, or use of this file,
# via any medium, is strictly prohibited without the express
# written permission of TrailLensCo.

"""Unit tests for logging_config module."""

import logging
import os
import shutil
import sys
import tempfile
import unittest
from logging.handlers import RotatingFileHandler

# Add src to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from logging_config import setup_logging


class TestSetupLogging(unittest.TestCase):
    """Tests for setup_logging."""

    def setUp(self):
        self.temp_dir = tempfile.mkdtemp()
        self.saved_handlers = list(logging.getLogger().handlers)

    def tearDown(self):
        root = logging.getLogger()
        for handler in root.handlers:
            handler.close()
        root.handlers[:] = self.saved_handlers
        shutil.rmtree(self.temp_dir)

    def test_console_only(self):
        """Test no log file is created without a directory."""
        path = setup_logging(log_level="WARNING")

        self.assertIsNone(path)
        handlers = logging.getLogger().handlers
        self.assertEqual(len(handlers), 1)
        self.assertIs(handlers[0].stream, sys.stderr)
        self.assertEqual(handlers[0].level, logging.WARNING)

    def test_file_logging(self):
        """Test a rotating log file is written in the directory."""
        path = setup_logging(
            log_level="INFO", log_directory=self.temp_dir, log_file_prefix="teste",
        )

        logging.getLogger("teste").debug("mensagem de depuração")
        for handler in logging.getLogger().handlers:
            handler.flush()

        self.assertTrue(os.path.basename(path).startswith("teste_"))
        self.assertTrue(any(
            isinstance(h, RotatingFileHandler) for h in logging.getLogger().handlers
        ))
        with open(path, encoding='utf-8') as f:
            self.assertIn("mensagem de depuração", f.read())

    def test_repeated_setup_replaces_handlers(self):
        """Test calling setup twice does not duplicate handlers."""
        setup_logging()
        setup_logging()

        self.assertEqual(len(logging.getLogger().handlers), 1)

    def test_no_handlers_enabled(self):
        """Test disabling the console leaves a null handler."""
        setup_logging(enable_console=False)

        handlers = logging.getLogger().handlers
        self.assertEqual(len(handlers), 1)
        self.assertIsInstance(handlers[0], logging.NullHandler)


if __name__ == '__main__':
    unittest.main()
