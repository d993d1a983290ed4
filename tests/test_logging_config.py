import logging
import os
import tempfile
import unittest

from video_hub_api.app.core.logging_config import QUIET_LOGGERS, setup_logging


class SetupLoggingTests(unittest.TestCase):
    def setUp(self):
        self.tmpdir = tempfile.TemporaryDirectory()
        self.root = logging.getLogger()
        self._saved = (self.root.handlers[:], self.root.level)
        self.root.handlers = []

    def tearDown(self):
        for handler in self.root.handlers:
            handler.close()
        self.root.handlers, level = self._saved
        self.root.setLevel(level)
        self.tmpdir.cleanup()

    def test_creates_log_directory_and_file_handler(self):
        logfile = os.path.join(self.tmpdir.name, "logs", "api.log")
        setup_logging("debug", logfile)

        self.assertEqual(self.root.level, logging.DEBUG)
        self.assertEqual(len(self.root.handlers), 2)
        logging.getLogger("video_hub_api.test").info("hello")
        for handler in self.root.handlers:
            handler.flush()
        with open(logfile, encoding="utf-8") as f:
            self.assertIn("[INFO] video_hub_api.test: hello", f.read())

    def test_second_call_adds_nothing(self):
        setup_logging("INFO")
        setup_logging("INFO")
        self.assertEqual(len(self.root.handlers), 1)

    def test_unknown_level_falls_back_to_info(self):
        setup_logging("loud")
        self.assertEqual(self.root.level, logging.INFO)

    def test_multipart_parser_is_quieted(self):
        setup_logging("DEBUG")
        for name in QUIET_LOGGERS:
            self.assertEqual(logging.getLogger(name).level, logging.WARNING)


if __name__ == "__main__":
    unittest.main()
