"""Tests for the file-only loguru sink."""

from __future__ import annotations

import tempfile
import unittest
from pathlib import Path

from loguru import logger

from trypy.logs import setup_logging


class SetupLoggingTests(unittest.TestCase):
    def tearDown(self) -> None:
        logger.remove()

    def test_messages_at_or_above_level_reach_the_file(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "logs" / "trypy.log"

            self.assertEqual(setup_logging("info", path=path), path)
            logger.debug("hidden detail")
            logger.info("deleted /tries/old")
            logger.remove()

            contents = path.read_text(encoding="utf-8")

        self.assertIn("deleted /tries/old", contents)
        self.assertIn("INFO", contents)
        self.assertNotIn("hidden detail", contents)

    def test_unwritable_location_disables_logging(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            blocker = Path(tmp) / "file"
            blocker.write_text("", encoding="utf-8")

            self.assertIsNone(setup_logging(path=blocker / "trypy.log"))


if __name__ == "__main__":
    unittest.main()
