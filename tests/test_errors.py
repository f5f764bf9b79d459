"""Tests for fatal diagnostic formatting."""

from __future__ import annotations

import errno
import termios
import unittest

from textselect.errors import describe_error, diagnostic, fatal


class DiagnosticTests(unittest.TestCase):
    def test_oserror_uses_strerror(self) -> None:
        exc = FileNotFoundError(errno.ENOENT, "No such file or directory", "x.txt")
        self.assertEqual(
            diagnostic("unable to open input-file", exc),
            "textselect: unable to open input-file: No such file or directory",
        )

    def test_termios_error_uses_message(self) -> None:
        exc = termios.error(errno.ENOTTY, "Inappropriate ioctl for device")
        self.assertEqual(describe_error(exc), "Inappropriate ioctl for device")

    def test_memory_error_has_readable_reason(self) -> None:
        self.assertEqual(describe_error(MemoryError()), "Cannot allocate memory")

    def test_step_without_cause(self) -> None:
        self.assertEqual(diagnostic("interrupted"), "textselect: interrupted")

    def test_fatal_builds_system_exit_with_message(self) -> None:
        exc = fatal("unable to draw screen", OSError(errno.EIO, "Input/output error"))
        self.assertIsInstance(exc, SystemExit)
        self.assertEqual(exc.code, "textselect: unable to draw screen: Input/output error")


if __name__ == "__main__":
    unittest.main()
