"""Terminal control for the picker session.

Owns the controlling tty, raw-mode lifecycle, and alternate-screen switching.
Standard input and output stay untouched so they can carry data in and out.
"""

from __future__ import annotations

import contextlib
import logging
import os
import termios
import tty
from collections.abc import Sequence

from .errors import fatal
from .input import KeyEvent, KeyReader, key_event_for
from .render import DisplayRow, compose_frame
from .ui_theme import DEFAULT_THEME, UITheme

logger = logging.getLogger(__name__)

TTY_PATH = "/dev/tty"
STATUS_ROWS = 1


class TerminalController:
    """Manage the tty used for drawing frames and reading keys."""

    def __init__(self, tty_fd: int, theme: UITheme = DEFAULT_THEME, *, owns_fd: bool = False) -> None:
        """Capture tty state for ``tty_fd`` so it can be restored later."""
        self.tty_fd = tty_fd
        self.theme = theme
        self._owns_fd = owns_fd
        self._interactive = False
        self._keys = KeyReader(tty_fd)
        try:
            self._saved_tty_state = termios.tcgetattr(tty_fd)
        except termios.error as exc:
            raise fatal("unable to read terminal attributes", exc) from exc

    @classmethod
    def open(cls, path: str = TTY_PATH, theme: UITheme = DEFAULT_THEME) -> TerminalController:
        """Open the controlling terminal directly, independent of stdin/stdout."""
        try:
            fd = os.open(path, os.O_RDWR | os.O_NOCTTY)
        except OSError as exc:
            raise fatal("unable to open terminal", exc) from exc
        try:
            return cls(fd, theme, owns_fd=True)
        except BaseException:
            os.close(fd)
            raise

    def close(self) -> None:
        if self._owns_fd:
            self._owns_fd = False
            os.close(self.tty_fd)

    def _write(self, data: bytes) -> None:
        view = memoryview(data)
        while view:
            written = os.write(self.tty_fd, view)
            view = view[written:]

    def enter_interactive_mode(self) -> None:
        """Enter raw alternate-screen mode with the cursor hidden."""
        try:
            tty.setraw(self.tty_fd, termios.TCSAFLUSH)
            self._interactive = True
            self._write(b"\x1b[?1049h\x1b[?25l")
        except (OSError, termios.error) as exc:
            raise fatal("unable to enter interactive mode", exc) from exc

    def leave_interactive_mode(self) -> None:
        """Show the cursor, restore the main screen and the saved tty mode."""
        try:
            self._write(b"\x1b[?25h\x1b[?1049l")
            termios.tcsetattr(self.tty_fd, termios.TCSAFLUSH, self._saved_tty_state)
        except (OSError, termios.error) as exc:
            raise fatal("unable to leave interactive mode", exc) from exc
        finally:
            self._interactive = False

    @contextlib.contextmanager
    def interactive(self):
        """Bracket the session with enter/leave calls.

        When the body fails the terminal is restored on a best-effort basis and
        the original failure propagates.
        """
        try:
            self.enter_interactive_mode()
            yield self
        except BaseException:
            if self._interactive:
                with contextlib.suppress(SystemExit):
                    self.leave_interactive_mode()
            raise
        self.leave_interactive_mode()

    def _size(self) -> os.terminal_size:
        try:
            return os.get_terminal_size(self.tty_fd)
        except OSError as exc:
            raise fatal("unable to query terminal size", exc) from exc

    def get_viewport_height(self) -> int:
        """Rows available for lines, excluding the status bar."""
        return max(1, self._size().lines - STATUS_ROWS)

    def get_viewport_width(self) -> int:
        return max(1, self._size().columns)

    def read_next_key(self) -> KeyEvent:
        """Block until one key arrives and return its event."""
        try:
            token = self._keys.read_key()
        except OSError as exc:
            raise fatal("unable to read key", exc) from exc
        if token == "":
            raise fatal("unable to read key: terminal input closed")
        event = key_event_for(token)
        if event is KeyEvent.UNRECOGNIZED:
            logger.debug("ignoring key %r", token)
        return event

    def erase_and_redraw(self, rows: Sequence[DisplayRow], *, height: int, width: int, status: str = "") -> None:
        frame = compose_frame(list(rows), height, width, status, self.theme)
        try:
            self._write(frame.encode("utf-8", errors="replace"))
        except OSError as exc:
            raise fatal("unable to draw screen", exc) from exc
