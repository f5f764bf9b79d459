"""Low-level terminal input decoding.

Reads raw bytes from the tty and translates them into normalized key tokens,
then maps tokens onto the picker's key events.
Handles ESC-sequence timing for arrow, paging, and home/end keys.
"""

from __future__ import annotations

import os
import select
from enum import Enum

ESC_SEQUENCE_TIMEOUT_MS = 25
MAX_CSI_LENGTH = 16

_CSI_FINAL_KEYS = {
    b"A": "UP",
    b"B": "DOWN",
    b"C": "RIGHT",
    b"D": "LEFT",
    b"H": "HOME",
    b"F": "END",
}

_CSI_TILDE_KEYS = {
    b"1": "HOME",
    b"7": "HOME",
    b"4": "END",
    b"8": "END",
    b"5": "PAGE_UP",
    b"6": "PAGE_DOWN",
}


class KeyEvent(Enum):
    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"
    PAGE_UP = "page_up"
    PAGE_DOWN = "page_down"
    HOME = "home"
    END = "end"
    TOGGLE_INVERT = "toggle_invert"
    TOGGLE_CURRENT = "toggle_current"
    QUIT = "quit"
    INTERRUPT = "interrupt"
    UNRECOGNIZED = "unrecognized"


KEY_BINDINGS: dict[str, KeyEvent] = {
    "UP": KeyEvent.UP,
    "k": KeyEvent.UP,
    "DOWN": KeyEvent.DOWN,
    "j": KeyEvent.DOWN,
    "LEFT": KeyEvent.LEFT,
    "RIGHT": KeyEvent.RIGHT,
    "PAGE_UP": KeyEvent.PAGE_UP,
    "PAGE_DOWN": KeyEvent.PAGE_DOWN,
    "HOME": KeyEvent.HOME,
    "g": KeyEvent.HOME,
    "END": KeyEvent.END,
    "G": KeyEvent.END,
    "v": KeyEvent.TOGGLE_INVERT,
    " ": KeyEvent.TOGGLE_CURRENT,
    "ENTER": KeyEvent.QUIT,
    "q": KeyEvent.QUIT,
    "CTRL_C": KeyEvent.INTERRUPT,
}


def key_event_for(token: str) -> KeyEvent:
    return KEY_BINDINGS.get(token, KeyEvent.UNRECOGNIZED)


def _read_ready_byte(fd: int, timeout_ms: int) -> bytes | None:
    ready, _, _ = select.select([fd], [], [], max(0.0, timeout_ms / 1000.0))
    if not ready:
        return None
    ch = os.read(fd, 1)
    if not ch:
        return None
    return ch


def _read_csi(fd: int) -> str:
    """Decode the remainder of ``ESC [`` up to its final byte."""
    params = b""
    while len(params) < MAX_CSI_LENGTH:
        part = _read_ready_byte(fd, ESC_SEQUENCE_TIMEOUT_MS)
        if part is None:
            return "ESC"
        if b"\x40" <= part <= b"\x7e":
            if part == b"~":
                return _CSI_TILDE_KEYS.get(params.split(b";", 1)[0], "ESC")
            return _CSI_FINAL_KEYS.get(part, "ESC")
        params += part
    return "ESC"


class KeyReader:
    """Decode key tokens from one tty fd.

    A byte read while checking whether ESC starts a sequence is kept and
    returned by the next read, so ``ESC q`` yields ``ESC`` then ``q``.
    """

    def __init__(self, fd: int) -> None:
        self.fd = fd
        self._pending: list[bytes] = []

    def read_key(self, timeout_ms: int | None = None) -> str:
        """Read one key token.

        Returns ``""`` on timeout or end of input. Printable bytes come back
        as the decoded character; control keys and escape sequences as
        upper-case names (``UP``, ``PAGE_DOWN``, ``ENTER``, ``CTRL_C``, ``ESC``).
        """
        fd = self.fd
        if self._pending:
            ch = self._pending.pop(0)
        else:
            if timeout_ms is not None:
                ready, _, _ = select.select([fd], [], [], max(0.0, timeout_ms / 1000.0))
                if not ready:
                    return ""

            ch = os.read(fd, 1)
            if not ch:
                return ""

        if ch in {b"\r", b"\n"}:
            return "ENTER"
        if ch == b"\x03":
            return "CTRL_C"
        if ch == b"\t":
            return "TAB"
        if ch in {b"\x08", b"\x7f"}:
            return "BACKSPACE"

        if ch != b"\x1b":
            return ch.decode("utf-8", errors="replace")

        seq = _read_ready_byte(fd, ESC_SEQUENCE_TIMEOUT_MS)
        if seq is None:
            return "ESC"
        if seq == b"[":
            return _read_csi(fd)
        if seq == b"O":
            # SS3 form sent by terminals in application cursor mode.
            final = _read_ready_byte(fd, ESC_SEQUENCE_TIMEOUT_MS)
            if final is None:
                return "ESC"
            return _CSI_FINAL_KEYS.get(final, "ESC")
        self._pending.append(seq)
        return "ESC"
