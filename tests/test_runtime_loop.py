"""Tests for the interactive picker loop.

Drives the loop with a scripted fake terminal and checks transitions,
redraw ordering, resize handling, and abort behavior.
"""

from __future__ import annotations

from contextlib import contextmanager
import unittest

from textselect.input import KeyEvent
from textselect.line_index import LineIndex
from textselect.runtime.loop import apply_key_event, run_selection_loop
from textselect.state import SelectionSession


class _FakeTerminal:
    def __init__(self, keys: list[KeyEvent], heights: list[int] | None = None, width: int = 40) -> None:
        self.keys = list(keys)
        self.heights = list(heights or [])
        self.width = width
        self.height = 3
        self.frames: list[tuple[list, int, str]] = []
        self.events: list[str] = []

    @contextmanager
    def interactive(self):
        self.events.append("enter")
        try:
            yield self
        finally:
            self.events.append("leave")

    def get_viewport_height(self) -> int:
        if self.heights:
            self.height = self.heights.pop(0)
        return self.height

    def get_viewport_width(self) -> int:
        return self.width

    def read_next_key(self) -> KeyEvent:
        self.events.append("read")
        return self.keys.pop(0)

    def erase_and_redraw(self, rows, *, height: int, width: int, status: str = "") -> None:
        self.events.append("draw")
        self.frames.append((list(rows), height, status))


def _session(lines: int = 10) -> SelectionSession:
    data = b"".join(f"line {n}\n".encode() for n in range(lines))
    return SelectionSession.create(LineIndex.from_bytes(data), source_label="demo")


class RunSelectionLoopTests(unittest.TestCase):
    def test_loop_draws_before_every_key_and_stops_on_quit(self) -> None:
        session = _session()
        terminal = _FakeTerminal([KeyEvent.DOWN, KeyEvent.TOGGLE_CURRENT, KeyEvent.QUIT])

        run_selection_loop(session, terminal)

        self.assertEqual(
            terminal.events,
            ["enter", "draw", "read", "draw", "read", "draw", "read", "leave"],
        )
        self.assertTrue(session.finished)
        self.assertEqual([line for line, _ in session.selection.selected_lines_in_order()], [1])

    def test_scroll_follows_cursor_through_frames(self) -> None:
        session = _session()
        terminal = _FakeTerminal([KeyEvent.DOWN] * 4 + [KeyEvent.QUIT])

        run_selection_loop(session, terminal)

        last_rows, height, _status = terminal.frames[-1]
        self.assertEqual(height, 3)
        self.assertEqual([row.text for row in last_rows], ["line 2", "line 3", "line 4"])
        self.assertEqual(session.viewport.top, 2)
        self.assertEqual(session.viewport.cursor, 4)

    def test_height_is_reread_every_frame(self) -> None:
        session = _session(30)
        terminal = _FakeTerminal([KeyEvent.END, KeyEvent.UP, KeyEvent.QUIT], heights=[10, 10, 4])

        run_selection_loop(session, terminal)

        self.assertEqual([frame[1] for frame in terminal.frames], [10, 10, 4])
        viewport = session.viewport
        self.assertEqual(viewport.height, 4)
        self.assertTrue(viewport.top <= viewport.cursor < viewport.top + viewport.height)

    def test_status_reflects_invert(self) -> None:
        session = _session(3)
        terminal = _FakeTerminal([KeyEvent.TOGGLE_INVERT, KeyEvent.QUIT])

        run_selection_loop(session, terminal)

        self.assertIn("[inverted]", terminal.frames[-1][2])
        self.assertEqual(session.selection.selected_count(), 3)

    def test_interrupt_aborts_and_leaves_interactive_mode(self) -> None:
        session = _session()
        terminal = _FakeTerminal([KeyEvent.TOGGLE_CURRENT, KeyEvent.INTERRUPT])

        with self.assertRaises(KeyboardInterrupt):
            run_selection_loop(session, terminal)

        self.assertEqual(terminal.events[-1], "leave")
        self.assertFalse(session.finished)


class ApplyKeyEventTests(unittest.TestCase):
    def test_left_and_right_move_like_up_and_down(self) -> None:
        session = _session()
        session.viewport.resize(5)
        apply_key_event(session, KeyEvent.RIGHT)
        apply_key_event(session, KeyEvent.RIGHT)
        apply_key_event(session, KeyEvent.LEFT)
        self.assertEqual(session.viewport.cursor, 1)

    def test_unrecognized_key_changes_nothing(self) -> None:
        session = _session()
        self.assertFalse(apply_key_event(session, KeyEvent.UNRECOGNIZED))
        self.assertEqual(session.viewport.cursor, 0)
        self.assertEqual(session.selection.selected_count(), 0)

    def test_quit_returns_true(self) -> None:
        self.assertTrue(apply_key_event(_session(), KeyEvent.QUIT))

    def test_toggle_current_uses_cursor_line(self) -> None:
        session = _session()
        session.viewport.resize(5)
        apply_key_event(session, KeyEvent.PAGE_DOWN)
        apply_key_event(session, KeyEvent.TOGGLE_CURRENT)
        self.assertTrue(session.selection.is_selected(5))


if __name__ == "__main__":
    unittest.main()
