"""Tests for cursor movement and scroll-follow."""

from __future__ import annotations

import unittest

from textselect.viewport import Viewport


class ViewportTests(unittest.TestCase):
    def assertInvariant(self, viewport: Viewport) -> None:
        self.assertLessEqual(viewport.top, viewport.cursor)
        self.assertLess(viewport.cursor, viewport.top + viewport.height)
        self.assertLess(viewport.cursor, viewport.line_count)
        self.assertGreaterEqual(viewport.cursor, 0)

    def test_move_up_stops_at_first_line(self) -> None:
        viewport = Viewport(line_count=5, height=3)
        viewport.move_up()
        self.assertEqual((viewport.cursor, viewport.top), (0, 0))
        self.assertInvariant(viewport)

    def test_move_down_stops_at_last_line(self) -> None:
        viewport = Viewport(line_count=3, height=10)
        for _ in range(6):
            viewport.move_down()
            self.assertInvariant(viewport)
        self.assertEqual((viewport.cursor, viewport.top), (2, 0))

    def test_move_down_scrolls_when_leaving_bottom(self) -> None:
        viewport = Viewport(line_count=10, height=3)
        for _ in range(4):
            viewport.move_down()
            self.assertInvariant(viewport)
        self.assertEqual((viewport.cursor, viewport.top), (4, 2))

    def test_move_up_scrolls_when_leaving_top(self) -> None:
        viewport = Viewport(line_count=10, cursor=5, top=5, height=3)
        viewport.move_up()
        self.assertEqual((viewport.cursor, viewport.top), (4, 4))
        self.assertInvariant(viewport)

    def test_walk_whole_range_keeps_invariant(self) -> None:
        viewport = Viewport(line_count=25, height=4)
        moves = ["down"] * 30 + ["up"] * 30 + ["down"] * 7 + ["up"] * 2
        for move in moves:
            getattr(viewport, f"move_{move}")()
            self.assertInvariant(viewport)

    def test_paging_and_jumps(self) -> None:
        viewport = Viewport(line_count=20, height=5)
        viewport.page_down()
        self.assertEqual((viewport.cursor, viewport.top), (5, 1))
        viewport.move_end()
        self.assertEqual((viewport.cursor, viewport.top), (19, 15))
        viewport.page_up()
        self.assertEqual((viewport.cursor, viewport.top), (14, 14))
        viewport.move_home()
        self.assertEqual((viewport.cursor, viewport.top), (0, 0))
        self.assertInvariant(viewport)

    def test_resize_keeps_cursor_visible(self) -> None:
        viewport = Viewport(line_count=50, height=20)
        for _ in range(15):
            viewport.move_down()
        viewport.resize(5)
        self.assertEqual((viewport.cursor, viewport.top), (15, 11))
        self.assertInvariant(viewport)
        viewport.resize(0)
        self.assertEqual(viewport.height, 1)
        self.assertInvariant(viewport)

    def test_visible_lines_are_clipped_to_line_count(self) -> None:
        viewport = Viewport(line_count=3, height=10)
        self.assertEqual(list(viewport.visible_lines()), [0, 1, 2])

    def test_single_line_viewport(self) -> None:
        viewport = Viewport(line_count=1, height=1)
        viewport.move_down()
        viewport.move_up()
        self.assertEqual((viewport.cursor, viewport.top), (0, 0))


if __name__ == "__main__":
    unittest.main()
