"""Cursor and scroll state for the line list.

All transitions keep ``top <= cursor < top + height`` (scroll-follow). The
viewport knows nothing about selection.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class Viewport:
    line_count: int
    cursor: int = 0
    top: int = 0
    height: int = 1

    def __post_init__(self) -> None:
        if self.line_count < 1:
            raise ValueError("viewport needs at least one line")
        self.height = max(1, self.height)

    def _follow(self) -> None:
        if self.cursor < self.top:
            self.top = self.cursor
        elif self.cursor >= self.top + self.height:
            self.top = self.cursor - self.height + 1

    def _move_to(self, line: int) -> None:
        self.cursor = max(0, min(line, self.line_count - 1))
        self._follow()

    def resize(self, height: int) -> None:
        """Apply a new visible height, scrolling so the cursor stays visible."""
        self.height = max(1, height)
        self._follow()

    def move_up(self) -> None:
        self._move_to(self.cursor - 1)

    def move_down(self) -> None:
        self._move_to(self.cursor + 1)

    def page_up(self) -> None:
        self._move_to(self.cursor - self.height)

    def page_down(self) -> None:
        self._move_to(self.cursor + self.height)

    def move_home(self) -> None:
        self._move_to(0)

    def move_end(self) -> None:
        self._move_to(self.line_count - 1)

    def visible_lines(self) -> range:
        """Line indices drawn in the current frame."""
        return range(self.top, min(self.top + self.height, self.line_count))
