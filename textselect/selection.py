"""Selection overlay on top of the line index.

Per-line bits live on the records; a single ``invert`` flag flips the meaning
of every bit at once without touching them.
"""

from __future__ import annotations

from collections.abc import Iterator

from .line_index import LineIndex, LineRecord


class SelectionModel:
    def __init__(self, index: LineIndex, invert: bool = False) -> None:
        self.index = index
        self.invert = bool(invert)

    def is_selected(self, line: int) -> bool:
        """Effective selection: the record's bit XOR the global invert flag."""
        return self.index.record_at(line).selected != self.invert

    def toggle(self, line: int) -> None:
        record = self.index.record_at(line)
        record.selected = not record.selected

    def toggle_invert(self) -> None:
        self.invert = not self.invert

    def selected_count(self) -> int:
        marked = sum(1 for record in self.index if record.selected)
        return self.index.line_count() - marked if self.invert else marked

    def selected_lines_in_order(self, skip_empty: bool = False) -> Iterator[tuple[int, LineRecord]]:
        """Yield ``(index, record)`` for effectively selected lines in source order.

        Order is always ascending line index, independent of the order in which
        lines were toggled. ``skip_empty`` drops zero-length records.
        """
        invert = self.invert
        for line, record in enumerate(self.index):
            if record.selected == invert:
                continue
            if skip_empty and record.length == 0:
                continue
            yield line, record
