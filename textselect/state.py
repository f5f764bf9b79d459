from __future__ import annotations

from dataclasses import dataclass

from .line_index import LineIndex
from .selection import SelectionModel
from .viewport import Viewport


@dataclass
class SelectionSession:
    """Everything the picker owns for one run: lines, selection and viewport."""

    index: LineIndex
    selection: SelectionModel
    viewport: Viewport
    source_label: str = ""
    finished: bool = False
    stdin_consumed: bool = False

    @classmethod
    def create(
        cls,
        index: LineIndex,
        *,
        invert: bool = False,
        source_label: str = "",
        stdin_consumed: bool = False,
    ) -> SelectionSession:
        return cls(
            index=index,
            selection=SelectionModel(index, invert=invert),
            viewport=Viewport(index.line_count()),
            source_label=source_label,
            stdin_consumed=stdin_consumed,
        )
