"""Frame composition for the line picker.

Turns session state into display rows and writes them as one ANSI frame.
Row building is pure; only :func:`compose_frame` knows about escape codes.
"""

from __future__ import annotations

from dataclasses import dataclass

from .ansi import ELLIPSIS, clip_to_width, display_width, fit_line
from .state import SelectionSession
from .ui_theme import DEFAULT_THEME, UITheme

STATUS_HINTS = "space toggle  v invert  q done"


@dataclass(frozen=True)
class DisplayRow:
    text: str
    is_truncated: bool
    is_cursor: bool
    is_selected: bool


def build_rows(session: SelectionSession, width: int) -> list[DisplayRow]:
    """Return one row per visible line, top to bottom.

    Rows past the last line are not produced; the frame leaves them blank.
    """
    viewport = session.viewport
    rows: list[DisplayRow] = []
    for line in viewport.visible_lines():
        text, truncated = fit_line(session.index.line_text(line), width)
        rows.append(
            DisplayRow(
                text=text,
                is_truncated=truncated,
                is_cursor=line == viewport.cursor,
                is_selected=session.selection.is_selected(line),
            )
        )
    return rows


def build_status_line(left_text: str, width: int, right_text: str = STATUS_HINTS) -> str:
    usable = max(1, width - 1)
    if usable <= len(right_text):
        return right_text[-usable:]
    left_limit = max(0, usable - len(right_text) - 1)
    left = left_text[:left_limit]
    gap = " " * (usable - len(left) - len(right_text))
    return f"{left}{gap}{right_text}"


def status_text(session: SelectionSession) -> str:
    """Left-hand status summary: source, position, selection count."""
    line_count = session.index.line_count()
    parts = [
        session.source_label or "<stdin>",
        f"{session.viewport.cursor + 1}/{line_count}",
        f"{session.selection.selected_count()} selected",
    ]
    if session.selection.invert:
        parts.append("[inverted]")
    return "  ".join(parts)


def format_row(row: DisplayRow, width: int, theme: UITheme = DEFAULT_THEME) -> str:
    """Render one row with cursor and selection attributes layered together."""
    style = ""
    if row.is_cursor:
        style += theme.cursor
    if row.is_selected:
        style += theme.selected

    body = row.text
    if row.is_truncated:
        marker = ELLIPSIS[: max(0, width - display_width(body))]
        body = f"{body}{theme.truncation_marker}{marker}"
    elif row.is_cursor:
        # Pad so the cursor highlight spans the whole row.
        body = body + " " * max(0, width - display_width(body))

    if not style and not row.is_truncated:
        return body
    return f"{style}{body}{theme.reset}"


def compose_frame(
    rows: list[DisplayRow],
    height: int,
    width: int,
    status: str,
    theme: UITheme = DEFAULT_THEME,
) -> str:
    """Build a full-screen frame: ``height`` content rows plus a status row."""
    out: list[str] = ["\033[H\033[J"]
    for row_idx in range(height):
        if row_idx < len(rows):
            out.append(format_row(rows[row_idx], width, theme))
        out.append("\r\n")
    out.append(theme.status)
    out.append(clip_to_width(build_status_line(status, width), width))
    out.append(theme.reset)
    return "".join(out)
