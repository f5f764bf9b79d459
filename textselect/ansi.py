"""Display-width measurement and line shaping for raw input text.

Input lines may contain tabs, control bytes, and wide characters. These
helpers turn them into terminal-safe text and clip it to a column budget.
"""

from __future__ import annotations

import unicodedata

TAB_STOP = 8
ELLIPSIS = "..."


def char_display_width(ch: str, col: int) -> int:
    """Return terminal column width for one character at visual column ``col``.

    Tabs expand to the next 8-column stop, combining marks consume no columns,
    and East Asian wide/fullwidth characters consume two.
    """
    if ch == "\t":
        return TAB_STOP - (col % TAB_STOP)
    if unicodedata.combining(ch):
        return 0
    if unicodedata.east_asian_width(ch) in {"W", "F"}:
        return 2
    return 1


def _caret(ch: str) -> str:
    code = ord(ch)
    if code == 0x7F:
        return "^?"
    return "^" + chr(code + 0x40)


def sanitize_line(text: str) -> str:
    """Expand tabs and show C0 control characters in caret notation (``^[``).

    Raw escape bytes from the input must never reach the terminal, or a line
    could move the cursor or restyle the rest of the frame.
    """
    out: list[str] = []
    col = 0
    for ch in text:
        if ch == "\t":
            width = char_display_width(ch, col)
            out.append(" " * width)
            col += width
            continue
        if ord(ch) < 0x20 or ord(ch) == 0x7F:
            shown = _caret(ch)
            out.append(shown)
            col += len(shown)
            continue
        out.append(ch)
        col += char_display_width(ch, col)
    return "".join(out)


def display_width(text: str) -> int:
    col = 0
    for ch in text:
        col += char_display_width(ch, col)
    return col


def clip_to_width(text: str, max_cols: int) -> str:
    """Trim sanitized ``text`` to at most ``max_cols`` display columns."""
    if max_cols <= 0 or not text:
        return ""
    out: list[str] = []
    col = 0
    for ch in text:
        w = char_display_width(ch, col)
        if col + w > max_cols:
            break
        out.append(ch)
        col += w
    return "".join(out)


def fit_line(text: str, width: int) -> tuple[str, bool]:
    """Shape one input line for a ``width``-column row.

    Returns the visible text and whether it was truncated. A truncated line
    keeps ``width - 3`` columns so the caller can draw the ``...`` marker in
    the last three columns.
    """
    shown = sanitize_line(text)
    if display_width(shown) <= width:
        return shown, False
    return clip_to_width(shown, max(0, width - len(ELLIPSIS))), True
