"""Interactive event loop for the line picker.

Pulls one key at a time from the terminal, applies it to the session, and
redraws the full frame before the next read. Nothing runs between keys.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Protocol

from ..input import KeyEvent
from ..render import DisplayRow, build_rows, status_text
from ..state import SelectionSession


class Terminal(Protocol):
    def interactive(self): ...

    def get_viewport_height(self) -> int: ...

    def get_viewport_width(self) -> int: ...

    def read_next_key(self) -> KeyEvent: ...

    def erase_and_redraw(self, rows: list[DisplayRow], *, height: int, width: int, status: str = "") -> None: ...


def _key_handlers(session: SelectionSession) -> dict[KeyEvent, Callable[[], None]]:
    viewport = session.viewport
    selection = session.selection
    return {
        KeyEvent.UP: viewport.move_up,
        KeyEvent.LEFT: viewport.move_up,
        KeyEvent.DOWN: viewport.move_down,
        KeyEvent.RIGHT: viewport.move_down,
        KeyEvent.PAGE_UP: viewport.page_up,
        KeyEvent.PAGE_DOWN: viewport.page_down,
        KeyEvent.HOME: viewport.move_home,
        KeyEvent.END: viewport.move_end,
        KeyEvent.TOGGLE_CURRENT: lambda: selection.toggle(viewport.cursor),
        KeyEvent.TOGGLE_INVERT: selection.toggle_invert,
    }


def apply_key_event(session: SelectionSession, event: KeyEvent) -> bool:
    """Apply one key event to ``session``; return ``True`` when the loop should stop.

    ``INTERRUPT`` aborts the whole run by raising ``KeyboardInterrupt``.
    """
    if event is KeyEvent.QUIT:
        return True
    if event is KeyEvent.INTERRUPT:
        raise KeyboardInterrupt
    handler = _key_handlers(session).get(event)
    if handler is not None:
        handler()
    return False


def draw(session: SelectionSession, terminal: Terminal) -> None:
    """Refresh geometry from the terminal and redraw the visible rows."""
    height = terminal.get_viewport_height()
    width = terminal.get_viewport_width()
    session.viewport.resize(height)
    terminal.erase_and_redraw(
        build_rows(session, width),
        height=height,
        width=width,
        status=status_text(session),
    )


def run_selection_loop(session: SelectionSession, terminal: Terminal) -> None:
    """Run the picker until the user quits.

    Terminal failures propagate as fatal ``SystemExit`` after the terminal
    context restores the tty.
    """
    with terminal.interactive():
        while True:
            draw(session, terminal)
            if apply_key_event(session, terminal.read_next_key()):
                break
    session.finished = True
