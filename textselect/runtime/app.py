"""Runtime composition layer for textselect.

Loads the source, runs the interactive picker on the controlling terminal,
then hands the finished session to delivery. Each phase runs exactly once.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path

from ..delivery import DeliveryOptions, DeliveryReport, deliver
from ..line_index import is_stdin_source, load
from ..state import SelectionSession
from ..terminal import TerminalController
from ..ui_theme import DEFAULT_THEME, UITheme
from .loop import run_selection_loop

logger = logging.getLogger(__name__)


def run_textselect(
    source: str | Path | None,
    options: DeliveryOptions,
    *,
    keep_empty: bool = False,
    invert: bool = False,
    theme: UITheme = DEFAULT_THEME,
    open_terminal: Callable[..., TerminalController] = TerminalController.open,
) -> DeliveryReport:
    """Load ``source``, let the user pick lines, and deliver the result."""
    from_stdin = is_stdin_source(source)
    index = load(source, keep_empty=keep_empty)
    session = SelectionSession.create(
        index,
        invert=invert,
        source_label="<stdin>" if from_stdin else str(source),
        stdin_consumed=from_stdin,
    )

    terminal = open_terminal(theme=theme)
    try:
        run_selection_loop(session, terminal)
    finally:
        terminal.close()

    report = deliver(session, options)
    logger.debug(
        "delivery finished: %d file lines, %d stream lines, %d invocations",
        report.file_lines,
        report.stream_lines,
        len(report.invocations),
    )
    return report
