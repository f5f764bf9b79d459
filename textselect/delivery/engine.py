"""Deliver the final selection to a file, stdout, or a command.

Every destination reads the same sequence: effectively selected, non-empty
lines in ascending source order. Commands are fed under one of four
contracts; at most one child is alive at any time.
"""

from __future__ import annotations

import logging
import os
import sys
from collections.abc import Iterator, Sequence
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import BinaryIO

from ..errors import fatal
from ..state import SelectionSession
from .spawn import SpawnResult, StdinWiring, run, spawn

logger = logging.getLogger(__name__)

PLACEHOLDER = "{}"
NEWLINE_DELIMITER = b"\n"
NUL_DELIMITER = b"\0"


class DeliveryMode(Enum):
    PIPE = "pipe"
    BATCH = "batch"
    PER_LINE = "per_line"
    PLACEHOLDER = "placeholder"


@dataclass(frozen=True)
class DeliveryOptions:
    output_path: Path | None = None
    null_delimited: bool = False
    command: tuple[str, ...] = ()
    mode: DeliveryMode = DeliveryMode.PIPE

    @property
    def delimiter(self) -> bytes:
        return NUL_DELIMITER if self.null_delimited else NEWLINE_DELIMITER


@dataclass
class DeliveryReport:
    """What delivery did: lines emitted per stream and every child spawned."""

    file_lines: int = 0
    stream_lines: int = 0
    invocations: list[SpawnResult] = field(default_factory=list)

    @property
    def failed_invocations(self) -> list[SpawnResult]:
        return [result for result in self.invocations if not result.ok]


def selected_payloads(session: SelectionSession) -> Iterator[bytes]:
    """Yield the bytes of each selected, non-empty line in source order."""
    index = session.index
    for line, _record in session.selection.selected_lines_in_order(skip_empty=True):
        yield bytes(index.line_bytes(line))


def selected_arguments(session: SelectionSession) -> Iterator[str]:
    """Selected lines as argv strings; undecodable bytes survive via surrogateescape."""
    for payload in selected_payloads(session):
        yield os.fsdecode(payload)


def write_selection(stream: BinaryIO, session: SelectionSession, delimiter: bytes) -> int:
    """Write framed lines to ``stream`` and return how many were written."""
    count = 0
    for payload in selected_payloads(session):
        stream.write(payload + delimiter)
        count += 1
    return count


def copy_to_file(path: Path, session: SelectionSession, delimiter: bytes) -> int:
    try:
        handle = open(path, "wb")
    except OSError as exc:
        raise fatal("unable to open output-file", exc) from exc
    try:
        with handle:
            return write_selection(handle, session, delimiter)
    except OSError as exc:
        # Buffered bytes are flushed on close, so close errors count as write errors.
        raise fatal("unable to write output-file", exc) from exc


def write_stdout(session: SelectionSession, delimiter: bytes, stream: BinaryIO | None = None) -> int:
    target = stream if stream is not None else sys.stdout.buffer
    try:
        count = write_selection(target, session, delimiter)
        target.flush()
    except OSError as exc:
        raise fatal("unable to write to standard output", exc) from exc
    return count


def pipe_contract(argv: Sequence[str], session: SelectionSession, delimiter: bytes) -> tuple[SpawnResult, int]:
    """Spawn once and stream every framed line into the child's stdin.

    The pipe is closed as soon as the lines are written (immediately when
    nothing is selected) and the child is then waited on. The child's own
    stdout/stderr are inherited. If the child fills a pipe on its output
    side that nothing drains while this side blocks on its input, both
    processes wait on each other; such commands need their output consumed
    elsewhere.
    """
    written = 0
    with spawn(argv, StdinWiring.PIPE) as child:
        for payload in selected_payloads(session):
            if not child.write(payload + delimiter):
                break
            written += 1
    assert child.result is not None
    return child.result, written


def batch_contract(argv: Sequence[str], session: SelectionSession, stdin: StdinWiring) -> SpawnResult:
    """Spawn once with every selected line appended as a trailing argument."""
    return run([*argv, *selected_arguments(session)], stdin)


def per_line_contract(argv: Sequence[str], session: SelectionSession, stdin: StdinWiring) -> list[SpawnResult]:
    """Spawn once per line with the line as final argument, strictly in sequence."""
    return [run([*argv, line], stdin) for line in selected_arguments(session)]


def substitute_placeholder(argv: Sequence[str], line: str) -> list[str]:
    """Replace every argument exactly equal to ``{}`` with ``line``."""
    return [line if token == PLACEHOLDER else token for token in argv]


def placeholder_contract(argv: Sequence[str], session: SelectionSession, stdin: StdinWiring) -> list[SpawnResult]:
    """Spawn once per line with ``{}`` arguments substituted, strictly in sequence."""
    if PLACEHOLDER not in argv:
        logger.warning("command has no %s argument; lines are not passed to it", PLACEHOLDER)
    return [run(substitute_placeholder(argv, line), stdin) for line in selected_arguments(session)]


def argument_stdin(session: SelectionSession) -> StdinWiring:
    """Argument contracts inherit stdin unless it was consumed as the source."""
    return StdinWiring.NONE if session.stdin_consumed else StdinWiring.INHERIT


def deliver(session: SelectionSession, options: DeliveryOptions) -> DeliveryReport:
    """Run the optional file copy, then the primary destination, exactly once."""
    report = DeliveryReport()
    delimiter = options.delimiter

    if options.output_path is not None:
        report.file_lines = copy_to_file(options.output_path, session, delimiter)
        logger.debug("wrote %d lines to %s", report.file_lines, options.output_path)

    argv = options.command
    if not argv:
        report.stream_lines = write_stdout(session, delimiter)
        return report

    stdin = argument_stdin(session)
    if options.mode is DeliveryMode.PIPE:
        result, report.stream_lines = pipe_contract(argv, session, delimiter)
        report.invocations.append(result)
    elif options.mode is DeliveryMode.BATCH:
        report.invocations.append(batch_contract(argv, session, stdin))
    elif options.mode is DeliveryMode.PER_LINE:
        report.invocations.extend(per_line_contract(argv, session, stdin))
    else:
        report.invocations.extend(placeholder_contract(argv, session, stdin))

    if report.failed_invocations:
        logger.info(
            "%d of %d invocations failed",
            len(report.failed_invocations),
            len(report.invocations),
        )
    return report
