"""Line index over the loaded content buffer.

The whole source is read into one byte store while newline bytes are turned
into terminator markers. Lines are described by ``(start, length)`` records
pointing into that store; no record owns a copy of its bytes.
"""

from __future__ import annotations

import logging
import os
import sys
from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path

from .errors import fatal

logger = logging.getLogger(__name__)

READ_CHUNK_SIZE = 1024
NEWLINE = b"\n"
TERMINATOR = b"\0"
STDIN_SOURCE = "-"


@dataclass
class LineRecord:
    """One selectable line: a view into the content buffer plus its selection bit."""

    start: int
    length: int
    selected: bool = False

    @property
    def end(self) -> int:
        return self.start + self.length


class _LineScanner:
    """Incremental newline scanner feeding a growable byte store.

    Chunks may split a line anywhere; the scanner only tracks where the
    current record started in the store, so state survives chunk boundaries.
    """

    def __init__(self, keep_empty: bool) -> None:
        self.keep_empty = keep_empty
        self.store = bytearray()
        self.records: list[LineRecord] = []
        self.boundaries = 0
        self._line_start = 0

    def feed(self, chunk: bytes) -> None:
        view = memoryview(chunk)
        pos = 0
        end = len(chunk)
        while pos < end:
            newline_at = chunk.find(NEWLINE, pos)
            if newline_at == -1:
                self.store += view[pos:]
                return
            self.store += view[pos:newline_at]
            self._close_line()
            pos = newline_at + 1

    def _close_line(self) -> None:
        length = len(self.store) - self._line_start
        # A newline right after another boundary folds into it unless empty lines are kept.
        if length == 0 and self.records and not self.keep_empty:
            return
        self.records.append(LineRecord(self._line_start, length))
        self.store += TERMINATOR
        self.boundaries += 1
        self._line_start = len(self.store)

    def finish(self) -> LineIndex:
        length = len(self.store) - self._line_start
        if length > 0 or not self.records:
            self.records.append(LineRecord(self._line_start, length))
        return LineIndex(bytes(self.store), self.records, self.boundaries)


class LineIndex:
    """Immutable content buffer plus the ordered list of line records."""

    def __init__(self, content: bytes, records: list[LineRecord], boundaries: int) -> None:
        self._content = content
        self._view = memoryview(content)
        self._records = records
        self._boundaries = boundaries

    @classmethod
    def from_bytes(cls, data: bytes, keep_empty: bool = False) -> LineIndex:
        """Index an in-memory buffer using the same rules as :func:`load`."""
        scanner = _LineScanner(keep_empty)
        scanner.feed(data)
        return scanner.finish()

    def line_count(self) -> int:
        return len(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[LineRecord]:
        return iter(self._records)

    def record_at(self, index: int) -> LineRecord:
        """Return record ``index``; out-of-range access is a caller bug."""
        if not 0 <= index < len(self._records):
            raise IndexError(f"line index {index} out of range (0..{len(self._records) - 1})")
        return self._records[index]

    def line_bytes(self, index: int) -> memoryview:
        """Zero-copy view of the bytes of line ``index`` (terminator excluded)."""
        record = self.record_at(index)
        return self._view[record.start : record.end]

    def line_text(self, index: int) -> str:
        """Decode line ``index`` for display; invalid UTF-8 is replaced."""
        return bytes(self.line_bytes(index)).decode("utf-8", errors="replace")

    def content_size(self) -> int:
        return len(self._content)

    def boundary_count(self) -> int:
        """Number of terminator markers stored in the content buffer."""
        return self._boundaries


def _read_fd(fd: int, scanner: _LineScanner) -> None:
    while True:
        try:
            chunk = os.read(fd, READ_CHUNK_SIZE)
        except OSError as exc:
            raise fatal("unable to read input", exc) from exc
        if not chunk:
            return
        scanner.feed(chunk)


def is_stdin_source(source: str | Path | None) -> bool:
    return source is None or str(source) == STDIN_SOURCE


def load(source: str | Path | None, keep_empty: bool = False) -> LineIndex:
    """Read ``source`` to completion and index its lines.

    ``source`` is a file path, or ``None``/``"-"`` for standard input. Open,
    read and allocation failures are fatal.
    """
    scanner = _LineScanner(keep_empty)
    try:
        if is_stdin_source(source):
            _read_fd(sys.stdin.fileno(), scanner)
            label = "<stdin>"
        else:
            try:
                fd = os.open(source, os.O_RDONLY)
            except OSError as exc:
                raise fatal("unable to open input-file", exc) from exc
            try:
                _read_fd(fd, scanner)
            finally:
                os.close(fd)
            label = str(source)
        index = scanner.finish()
    except MemoryError as exc:
        raise fatal("unable to allocate buffer", exc) from exc

    logger.debug(
        "loaded %s: %d bytes, %d records (keep_empty=%s)",
        label,
        index.content_size(),
        index.line_count(),
        keep_empty,
    )
    return index
