"""Single spawn primitive shared by every delivery contract.

A child is started with one of three stdin wirings and always waited on
before the ``with`` block exits. Any pipe opened for it is closed on every
path, including failures while feeding it.
"""

from __future__ import annotations

import contextlib
import errno
import logging
import shlex
import subprocess
import sys
from collections.abc import Iterator, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import BinaryIO

from ..errors import diagnostic, fatal

logger = logging.getLogger(__name__)

EXEC_FAILURE_STATUS = 127

# Errors the child reports back from exec; everything else failed in the parent.
EXEC_ERRNOS = frozenset(
    {
        errno.ENOENT,
        errno.EACCES,
        errno.EPERM,
        errno.ENOEXEC,
        errno.E2BIG,
        errno.ENOTDIR,
        errno.ELOOP,
        errno.ENAMETOOLONG,
        errno.ETXTBSY,
    }
)
CHANNEL_ERRNOS = frozenset({errno.EMFILE, errno.ENFILE})


class StdinWiring(Enum):
    INHERIT = "inherit"
    PIPE = "pipe"
    NONE = "none"


_POPEN_STDIN = {
    StdinWiring.INHERIT: None,
    StdinWiring.PIPE: subprocess.PIPE,
    StdinWiring.NONE: subprocess.DEVNULL,
}


@dataclass(frozen=True)
class SpawnResult:
    argv: tuple[str, ...]
    returncode: int
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.returncode == 0


class ChildProcess:
    """Handle for one running child; ``result`` is set once it has exited."""

    def __init__(self, argv: tuple[str, ...], process: subprocess.Popen | None) -> None:
        self.argv = argv
        self.process = process
        self.broken_pipe = False
        self.result: SpawnResult | None = None

    @property
    def stdin(self) -> BinaryIO | None:
        if self.process is None:
            return None
        return self.process.stdin

    def write(self, data: bytes) -> bool:
        """Feed ``data`` to the child's stdin pipe.

        Returns ``False`` once the child has stopped reading; later writes are
        skipped so the parent can move on to waiting. Any other write error is
        fatal.
        """
        stream = self.stdin
        if stream is None or self.broken_pipe:
            return False
        view = memoryview(data)
        try:
            while view:
                written = stream.write(view)
                view = view[written:]
        except BrokenPipeError:
            self.broken_pipe = True
            logger.info("%s stopped reading its input", _display(self.argv))
            return False
        except OSError as exc:
            raise fatal("unable to write to command", exc) from exc
        return True

    def close_stdin(self) -> None:
        stream = self.stdin
        if stream is not None and not stream.closed:
            stream.close()


def _display(argv: Sequence[str]) -> str:
    return shlex.join(argv)


@contextlib.contextmanager
def spawn(argv: Sequence[str], stdin: StdinWiring = StdinWiring.INHERIT) -> Iterator[ChildProcess]:
    """Start ``argv`` and yield its handle; wait for it when the block ends.

    stdout and stderr are always inherited. When the program cannot be
    executed the failure stays scoped to this child: a diagnostic goes to
    stderr, the handle carries no process, and ``result.returncode`` is 127.
    Failing to create the stdin pipe or to fork is fatal to the whole run.
    """
    args = tuple(argv)
    logger.debug("spawning %s (stdin=%s)", _display(args), stdin.value)
    failure: BaseException | None = None
    try:
        process = subprocess.Popen(args, stdin=_POPEN_STDIN[stdin], bufsize=0)
    except ValueError as exc:
        # An argument holds a NUL byte and cannot reach exec.
        failure = exc
    except OSError as exc:
        if exc.errno in CHANNEL_ERRNOS:
            raise fatal("unable to create pipe", exc) from exc
        if exc.errno not in EXEC_ERRNOS:
            raise fatal("unable to fork", exc) from exc
        failure = exc

    if failure is not None:
        message = diagnostic(f"unable to execute {args[0]!r}", failure)
        print(message, file=sys.stderr)
        child = ChildProcess(args, None)
        try:
            yield child
        finally:
            child.result = SpawnResult(args, EXEC_FAILURE_STATUS, message)
        return

    child = ChildProcess(args, process)
    with process:
        try:
            yield child
        finally:
            child.close_stdin()
    child.result = SpawnResult(args, process.returncode)
    if process.returncode != 0:
        logger.info("%s exited with status %d", _display(args), process.returncode)


def run(argv: Sequence[str], stdin: StdinWiring = StdinWiring.INHERIT) -> SpawnResult:
    """Spawn ``argv`` without feeding it and block until it exits."""
    with spawn(argv, stdin) as child:
        pass
    assert child.result is not None
    return child.result
