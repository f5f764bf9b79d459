"""Fatal diagnostic helpers.

Every unrecoverable failure leaves the process through ``SystemExit`` with a
single line naming the failing step and the underlying system error.
"""

from __future__ import annotations

PROGRAM_NAME = "textselect"


def describe_error(exc: BaseException) -> str:
    """Return the human-readable reason carried by ``exc``."""
    if isinstance(exc, OSError) and exc.strerror:
        return exc.strerror
    if len(exc.args) == 2 and isinstance(exc.args[1], str):
        # termios.error carries (errno, message) without being an OSError.
        return exc.args[1]
    if isinstance(exc, MemoryError):
        return "Cannot allocate memory"
    text = str(exc)
    return text if text else type(exc).__name__


def diagnostic(step: str, exc: BaseException | None = None) -> str:
    """Format the one-line ``textselect: step: reason`` diagnostic."""
    message = f"{PROGRAM_NAME}: {step}"
    if exc is not None:
        message = f"{message}: {describe_error(exc)}"
    return message


def fatal(step: str, exc: BaseException | None = None) -> SystemExit:
    """Build the ``SystemExit`` for an unrecoverable failure at ``step``.

    Callers raise the returned value so tracebacks keep the original cause::

        raise fatal("unable to open input-file", exc) from exc

    The string payload is printed to stderr and maps to exit status 1.
    """
    return SystemExit(diagnostic(step, exc))
