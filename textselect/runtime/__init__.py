"""Public runtime orchestration entry points.

This package groups the picker bootstrap (`run_textselect`) and the
interactive loop used by tests and composition code.
"""

from __future__ import annotations


def run_textselect(*args, **kwargs):
    """Lazily import the app entrypoint to avoid bootstrap work on import."""
    from .app import run_textselect as _run_textselect

    return _run_textselect(*args, **kwargs)


def run_selection_loop(*args, **kwargs):
    """Lazily import loop runner to avoid package-import cycles."""
    from .loop import run_selection_loop as _run_selection_loop

    return _run_selection_loop(*args, **kwargs)


__all__ = [
    "run_textselect",
    "run_selection_loop",
]
