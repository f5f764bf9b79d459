"""Delivery of the final selection to files, stdout, and child commands."""

from .engine import (
    PLACEHOLDER,
    DeliveryMode,
    DeliveryOptions,
    DeliveryReport,
    deliver,
    substitute_placeholder,
)
from .spawn import EXEC_FAILURE_STATUS, SpawnResult, StdinWiring, spawn

__all__ = [
    "PLACEHOLDER",
    "DeliveryMode",
    "DeliveryOptions",
    "DeliveryReport",
    "deliver",
    "substitute_placeholder",
    "EXEC_FAILURE_STATUS",
    "SpawnResult",
    "StdinWiring",
    "spawn",
]
