"""
KITS Progress — console progress reporting for long loops.
"""

from .reporter import (
    DEFAULT_ROW_FMT,
    DefaultProgressFormatter,
    ProgressReporter,
    progress_reporting,
)

__all__ = [
    "DEFAULT_ROW_FMT",
    "DefaultProgressFormatter",
    "ProgressReporter",
    "progress_reporting",
]
