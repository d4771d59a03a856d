"""
KITS — Shared Error Definitions

Common exceptions used across all KITS modules.
"""

from typing import Any, Optional


class KitsError(Exception):
    """Base exception for all KITS errors."""
    pass


# =============================================================================
# Configuration Errors
# =============================================================================
class ConfigurationError(KitsError):
    """Raised when a setting is missing or invalid."""
    pass


# =============================================================================
# Execution Errors
# =============================================================================
class EvaluationTimeoutError(KitsError, TimeoutError):
    """
    Raised when a unit of work does not finish within its timeout.

    The work is only asked to stop. It may still be running after this is
    raised; ``future`` resolves once it finally finishes, if ever.
    """
    def __init__(self, timeout_ms: int, future: Optional[Any] = None):
        self.timeout_ms = timeout_ms
        self.future = future
        super().__init__(f"Evaluation timeout after {timeout_ms}ms")


class WorkCancelledError(KitsError):
    """Raised inside a unit of work that notices its cancellation token."""
    def __init__(self, message: str = "Work was cancelled"):
        super().__init__(message)


# =============================================================================
# Value Errors
# =============================================================================
class InvalidIPAddressError(KitsError, ValueError):
    """Raised when a dotted IPv4 address cannot be converted."""
    def __init__(self, address: Any):
        self.address = address
        super().__init__(f"Invalid IP address: {address}")


class CardinalityError(KitsError, ValueError):
    """Raised when a collection does not hold exactly one item."""
    def __init__(self, count: str):
        self.count = count
        super().__init__(f"should have precisely one item, but had {count}")
