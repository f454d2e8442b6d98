"""
Custom exceptions for the PollPulse data layer.

Provides a small hierarchy of exceptions with HTTP-like error codes
so the HTTP surface can translate failures consistently.
"""
from typing import Any, Dict, List, Optional


class PollPulseError(Exception):
    """Base exception for all PollPulse errors."""

    def __init__(
        self,
        message: str,
        code: int = 500,
        retryable: bool = True,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.retryable = retryable

    def to_dict(self) -> dict:
        """Convert to dictionary for API responses."""
        return {
            "error_code": self.code,
            "error_message": self.message,
            "retryable": self.retryable,
        }


# ============================================
# Programming-contract violations
# ============================================

class ContextNotInitializedError(PollPulseError):
    """Application context used before it was built at startup."""

    def __init__(self, consumer: str = "this operation"):
        message = (
            f"{consumer} must be used within an initialized AppContext. "
            "Call build_app_context() at startup and attach it to app.state."
        )
        super().__init__(message, code=500, retryable=False)


class ConfigurationError(PollPulseError):
    """Configuration is invalid or incomplete."""

    def __init__(self, message: str = "Invalid configuration"):
        super().__init__(message, code=500, retryable=False)


# ============================================
# Data errors
# ============================================

class PollNotFoundError(PollPulseError):
    """404 Not Found - Poll doesn't exist on the active data source."""

    def __init__(self, poll_id: str = ""):
        message = f"Poll '{poll_id}' not found" if poll_id else "Poll not found"
        super().__init__(message, code=404, retryable=False)


class SubgraphQueryError(PollPulseError):
    """502 Bad Gateway - The indexed query service failed or returned errors."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        errors: Optional[List[Dict[str, Any]]] = None,
    ):
        self.status_code = status_code
        self.errors = errors or []
        prefix = f"Subgraph Error {status_code}" if status_code else "Subgraph Error"
        super().__init__(f"{prefix}: {message}", code=502, retryable=True)
