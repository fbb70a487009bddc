"""
Error Classification

Defines the error taxonomy shared by the quote engine, the route planner,
the plan builder and the session manager. Every error carries a category so
callers can render it as a structured, human-readable failure. None of them
is retried by the core.
"""

from enum import Enum
from typing import Any, Dict, Optional


class ErrorCategory(str, Enum):
    """Categories of planning failures."""

    VALIDATION = "validation"     # Malformed input, identical tokens, bad slippage
    NOT_FOUND = "not_found"       # Pool, deployment, chain or session absent
    STATE = "state"               # Not yet confirmed, not provisioned, duplicates
    ARITHMETIC = "arithmetic"     # Non-positive reserves or amounts
    EXTERNAL = "external"         # Encoder / ABI failures


class LaunchpadError(Exception):
    """Base class for all planning errors."""

    category: ErrorCategory = ErrorCategory.VALIDATION

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        return {
            "category": self.category.value,
            "message": self.message,
            "details": dict(self.details),
        }


class ValidationError(LaunchpadError, ValueError):
    """Input rejected before any planning happened."""

    category = ErrorCategory.VALIDATION


class NotFoundError(LaunchpadError, LookupError):
    """A referenced pool, deployment, chain or session does not exist."""

    category = ErrorCategory.NOT_FOUND


class StateError(LaunchpadError):
    """The referenced entity exists but is not in a usable state."""

    category = ErrorCategory.STATE


class AmmArithmeticError(LaunchpadError, ArithmeticError):
    """Quote math received non-positive reserves or amounts."""

    category = ErrorCategory.ARITHMETIC


class ExternalError(LaunchpadError):
    """A collaborator (ABI encoder, artifact source) failed."""

    category = ErrorCategory.EXTERNAL
