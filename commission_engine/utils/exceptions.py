"""
Exception types for the commission engine.

Defines the error taxonomy and the categories used to decide whether a
failed distribution may be retried by the caller.
"""

from sqlalchemy.exc import DBAPIError, IntegrityError, OperationalError


class CommissionEngineError(Exception):
    """Base class for commission engine errors."""
    pass


class UserNotFoundError(CommissionEngineError):
    """Raised when a user does not exist."""
    pass


class PurchaserNotFoundError(UserNotFoundError):
    """Raised when the purchasing user does not exist."""
    pass


class InvalidPlanError(CommissionEngineError):
    """Raised when a plan type is not one of the recognised plans."""
    pass


class CommissionConfigError(CommissionEngineError):
    """Raised when plan prices or rate tables are misconfigured."""
    pass


class PurchaseNotEligibleError(CommissionEngineError):
    """Raised when a user has not completed a purchase of a valid plan."""
    pass


class CommissionAlreadyDistributedError(CommissionEngineError):
    """Raised when commissions for a purchaser were already recorded."""
    pass


class LedgerWriteError(CommissionEngineError):
    """Raised when a ledger write did not affect the expected row."""
    pass


# Transient store failures - safe to retry the whole distribution
RETRYABLE_ERRORS = (
    OperationalError,  # Connection loss, lock timeout, serialization failure
    DBAPIError,        # Driver level errors surfaced by SQLAlchemy
    TimeoutError,
)

# Rejected before any write happens
INPUT_ERRORS = (
    PurchaserNotFoundError,
    InvalidPlanError,
)


def is_retryable(exc: Exception) -> bool:
    """
    Check if a failed distribution can be retried from scratch.

    Args:
        exc: Exception that aborted the distribution

    Returns:
        True if exception is a transient store failure
    """
    if isinstance(exc, IntegrityError):
        return False
    return isinstance(exc, RETRYABLE_ERRORS)
