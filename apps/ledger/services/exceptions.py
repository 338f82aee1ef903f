"""
Domain-specific exceptions for the ledger.

Validation errors are raised before any mutation. Conflicts on the
settlement constraint are expected under concurrent evaluation and are
handled as no-ops by the evaluator.
"""


class LedgerServiceError(Exception):
    """Base exception for all ledger service errors."""
    pass


class InvalidWorkoutError(LedgerServiceError):
    """Raised when a workout has an unknown status or malformed date."""
    pass


class UserNotFoundError(LedgerServiceError):
    """Raised when a workout is recorded for a user that doesn't exist."""
    pass


class PairNotFoundError(LedgerServiceError):
    """Raised when a pot operation targets a pair that doesn't exist."""
    pass


class SettlementConflictError(LedgerServiceError):
    """Raised when a settlement for the pair and week already exists."""
    pass


class PotContentionError(LedgerServiceError):
    """Raised when the pot reset keeps losing to concurrent increments."""
    pass
