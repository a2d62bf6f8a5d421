"""Errors raised by the batch register services."""


class BatchError(Exception):
    """Base exception for batch services."""


class BatchNotFoundError(BatchError):
    """Raised when no batch has the requested id."""

    def __init__(self, beer_id: str) -> None:
        super().__init__(f"Batch '{beer_id}' not found")
        self.beer_id = beer_id


class BatchValidationError(BatchError):
    """Raised when a change would leave a batch in an invalid state."""


class InvalidTransitionError(BatchError):
    """Raised when a status change is not possible from the current status."""


class PersistenceError(BatchError):
    """Raised when the backing store rejects or fails a read or write."""
