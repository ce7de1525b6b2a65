# expense_tracker/errors.py


class ExpenseTrackerError(Exception):
    """Base class for errors raised by the expense tracker."""


class StorageError(ExpenseTrackerError):
    """Raised when the SQLite store fails a statement."""


class NotFoundError(ExpenseTrackerError):
    """Raised when no row matches the requested identifier."""

    def __init__(self, entity: str = "Transaction", identifier=None):
        self.entity = entity
        self.identifier = identifier
        super().__init__(f"{entity} not found")
