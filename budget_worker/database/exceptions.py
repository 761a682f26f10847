from budget_worker.database.models import DocumentStatus, ErrorCode


class RepositoryError(Exception):
    """Base exception for all repository errors."""

    code: ErrorCode = ErrorCode.PERSISTENCE_FAILED


class PersistenceError(RepositoryError):
    """Raised when the database driver fails to read or write."""


class DocumentNotFoundError(RepositoryError):
    """Raised when a document cannot be found in the database."""

    code = ErrorCode.NOT_FOUND


class NotAuthorizedError(RepositoryError):
    """Raised when a caller-scoped operation targets another owner's document."""

    code = ErrorCode.NOT_AUTHORIZED


class InvalidTransitionError(RepositoryError):
    """Raised when a status change is not an edge of the document state machine."""

    code = ErrorCode.VALIDATION_FAILED

    def __init__(self, from_status: DocumentStatus, to_status: DocumentStatus) -> None:
        super().__init__(f"Transition {from_status} -> {to_status} is not allowed")
        self.from_status = from_status
        self.to_status = to_status


class StatusConflictError(RepositoryError):
    """Raised when a compare-and-set finds the document in a different status."""
