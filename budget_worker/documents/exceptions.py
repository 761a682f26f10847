from budget_worker.database.models import ErrorCode


class DocumentValidationError(ValueError):
    """Raised when caller input for an upload is rejected."""

    code = ErrorCode.VALIDATION_FAILED
