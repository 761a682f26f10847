from budget_worker.database.models import ErrorCode, Stage


class StageError(Exception):
    """Raised by a pipeline step when its external operation fails.

    The orchestrator turns it into an ExecutionError row and a failed status;
    it never propagates past the orchestrator.
    """

    def __init__(self, stage: Stage, code: ErrorCode, message: str) -> None:
        super().__init__(message)
        self.stage = stage
        self.code = code
        self.message = message


class StageTimeoutError(TimeoutError):
    """Raised when an external call does not return within its time budget."""
