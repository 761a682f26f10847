from dataclasses import dataclass

from budget_worker.database.models import DocumentStatus, ErrorCode


@dataclass(frozen=True)
class RunOutcome:
    """What a single orchestration run did to one document."""

    document_id: int
    status: DocumentStatus
    error_code: ErrorCode | None = None
    already_processing: bool = False

    @property
    def succeeded(self) -> bool:
        return self.status is DocumentStatus.COMPLETED
