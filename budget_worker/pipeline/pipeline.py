from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import ClassVar

from budget_worker.analysis.models import AnalysisOutcome
from budget_worker.database.models import AnalysisResultDraft, DocumentRecord, ErrorCode, Stage


@dataclass(slots=True)
class PipelineContext:
    document: DocumentRecord
    extracted_text: str = ""
    analysis: AnalysisOutcome | None = None
    result_draft: AnalysisResultDraft | None = None

    @property
    def document_id(self) -> int:
        return self.document.id


class PipelineStep(ABC):
    """One stage of the pipeline, backed by a single external call."""

    stage: ClassVar[Stage]
    # Recorded when the step times out or fails in an unexpected way.
    failure_code: ClassVar[ErrorCode]

    def __init__(self, timeout_seconds: float | None = None) -> None:
        self.timeout_seconds = timeout_seconds

    @abstractmethod
    def run(self, context: PipelineContext) -> PipelineContext:
        """Run the stage.

        Raises:
            StageError: if the external operation fails.
        """
        raise NotImplementedError
