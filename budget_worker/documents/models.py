from dataclasses import dataclass, field

from budget_worker.analysis.models import SpendingStats
from budget_worker.database.models import AnalysisResultRecord, DocumentRecord, ExecutionErrorRecord


@dataclass(frozen=True)
class DocumentDetail:
    """A document as shown to its owner, with everything derived from it."""

    document: DocumentRecord
    analysis_result: AnalysisResultRecord | None = None
    errors: list[ExecutionErrorRecord] = field(default_factory=list)
    spending_stats: SpendingStats | None = None
