from abc import ABC, abstractmethod

from budget_worker.analysis.models import AnalysisOutcome


class BaseAnalyzer(ABC):
    """Contract for all statement analysis adapters."""

    @abstractmethod
    def analyze(self, text: str) -> AnalysisOutcome:
        """Turn extracted statement text into a validated StatementRecord.

        Args:
            text: Plain text from the extraction stage.

        Returns:
            AnalysisOutcome with the record, model id and token usage.

        Raises:
            AnalysisError: on any failure; its code names the failure kind.
        """
