from budget_worker.analysis.analyzer import StatementAnalyzer
from budget_worker.analysis.base import BaseAnalyzer
from budget_worker.analysis.factory import AnalyzerFactory

__all__ = ["AnalyzerFactory", "BaseAnalyzer", "StatementAnalyzer"]
