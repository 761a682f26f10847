from dataclasses import dataclass, field
from datetime import date
from enum import StrEnum


class Category(StrEnum):
    """Closed set of transaction categories the model may assign."""

    FOOD = "Food"
    SHOPPING = "Shopping"
    TRANSPORT = "Transport"
    UTILITIES = "Utilities"
    TRAVEL = "Travel"
    TRANSACTION = "Transaction"
    OTHER = "Other"


@dataclass(frozen=True)
class Transaction:
    """A single statement line."""

    date: date
    merchant: str
    amount: float
    category: Category

    def to_dict(self) -> dict[str, object]:
        return {
            "date": self.date.isoformat(),
            "merchant": self.merchant,
            "amount": self.amount,
            "category": self.category.value,
        }


@dataclass(frozen=True)
class StatementRecord:
    """Schema-validated output of the reasoning engine."""

    total_spent: float
    transactions: list[Transaction] = field(default_factory=list)
    summary: str = ""
    advice: str = ""


@dataclass(frozen=True)
class SpendingStats:
    """Aggregates derived from the transaction dates and the total spend."""

    period: str
    day_count: int
    average_daily_spent: float


@dataclass(frozen=True)
class AnalysisOutcome:
    """Output of the analysis stage."""

    record: StatementRecord
    model_id: str
    token_usage: int = 0
