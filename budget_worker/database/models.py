from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum
from typing import Any


class DocumentStatus(StrEnum):
    PENDING = "pending"
    EXTRACTING = "extracting"
    ANALYZING = "analyzing"
    COMPLETED = "completed"
    FAILED = "failed"


class Stage(StrEnum):
    EXTRACTION = "extraction"
    ANALYSIS = "analysis"


class ErrorCode(StrEnum):
    BLOB_NOT_FOUND = "BLOB_NOT_FOUND"
    EXTRACTION_FAILED = "EXTRACTION_FAILED"
    MODEL_EMPTY_RESPONSE = "MODEL_EMPTY_RESPONSE"
    MODEL_MALFORMED_JSON = "MODEL_MALFORMED_JSON"
    MODEL_CALL_FAILED = "MODEL_CALL_FAILED"
    PERSISTENCE_FAILED = "PERSISTENCE_FAILED"
    NOT_AUTHORIZED = "NOT_AUTHORIZED"
    NOT_FOUND = "NOT_FOUND"
    VALIDATION_FAILED = "VALIDATION_FAILED"


# Edges of the document state machine. Terminal states have no outgoing edges.
ALLOWED_TRANSITIONS: dict[DocumentStatus, frozenset[DocumentStatus]] = {
    DocumentStatus.PENDING: frozenset({DocumentStatus.EXTRACTING}),
    DocumentStatus.EXTRACTING: frozenset({DocumentStatus.ANALYZING, DocumentStatus.FAILED}),
    DocumentStatus.ANALYZING: frozenset({DocumentStatus.COMPLETED, DocumentStatus.FAILED}),
    DocumentStatus.COMPLETED: frozenset(),
    DocumentStatus.FAILED: frozenset(),
}

TERMINAL_STATUSES = frozenset({DocumentStatus.COMPLETED, DocumentStatus.FAILED})


def is_allowed_transition(from_status: DocumentStatus, to_status: DocumentStatus) -> bool:
    return to_status in ALLOWED_TRANSITIONS[from_status]


@dataclass
class DocumentRecord:
    """Represents a row from the documents table."""

    id: int
    title: str
    blob_ref: str
    owner_id: str
    status: DocumentStatus
    extracted_text: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass(frozen=True)
class AnalysisResultDraft:
    """An analysis result that has not been persisted yet."""

    summary: str
    structured_data: dict[str, Any] = field(default_factory=dict)
    metadata: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class AnalysisResultRecord:
    """Represents a row from the analysis_results table."""

    id: int
    document_id: int
    summary: str
    structured_data: dict[str, Any]
    metadata: dict[str, Any]
    created_at: datetime | None = None


@dataclass(frozen=True)
class ExecutionErrorRecord:
    """Represents a row from the execution_errors table."""

    id: int
    document_id: int
    step: Stage
    code: ErrorCode
    message: str
    timestamp: datetime | None = None
