from budget_worker.database.models import ErrorCode


class AnalysisError(Exception):
    """Raised when statement analysis fails."""

    code: ErrorCode = ErrorCode.MODEL_CALL_FAILED


class AnalysisNetworkError(AnalysisError):
    """Raised when the AI provider call fails due to network/infrastructure issues."""


class AnalysisEmptyResponseError(AnalysisError):
    """Raised when the AI provider returns no usable content."""

    code = ErrorCode.MODEL_EMPTY_RESPONSE


class AnalysisMalformedResponseError(AnalysisError):
    """Raised when the AI response is not JSON matching the statement schema."""

    code = ErrorCode.MODEL_MALFORMED_JSON
