import time

from budget_worker.analysis.base import BaseAnalyzer
from budget_worker.analysis.exceptions import AnalysisError
from budget_worker.analysis.models import AnalysisOutcome
from budget_worker.analysis.stats import build_structured_data
from budget_worker.database.models import AnalysisResultDraft, ErrorCode, Stage
from budget_worker.logging.logger import Log
from budget_worker.pipeline.exceptions import StageError
from budget_worker.pipeline.pipeline import PipelineContext, PipelineStep
from budget_worker.pipeline.text_extractor import TextExtractor


class ExtractTextStep(PipelineStep):
    stage = Stage.EXTRACTION
    failure_code = ErrorCode.EXTRACTION_FAILED

    def __init__(self, text_extractor: TextExtractor, timeout_seconds: float | None = None) -> None:
        super().__init__(timeout_seconds)
        self._text_extractor = text_extractor

    def run(self, context: PipelineContext) -> PipelineContext:
        context.extracted_text = self._text_extractor.extract(context.document.blob_ref)
        Log.info(
            f"Extracted {len(context.extracted_text)} chars from document {context.document_id}"
        )
        return context


class AnalyzeStep(PipelineStep):
    stage = Stage.ANALYSIS
    failure_code = ErrorCode.MODEL_CALL_FAILED

    def __init__(self, analyzer: BaseAnalyzer, timeout_seconds: float | None = None) -> None:
        super().__init__(timeout_seconds)
        self._analyzer = analyzer

    def run(self, context: PipelineContext) -> PipelineContext:
        if not context.extracted_text:
            raise ValueError("PipelineContext.extracted_text must be set before analysis")
        try:
            outcome = self._analyzer.analyze(context.extracted_text)
        except AnalysisError as exc:
            raise StageError(Stage.ANALYSIS, exc.code, str(exc)) from exc
        context.analysis = outcome
        context.result_draft = build_result_draft(outcome, processed_at_ms=_now_ms())
        Log.info(
            f"Analyzed document {context.document_id}: "
            f"{len(outcome.record.transactions)} transactions"
        )
        return context


def build_result_draft(outcome: AnalysisOutcome, processed_at_ms: int) -> AnalysisResultDraft:
    """Shape an analysis outcome into the AnalysisResult row to persist."""
    return AnalysisResultDraft(
        summary=outcome.record.summary,
        structured_data=build_structured_data(outcome.record),
        metadata={
            "modelId": outcome.model_id,
            "tokenUsage": outcome.token_usage,
            "processedAt": processed_at_ms,
        },
    )


def _now_ms() -> int:
    return int(time.time() * 1000)
