from pathlib import Path

from budget_worker.analysis.factory import AnalyzerFactory
from budget_worker.blob.base import BaseBlobStore
from budget_worker.blob.local_store import LocalBlobStore
from budget_worker.config.settings import Settings
from budget_worker.database.exceptions import PersistenceError, StatusConflictError
from budget_worker.database.models import DocumentStatus, ErrorCode
from budget_worker.database.repositories.document_repository import DocumentRepository
from budget_worker.logging.logger import Log
from budget_worker.pdf.factory import PdfExtractorFactory
from budget_worker.pipeline.exceptions import StageError, StageTimeoutError
from budget_worker.pipeline.models import RunOutcome
from budget_worker.pipeline.pipeline import PipelineContext, PipelineStep
from budget_worker.pipeline.steps import AnalyzeStep, ExtractTextStep
from budget_worker.pipeline.text_extractor import TextExtractor
from budget_worker.pipeline.timeout import call_with_timeout


class PipelineOrchestrator:
    """Drives one document from pending to completed or failed.

    pending -> extracting -> analyzing -> completed, with a branch to failed
    from either working status. Each working status is committed before its
    external call starts, and every status change is a compare-and-set, so
    at most one run can hold a document.
    """

    def __init__(
        self,
        doc_repo: DocumentRepository,
        extract_step: ExtractTextStep,
        analyze_step: AnalyzeStep,
    ) -> None:
        self._doc_repo = doc_repo
        self._extract_step = extract_step
        self._analyze_step = analyze_step

    def run(self, document_id: int) -> RunOutcome:
        """Process one document.

        Stage failures end in a failed document and are reported through the
        returned outcome. A run that finds the document already claimed returns
        already_processing=True with its current status and writes nothing.

        Raises:
            DocumentNotFoundError: if the document does not exist.
            PersistenceError: if a status change cannot be stored and the
                failure cannot be recorded either; the stored status is left
                as it was before the failed write.
        """
        document = self._doc_repo.find_by_id(document_id)
        if document.status is not DocumentStatus.PENDING:
            return self._skip(document_id, document.status)
        if not self._doc_repo.transition(
            document_id, DocumentStatus.PENDING, DocumentStatus.EXTRACTING
        ):
            # Another run claimed it; report where that run has got to.
            return self._skip(document_id, self._doc_repo.find_by_id(document_id).status)
        Log.info(f"Document {document_id} moved to {DocumentStatus.EXTRACTING}")

        context = PipelineContext(document=document)

        try:
            context = self._run_step(self._extract_step, context)
        except StageError as exc:
            return self._record_failure(context, DocumentStatus.EXTRACTING, exc)

        try:
            advanced = self._doc_repo.transition(
                document_id,
                DocumentStatus.EXTRACTING,
                DocumentStatus.ANALYZING,
                extracted_text=context.extracted_text,
            )
        except PersistenceError as exc:
            return self._record_persistence_failure(context, DocumentStatus.EXTRACTING, exc)
        if not advanced:
            raise StatusConflictError(f"Document {document_id} left {DocumentStatus.EXTRACTING}")
        Log.info(f"Document {document_id} moved to {DocumentStatus.ANALYZING}")

        try:
            context = self._run_step(self._analyze_step, context)
        except StageError as exc:
            return self._record_failure(context, DocumentStatus.ANALYZING, exc)

        if context.result_draft is None:
            return self._record_failure(
                context,
                DocumentStatus.ANALYZING,
                StageError(
                    self._analyze_step.stage,
                    self._analyze_step.failure_code,
                    "Analysis step produced no result",
                ),
            )
        try:
            self._doc_repo.complete(document_id, context.result_draft)
        except PersistenceError as exc:
            return self._record_persistence_failure(context, DocumentStatus.ANALYZING, exc)
        Log.info(f"Document {document_id} moved to {DocumentStatus.COMPLETED}")
        return RunOutcome(document_id, DocumentStatus.COMPLETED)

    def _skip(self, document_id: int, status: DocumentStatus) -> RunOutcome:
        Log.warning(f"Document {document_id} is not claimable ({status}), skipping")
        return RunOutcome(document_id, status, already_processing=True)

    def _run_step(self, step: PipelineStep, context: PipelineContext) -> PipelineContext:
        try:
            return call_with_timeout(step.run, step.timeout_seconds, context)
        except StageError:
            raise
        except StageTimeoutError as exc:
            raise StageError(step.stage, step.failure_code, f"{step.stage} {exc}") from exc
        except Exception as exc:
            Log.exception(f"Unexpected {step.stage} error for document {context.document_id}")
            raise StageError(step.stage, step.failure_code, f"Unexpected error: {exc}") from exc

    def _record_failure(
        self,
        context: PipelineContext,
        from_status: DocumentStatus,
        error: StageError,
    ) -> RunOutcome:
        Log.error(
            f"Document {context.document_id} failed during {error.stage}: "
            f"{error.code} {error.message}"
        )
        self._doc_repo.fail(
            context.document_id, from_status, error.stage, error.code, error.message
        )
        return RunOutcome(context.document_id, DocumentStatus.FAILED, error_code=error.code)

    def _record_persistence_failure(
        self,
        context: PipelineContext,
        from_status: DocumentStatus,
        error: PersistenceError,
    ) -> RunOutcome:
        stage = self._extract_step.stage
        if from_status is DocumentStatus.ANALYZING:
            stage = self._analyze_step.stage
        try:
            return self._record_failure(
                context,
                from_status,
                StageError(stage, ErrorCode.PERSISTENCE_FAILED, str(error)),
            )
        except PersistenceError:
            Log.error(
                f"Document {context.document_id} left in {from_status}: "
                f"could not record persistence failure"
            )
            raise error


def build_orchestrator(
    settings: Settings,
    blob_store: BaseBlobStore | None = None,
    doc_repo: DocumentRepository | None = None,
) -> PipelineOrchestrator:
    """Build a PipelineOrchestrator with all required adapters."""
    if blob_store is None:
        blob_store = LocalBlobStore(files_root=Path(settings.files_root))
    text_extractor = TextExtractor(blob_store, PdfExtractorFactory.create(settings))
    analyzer = AnalyzerFactory.create(settings)
    return PipelineOrchestrator(
        doc_repo=doc_repo or DocumentRepository(),
        extract_step=ExtractTextStep(text_extractor, settings.extraction_timeout_seconds),
        analyze_step=AnalyzeStep(analyzer, settings.analysis_timeout_seconds),
    )
