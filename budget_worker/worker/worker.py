import time

from budget_worker.config.settings import Settings
from budget_worker.database.repositories.document_repository import DocumentRepository
from budget_worker.logging.logger import Log
from budget_worker.pipeline.orchestrator import PipelineOrchestrator


class Worker:
    """Poll loop: find pending document -> run pipeline -> sleep when idle."""

    def __init__(
        self,
        doc_repo: DocumentRepository,
        orchestrator: PipelineOrchestrator,
        settings: Settings,
    ) -> None:
        self._doc_repo = doc_repo
        self._orchestrator = orchestrator
        self._settings = settings

    def run(self, max_documents: int | None = None) -> None:
        """Main poll loop. Runs forever until interrupted.

        If max_documents is set, stop after that many runs (for testing).
        """
        Log.info("Worker started, polling for pending documents")
        runs = 0
        try:
            while max_documents is None or runs < max_documents:
                document_id = self._try_find_pending()
                if document_id is None:
                    Log.debug("No pending documents, sleeping")
                    time.sleep(self._settings.job_poll_interval_seconds)
                    continue
                self._run_document(document_id)
                runs += 1
        except KeyboardInterrupt:
            Log.info("Worker shutting down gracefully")

    def _try_find_pending(self) -> int | None:
        """Look up the next pending document. Gracefully handle DB errors."""
        try:
            return self._doc_repo.find_next_pending_id()
        except Exception as exc:
            Log.warning(f"Database error, will retry: {exc}")
            return None

    def _run_document(self, document_id: int) -> None:
        try:
            outcome = self._orchestrator.run(document_id)
        except Exception as exc:
            Log.error(f"Run for document {document_id} aborted: {exc}")
            return
        if outcome.error_code is not None:
            Log.warning(f"Document {document_id} finished as {outcome.status} ({outcome.error_code})")
        else:
            Log.info(f"Document {document_id} finished as {outcome.status}")
