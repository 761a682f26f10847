from budget_worker.blob.base import BaseBlobStore
from budget_worker.blob.exceptions import BlobNotFoundError
from budget_worker.database.models import ErrorCode, Stage
from budget_worker.logging.logger import Log
from budget_worker.pdf.base import BasePdfExtractor
from budget_worker.pdf.exceptions import PdfExtractionError
from budget_worker.pipeline.exceptions import StageError


class TextExtractor:
    """Resolves a blob reference and converts the stored PDF into plain text."""

    def __init__(self, blob_store: BaseBlobStore, pdf_extractor: BasePdfExtractor) -> None:
        self._blob_store = blob_store
        self._pdf_extractor = pdf_extractor

    def extract(self, blob_ref: str) -> str:
        """Return the statement text stored under blob_ref.

        Raises:
            StageError: BLOB_NOT_FOUND if the reference does not resolve,
                EXTRACTION_FAILED if the content is unreadable or has no text.
        """
        try:
            pdf_bytes = self._blob_store.read(blob_ref)
        except BlobNotFoundError as exc:
            raise StageError(Stage.EXTRACTION, ErrorCode.BLOB_NOT_FOUND, str(exc)) from exc
        Log.info(f"Loaded {len(pdf_bytes)} bytes for blob {blob_ref}")

        try:
            text = self._pdf_extractor.extract(pdf_bytes)
        except PdfExtractionError as exc:
            raise StageError(Stage.EXTRACTION, ErrorCode.EXTRACTION_FAILED, str(exc)) from exc

        # PostgreSQL text columns cannot hold NUL.
        text = text.replace("\x00", "").strip()
        if not text:
            raise StageError(
                Stage.EXTRACTION,
                ErrorCode.EXTRACTION_FAILED,
                "Document contains no extractable text",
            )
        return text
