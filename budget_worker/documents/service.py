from budget_worker.analysis.stats import stats_from_structured_data
from budget_worker.blob.base import BaseBlobStore, UploadDestination
from budget_worker.blob.exceptions import BlobNotFoundError
from budget_worker.database.models import DocumentRecord
from budget_worker.database.repositories.document_repository import DocumentRepository
from budget_worker.documents.exceptions import DocumentValidationError
from budget_worker.documents.models import DocumentDetail
from budget_worker.logging.logger import Log

MAX_TITLE_LENGTH = 255


class DocumentService:
    """Owner-scoped upload, read and delete operations for statements.

    Uploading takes three independently failable calls: request_upload(),
    upload(), then commit_upload(). Only the commit creates a Document, so an
    abandoned upload leaves at most an orphaned blob.
    """

    def __init__(self, doc_repo: DocumentRepository, blob_store: BaseBlobStore) -> None:
        self._doc_repo = doc_repo
        self._blob_store = blob_store

    def request_upload(self) -> UploadDestination:
        return self._blob_store.create_upload_destination()

    def upload(self, destination: UploadDestination, payload: bytes) -> str:
        """Transfer the payload and return the blob reference to commit."""
        if not payload:
            raise DocumentValidationError("Uploaded file is empty")
        self._blob_store.write(destination.blob_ref, payload)
        Log.info(f"Stored {len(payload)} bytes as blob {destination.blob_ref}")
        return destination.blob_ref

    def commit_upload(self, owner_id: str, title: str, blob_ref: str) -> DocumentRecord:
        """Create the pending Document for an uploaded blob.

        Raises:
            DocumentValidationError: if the title is empty or too long, or the
                blob reference does not resolve.
        """
        title = title.strip()
        if not owner_id:
            raise DocumentValidationError("owner_id must be a non-empty string")
        if not title:
            raise DocumentValidationError("title must be a non-empty string")
        if len(title) > MAX_TITLE_LENGTH:
            raise DocumentValidationError(f"title must be at most {MAX_TITLE_LENGTH} characters")
        if not self._blob_store.exists(blob_ref):
            raise DocumentValidationError(f"No uploaded content for blob {blob_ref!r}")

        document = self._doc_repo.create(title=title, blob_ref=blob_ref, owner_id=owner_id)
        Log.info(f"Document {document.id} created for owner {owner_id}")
        return document

    def list_documents(self, owner_id: str) -> list[DocumentRecord]:
        return self._doc_repo.list_by_owner(owner_id)

    def get_document(self, document_id: int, owner_id: str) -> DocumentDetail:
        """Fetch one owned document with its analysis result and failure trail.

        Raises:
            DocumentNotFoundError: if the document does not exist.
            NotAuthorizedError: if it belongs to another owner.
        """
        document = self._doc_repo.find_owned(document_id, owner_id)
        result = self._doc_repo.find_analysis_result(document_id)
        stats = None
        if result is not None:
            stats = stats_from_structured_data(result.structured_data)
        return DocumentDetail(
            document=document,
            analysis_result=result,
            errors=self._doc_repo.list_errors(document_id),
            spending_stats=stats,
        )

    def delete_document(self, document_id: int, owner_id: str) -> None:
        """Delete an owned document, its result and error rows, then its blob.

        Raises:
            DocumentNotFoundError: if the document does not exist.
            NotAuthorizedError: if it belongs to another owner. Nothing is deleted.
        """
        document = self._doc_repo.delete_owned(document_id, owner_id)
        try:
            self._blob_store.delete(document.blob_ref)
        except BlobNotFoundError:
            Log.warning(f"Blob {document.blob_ref} of document {document_id} was already gone")
        Log.info(f"Document {document_id} deleted by owner {owner_id}")
