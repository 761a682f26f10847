from collections.abc import Generator
from contextlib import contextmanager
from typing import Any

import psycopg
from psycopg.rows import dict_row
from psycopg.types.json import Jsonb

from budget_worker.database.connection import get_connection
from budget_worker.database.exceptions import (
    DocumentNotFoundError,
    InvalidTransitionError,
    NotAuthorizedError,
    PersistenceError,
    StatusConflictError,
)
from budget_worker.database.models import (
    AnalysisResultDraft,
    AnalysisResultRecord,
    DocumentRecord,
    DocumentStatus,
    ErrorCode,
    ExecutionErrorRecord,
    Stage,
    is_allowed_transition,
)

_DOCUMENT_COLUMNS = "id, title, blob_ref, owner_id, status, extracted_text, created_at, updated_at"
_RESULT_COLUMNS = "id, document_id, summary, structured_data, metadata, created_at"
_ERROR_COLUMNS = "id, document_id, step, code, message, created_at"

# Edges that carry no payload. Completion and failure go through complete()/fail().
_PLAIN_TRANSITIONS = frozenset(
    {
        (DocumentStatus.PENDING, DocumentStatus.EXTRACTING),
        (DocumentStatus.EXTRACTING, DocumentStatus.ANALYZING),
    }
)


@contextmanager
def _connection() -> Generator[psycopg.Connection[Any], None, None]:
    """Pooled connection whose driver errors surface as PersistenceError."""
    try:
        with get_connection() as conn:
            yield conn
    except psycopg.Error as exc:
        raise PersistenceError(f"Database error: {exc}") from exc


class DocumentRepository:
    """Database operations for documents, analysis_results and execution_errors.

    Every status change is a compare-and-set on the current status, so two
    callers racing on the same document can never both win.
    """

    def create(self, title: str, blob_ref: str, owner_id: str) -> DocumentRecord:
        """Insert a new document in the pending status."""
        with _connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    f"""
                    INSERT INTO documents (title, blob_ref, owner_id, status)
                    VALUES (%s, %s, %s, %s)
                    RETURNING {_DOCUMENT_COLUMNS}
                    """,
                    (title, blob_ref, owner_id, DocumentStatus.PENDING.value),
                )
                row = self._returned_row(cur, "documents")
            conn.commit()
        return self._to_document(row)

    def find_by_id(self, document_id: int) -> DocumentRecord:
        """Find a document by ID.

        Raises:
            DocumentNotFoundError: if no document with this ID exists.
        """
        with _connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    f"SELECT {_DOCUMENT_COLUMNS} FROM documents WHERE id = %s",
                    (document_id,),
                )
                row = cur.fetchone()

        if row is None:
            raise DocumentNotFoundError(f"Document {document_id} not found")
        return self._to_document(row)

    def find_owned(self, document_id: int, owner_id: str) -> DocumentRecord:
        """Find a document and check it belongs to owner_id.

        Raises:
            DocumentNotFoundError: if no document with this ID exists.
            NotAuthorizedError: if the document belongs to someone else.
        """
        document = self.find_by_id(document_id)
        if document.owner_id != owner_id:
            raise NotAuthorizedError(f"Not authorized to access document {document_id}")
        return document

    def list_by_owner(self, owner_id: str) -> list[DocumentRecord]:
        """List an owner's documents, newest first."""
        with _connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    f"""
                    SELECT {_DOCUMENT_COLUMNS}
                    FROM documents
                    WHERE owner_id = %s
                    ORDER BY created_at DESC, id DESC
                    """,
                    (owner_id,),
                )
                rows = cur.fetchall()
        return [self._to_document(row) for row in rows]

    def list_by_status(self, status: DocumentStatus, limit: int = 100) -> list[DocumentRecord]:
        """List documents in a given status, oldest first."""
        with _connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    f"""
                    SELECT {_DOCUMENT_COLUMNS}
                    FROM documents
                    WHERE status = %s
                    ORDER BY created_at, id
                    LIMIT %s
                    """,
                    (status.value, limit),
                )
                rows = cur.fetchall()
        return [self._to_document(row) for row in rows]

    def find_next_pending_id(self) -> int | None:
        """Return the oldest pending document ID without claiming it."""
        with _connection() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    """
                    SELECT id FROM documents
                    WHERE status = %s
                    ORDER BY created_at, id
                    LIMIT 1
                    """,
                    (DocumentStatus.PENDING.value,),
                )
                row = cur.fetchone()
        return None if row is None else int(row[0])

    def transition(
        self,
        document_id: int,
        from_status: DocumentStatus,
        to_status: DocumentStatus,
        *,
        extracted_text: str | None = None,
    ) -> bool:
        """Move a document from from_status to to_status if it is still there.

        Returns False when another writer changed the status first.

        Raises:
            InvalidTransitionError: if the edge is not a plain state machine edge.
        """
        if (from_status, to_status) not in _PLAIN_TRANSITIONS:
            raise InvalidTransitionError(from_status, to_status)
        with _connection() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    """
                    UPDATE documents
                    SET status = %s,
                        extracted_text = COALESCE(%s, extracted_text),
                        updated_at = NOW()
                    WHERE id = %s AND status = %s
                    """,
                    (to_status.value, extracted_text, document_id, from_status.value),
                )
                changed = cur.rowcount == 1
            conn.commit()
        return changed

    def complete(self, document_id: int, draft: AnalysisResultDraft) -> AnalysisResultRecord:
        """Insert the analysis result and mark the document completed in one transaction.

        Raises:
            StatusConflictError: if the document is no longer analyzing.
        """
        with _connection() as conn:
            with conn.transaction():
                with conn.cursor(row_factory=dict_row) as cur:
                    self._compare_and_set(
                        cur, document_id, DocumentStatus.ANALYZING, DocumentStatus.COMPLETED
                    )
                    cur.execute(
                        f"""
                        INSERT INTO analysis_results
                        (document_id, summary, structured_data, metadata)
                        VALUES (%s, %s, %s, %s)
                        RETURNING {_RESULT_COLUMNS}
                        """,
                        (
                            document_id,
                            draft.summary,
                            Jsonb(draft.structured_data),
                            Jsonb(draft.metadata),
                        ),
                    )
                    row = self._returned_row(cur, "analysis_results")
        return self._to_result(row)

    def fail(
        self,
        document_id: int,
        from_status: DocumentStatus,
        step: Stage,
        code: ErrorCode,
        message: str,
    ) -> ExecutionErrorRecord:
        """Append an execution error and mark the document failed in one transaction.

        Raises:
            InvalidTransitionError: if from_status cannot move to failed.
            StatusConflictError: if the document is no longer in from_status.
        """
        if not is_allowed_transition(from_status, DocumentStatus.FAILED):
            raise InvalidTransitionError(from_status, DocumentStatus.FAILED)
        with _connection() as conn:
            with conn.transaction():
                with conn.cursor(row_factory=dict_row) as cur:
                    self._compare_and_set(cur, document_id, from_status, DocumentStatus.FAILED)
                    cur.execute(
                        f"""
                        INSERT INTO execution_errors (document_id, step, code, message)
                        VALUES (%s, %s, %s, %s)
                        RETURNING {_ERROR_COLUMNS}
                        """,
                        (document_id, step.value, code.value, message),
                    )
                    row = self._returned_row(cur, "execution_errors")
        return self._to_error(row)

    def find_analysis_result(self, document_id: int) -> AnalysisResultRecord | None:
        with _connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    f"SELECT {_RESULT_COLUMNS} FROM analysis_results WHERE document_id = %s",
                    (document_id,),
                )
                row = cur.fetchone()
        return None if row is None else self._to_result(row)

    def list_errors(self, document_id: int) -> list[ExecutionErrorRecord]:
        with _connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    f"""
                    SELECT {_ERROR_COLUMNS}
                    FROM execution_errors
                    WHERE document_id = %s
                    ORDER BY created_at, id
                    """,
                    (document_id,),
                )
                rows = cur.fetchall()
        return [self._to_error(row) for row in rows]

    def delete_owned(self, document_id: int, owner_id: str) -> DocumentRecord:
        """Delete a document owned by owner_id, cascading to its results and errors.

        Returns the deleted record so the caller can release its blob.

        Raises:
            DocumentNotFoundError: if no document with this ID exists.
            NotAuthorizedError: if the document belongs to someone else.
        """
        with _connection() as conn:
            with conn.transaction():
                with conn.cursor(row_factory=dict_row) as cur:
                    cur.execute(
                        f"SELECT {_DOCUMENT_COLUMNS} FROM documents WHERE id = %s FOR UPDATE",
                        (document_id,),
                    )
                    row = cur.fetchone()
                    if row is None:
                        raise DocumentNotFoundError(f"Document {document_id} not found")
                    if row["owner_id"] != owner_id:
                        raise NotAuthorizedError(
                            f"Not authorized to delete document {document_id}"
                        )
                    cur.execute("DELETE FROM documents WHERE id = %s", (document_id,))
        return self._to_document(row)

    @staticmethod
    def _compare_and_set(
        cur: psycopg.Cursor[Any],
        document_id: int,
        from_status: DocumentStatus,
        to_status: DocumentStatus,
    ) -> None:
        cur.execute(
            """
            UPDATE documents
            SET status = %s, updated_at = NOW()
            WHERE id = %s AND status = %s
            """,
            (to_status.value, document_id, from_status.value),
        )
        if cur.rowcount != 1:
            raise StatusConflictError(
                f"Document {document_id} is no longer {from_status}"
            )

    @staticmethod
    def _returned_row(cur: psycopg.Cursor[dict[str, Any]], table: str) -> dict[str, Any]:
        row = cur.fetchone()
        if row is None:
            raise PersistenceError(f"INSERT INTO {table} returned no row")
        return row

    @staticmethod
    def _to_document(row: dict[str, Any]) -> DocumentRecord:
        return DocumentRecord(
            id=row["id"],
            title=row["title"],
            blob_ref=row["blob_ref"],
            owner_id=row["owner_id"],
            status=DocumentStatus(row["status"]),
            extracted_text=row["extracted_text"],
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )

    @staticmethod
    def _to_result(row: dict[str, Any]) -> AnalysisResultRecord:
        return AnalysisResultRecord(
            id=row["id"],
            document_id=row["document_id"],
            summary=row["summary"],
            structured_data=row["structured_data"],
            metadata=row["metadata"],
            created_at=row["created_at"],
        )

    @staticmethod
    def _to_error(row: dict[str, Any]) -> ExecutionErrorRecord:
        return ExecutionErrorRecord(
            id=row["id"],
            document_id=row["document_id"],
            step=Stage(row["step"]),
            code=ErrorCode(row["code"]),
            message=row["message"],
            timestamp=row["created_at"],
        )
