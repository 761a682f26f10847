import os
from collections.abc import Callable, Generator
from pathlib import Path
from typing import Any

import psycopg
import pytest

from budget_worker.blob.local_store import LocalBlobStore
from budget_worker.config.settings import Settings
from budget_worker.database.connection import close_pool, get_connection, init_pool
from budget_worker.database.models import DocumentStatus
from budget_worker.database.schema import apply_schema


def _test_settings() -> Settings:
    os.environ.setdefault("DB_DATABASE", "budget_test")
    return Settings()


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    return _test_settings()


@pytest.fixture(scope="session", autouse=True)
def integration_pool(test_settings: Settings) -> Generator[None, None, None]:
    try:
        init_pool(test_settings)
        apply_schema()
    except Exception as e:
        close_pool()
        pytest.skip(
            f"PostgreSQL test DB not available: {e}. "
            "Set DB_* env to point at a disposable database"
        )
    try:
        yield
    finally:
        close_pool()


@pytest.fixture
def db_conn(integration_pool: None) -> Generator[psycopg.Connection[Any], None, None]:
    with get_connection() as conn:
        yield conn


@pytest.fixture
def integration_cleanup() -> Generator[list[int], None, None]:
    """Document IDs to delete after the test. Results and errors cascade."""
    cleanup: list[int] = []
    yield cleanup
    if not cleanup:
        return
    with get_connection() as conn:
        with conn.cursor() as cur:
            cur.execute("DELETE FROM documents WHERE id = ANY(%s)", (cleanup,))
        conn.commit()


@pytest.fixture
def seed_document(
    db_conn: psycopg.Connection[Any],
    integration_cleanup: list[int],
) -> Callable[..., int]:
    """Insert a document row directly, in any status, and return its ID."""

    def _seed(
        status: DocumentStatus = DocumentStatus.PENDING,
        owner_id: str = "owner-a",
        blob_ref: str = "0" * 32,
    ) -> int:
        with db_conn.cursor() as cur:
            cur.execute(
                """
                INSERT INTO documents (title, blob_ref, owner_id, status)
                VALUES (%s, %s, %s, %s)
                RETURNING id
                """,
                ("statement.pdf", blob_ref, owner_id, status.value),
            )
            row = cur.fetchone()
            assert row is not None
        db_conn.commit()
        integration_cleanup.append(row[0])
        return int(row[0])

    return _seed


@pytest.fixture
def blob_store(tmp_path: Path) -> LocalBlobStore:
    return LocalBlobStore(files_root=tmp_path)


@pytest.fixture
def count_rows(db_conn: psycopg.Connection[Any]) -> Callable[[str, int], int]:
    """Count rows of analysis_results or execution_errors for one document."""

    def _count(table: str, document_id: int) -> int:
        with db_conn.cursor() as cur:
            cur.execute(f"SELECT COUNT(*) FROM {table} WHERE document_id = %s", (document_id,))
            row = cur.fetchone()
        db_conn.commit()
        assert row is not None
        return int(row[0])

    return _count
