from pathlib import Path

from budget_worker.database.connection import get_connection
from budget_worker.logging.logger import Log

SCHEMA_PATH = Path(__file__).parent / "schema.sql"


def apply_schema(path: Path | None = None) -> None:
    """Create the tables and indexes if they do not exist yet."""
    ddl = (path or SCHEMA_PATH).read_text(encoding="utf-8")
    with get_connection() as conn:
        conn.execute(ddl)
        conn.commit()
    Log.info("Database schema applied")
