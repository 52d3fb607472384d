"""
Data access layer for the record database.
Provides read-only access to SQLite database with clean query interface.
"""

import sqlite3
from pathlib import Path
from typing import Dict, Optional

from models import Record
from .config import settings


class RecordDataProvider:
    """
    Provides records from the local SQLite database.
    One read-only connection shared by every request handler.
    """

    def __init__(self, db_path: str = None):
        """
        Initialize connection to the record database.

        Args:
            db_path: Path to data.db (defaults to config setting)
        """
        self.db_path = db_path or settings.DB_PATH

        if not Path(self.db_path).exists():
            raise FileNotFoundError(f"Database not found: {self.db_path}")

        self.conn = sqlite3.connect(
            f"file:{self.db_path}?mode=ro",
            uri=True,
            check_same_thread=False,
            timeout=settings.DB_TIMEOUT
        )
        self.conn.row_factory = sqlite3.Row

    def close(self):
        """Close database connection."""
        self.conn.close()

    # ----------------------------------------------------------------
    # Record Lookup
    # ----------------------------------------------------------------

    def get_record(self, record_id: int) -> Optional[Record]:
        """
        Get a single record by its primary key.

        Args:
            record_id: Integer id of the record

        Returns:
            Record, or None if no row has that id

        Raises:
            sqlite3.Error: query failed
            pydantic.ValidationError: stored row is not a valid record
                (e.g. a NULL value)
        """
        cur = self.conn.execute(
            "SELECT id, value FROM mydata WHERE id = ?",
            (record_id,)
        )
        row = cur.fetchone()
        return Record(**dict(row)) if row else None

    def get_database_stats(self) -> Dict:
        """Get database statistics."""
        cur = self.conn.execute("SELECT COUNT(*) as count FROM mydata")
        return {"total_records": cur.fetchone()["count"]}
