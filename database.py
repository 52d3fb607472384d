"""
SQLite database layer for the record lookup service.

Owns the on-disk schema and the seed rows. Opening a DatabaseManager creates
the file and the `mydata` table when they are missing and, unless seeding is
switched off, inserts the seed records that are not already present. Running
it again against the same file changes nothing.

Usage:
    # Standalone: create and seed a database file
    python database.py [path/to/data.db]

    # Programmatic
    from database import DatabaseManager
    db = DatabaseManager("data.db")
    db.get_record(1)
"""

import os
import sqlite3
import sys
from typing import Dict, List, Optional

from models import Record, SEED_RECORDS


DEFAULT_DB_PATH = "data.db"


# ---------------------------------------------------------------------------
# Schema DDL
# ---------------------------------------------------------------------------

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS mydata (
    id    INTEGER PRIMARY KEY,
    value TEXT
);
"""

SEED_SQL = "INSERT OR IGNORE INTO mydata (id, value) VALUES (?, ?)"


class DatabaseManager:
    """SQLite database manager: schema creation, seeding and simple reads."""

    def __init__(self, db_path: str = DEFAULT_DB_PATH, seed: bool = True):
        parent = os.path.dirname(db_path)
        if parent:
            os.makedirs(parent, exist_ok=True)
        self.db_path = db_path
        self.conn = sqlite3.connect(db_path)
        self.conn.row_factory = sqlite3.Row
        try:
            self._create_schema()
            if seed:
                self.seed(SEED_RECORDS)
        except sqlite3.Error:
            self.conn.close()
            raise

    def _create_schema(self):
        self.conn.executescript(SCHEMA_SQL)
        self.conn.commit()

    def close(self):
        self.conn.close()

    # ------------------------------------------------------------------
    # Records
    # ------------------------------------------------------------------

    def seed(self, records: list[Record]) -> int:
        """Insert records whose ids are not present yet. Returns rows added."""
        rows = [(r.id, r.value) for r in records]
        before = self.conn.total_changes
        self.conn.executemany(SEED_SQL, rows)
        self.conn.commit()
        return self.conn.total_changes - before

    def get_record(self, record_id: int) -> dict | None:
        cur = self.conn.execute(
            "SELECT id, value FROM mydata WHERE id = ?", (record_id,)
        )
        row = cur.fetchone()
        return dict(row) if row else None

    def count_records(self) -> int:
        cur = self.conn.execute("SELECT COUNT(*) AS count FROM mydata")
        return cur.fetchone()["count"]

    def query(self, sql: str, params: tuple = ()) -> List[Dict]:
        """Run an arbitrary query and return the rows as dicts."""
        cur = self.conn.execute(sql, params)
        return [dict(row) for row in cur.fetchall()]


def main(argv: Optional[list[str]] = None) -> int:
    argv = sys.argv[1:] if argv is None else argv
    db_path = argv[0] if argv else DEFAULT_DB_PATH
    db = DatabaseManager(db_path)
    try:
        print(f"Database ready: {db.db_path} ({db.count_records()} records)")
    finally:
        db.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())
