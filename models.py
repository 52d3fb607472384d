"""
Pydantic data models for the record lookup service.

A Record is the single persisted entity: an integer primary key and a text
value. Field order here is the field order of the JSON served by the API.
"""

from pydantic import BaseModel


# ---------------------------------------------------------------------------
# Core Entities
# ---------------------------------------------------------------------------

class Record(BaseModel):
    """One row of the `mydata` table."""
    id: int
    value: str


# ---------------------------------------------------------------------------
# Seed data
# ---------------------------------------------------------------------------

SEED_RECORDS: list[Record] = [
    Record(id=1, value="test value"),
    Record(id=2, value="another value"),
]
