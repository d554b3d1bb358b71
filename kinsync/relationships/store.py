"""
Relationship Store: persisted relationship metrics, one row per derived name.

Behavioral Contract:
- Written at session teardown, read when a derived record is matched again.
- Rows hold the JSON layout {"points", "giftsThisWeek", "lastGiftDate"}.
- Writing the same name again replaces the previous row.
- Reads surface corrupt rows as errors; callers decide whether they matter.
"""

import sqlite3
from datetime import datetime
from typing import List, Optional

from kinsync.models.relationship import RelationshipMetric


class RelationshipStore:
    """
    Keyed relationship metric store.
    SQLite; ``:memory:`` unless a file path is given.
    """

    def __init__(self, db_path: str = ":memory:"):
        self.db_path = db_path
        self._conn = sqlite3.connect(db_path, check_same_thread=False)
        self._conn.row_factory = sqlite3.Row
        self._init_schema()

    def _init_schema(self) -> None:
        """Create the metrics table if it doesn't exist."""
        self._conn.execute("""
            CREATE TABLE IF NOT EXISTS relationship_metrics (
                name TEXT PRIMARY KEY,
                record_json TEXT NOT NULL,
                updated_at TEXT NOT NULL
            )
        """)
        self._conn.commit()

    def write(self, name: str, metric: RelationshipMetric) -> RelationshipMetric:
        """Persist ``metric`` under ``name``, replacing any previous row."""
        self._conn.execute(
            """
            INSERT INTO relationship_metrics (name, record_json, updated_at)
            VALUES (?, ?, ?)
            ON CONFLICT(name) DO UPDATE SET
                record_json = excluded.record_json,
                updated_at = excluded.updated_at
            """,
            (
                name,
                metric.model_dump_json(by_alias=True),
                datetime.utcnow().isoformat(),
            ),
        )
        self._conn.commit()
        return metric

    def read(self, name: str) -> Optional[RelationshipMetric]:
        """
        Get the metric persisted for ``name``, or None.
        Raises pydantic.ValidationError if the stored row is corrupt.
        """
        row = self._conn.execute(
            "SELECT record_json FROM relationship_metrics WHERE name = ?", (name,)
        ).fetchone()
        if row is None:
            return None
        return RelationshipMetric.model_validate_json(row["record_json"])

    def names(self) -> List[str]:
        rows = self._conn.execute(
            "SELECT name FROM relationship_metrics ORDER BY name"
        ).fetchall()
        return [r["name"] for r in rows]

    def count(self) -> int:
        """Total number of persisted metrics."""
        row = self._conn.execute(
            "SELECT COUNT(*) as cnt FROM relationship_metrics"
        ).fetchone()
        return row["cnt"]

    def close(self) -> None:
        """Close the database connection."""
        self._conn.close()
