"""SQLite implementation of WidgetRegistry."""
from __future__ import annotations
import uuid
from datetime import datetime, timezone
from typing import List, Optional

from app.persistence.db import connect
from app.persistence.interfaces.widget_registry import WidgetRegistry


def _row_to_widget(row) -> dict:
    return {
        "id": row["id"],
        "name": row["name"],
        "widget_type": row["widget_type"],
        "is_published": bool(row["is_published"]),
        "created_by": row["created_by"],
        "created_at": row["created_at"],
    }


class SqliteWidgetRegistry(WidgetRegistry):

    def __init__(self, db_path: Optional[str] = None):
        self._db_path = db_path

    def exists(self, widget_id: str) -> bool:
        with connect(self._db_path) as conn:
            row = conn.execute("SELECT 1 FROM widgets WHERE id = ?", (widget_id,)).fetchone()
        return row is not None

    def register(self, widget: dict) -> dict:
        record = {
            "id": widget.get("id") or str(uuid.uuid4()),
            "name": widget["name"],
            "widget_type": widget["widget_type"],
            "is_published": int(bool(widget.get("is_published", False))),
            "created_by": widget.get("created_by"),
            "created_at": datetime.now(timezone.utc).isoformat(),
        }
        with connect(self._db_path) as conn:
            conn.execute(
                """
                INSERT INTO widgets (id, name, widget_type, is_published, created_by, created_at)
                VALUES (:id, :name, :widget_type, :is_published, :created_by, :created_at)
                """,
                record,
            )
        record["is_published"] = bool(record["is_published"])
        return record

    def list_all(self) -> List[dict]:
        with connect(self._db_path) as conn:
            rows = conn.execute("SELECT * FROM widgets ORDER BY created_at DESC").fetchall()
        return [_row_to_widget(r) for r in rows]
