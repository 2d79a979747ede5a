"""SQLite implementation of DashboardRepository."""
from __future__ import annotations
import json
import sqlite3
from typing import List, Optional

from app.domain.dashboard.models import Dashboard, Draft
from app.persistence.db import connect, transaction
from app.persistence.interfaces.dashboard_repository import DashboardRepository
from app.persistence.locks import dashboard_locks
from app.persistence.repositories.sqlite.rows import insert_draft, row_to_dashboard

_UPSERT = """
    INSERT INTO dashboards (
        id, name, description, is_published, is_default,
        role_access, created_by, created_at, updated_at
    ) VALUES (
        :id, :name, :description, :is_published, :is_default,
        :role_access, :created_by, :created_at, :updated_at
    )
    ON CONFLICT(id) DO UPDATE SET
        name        = excluded.name,
        description = excluded.description,
        is_default  = excluded.is_default,
        role_access = excluded.role_access,
        updated_at  = excluded.updated_at
"""


def _write(conn: sqlite3.Connection, dashboard: Dashboard) -> None:
    conn.execute(
        _UPSERT,
        {
            "id": dashboard.id,
            "name": dashboard.name,
            "description": dashboard.description,
            "is_published": int(dashboard.is_published),
            "is_default": int(dashboard.is_default),
            "role_access": json.dumps(dashboard.role_access),
            "created_by": dashboard.created_by,
            "created_at": dashboard.created_at,
            "updated_at": dashboard.updated_at,
        },
    )


class SqliteDashboardRepository(DashboardRepository):

    def __init__(self, db_path: Optional[str] = None):
        self._db_path = db_path

    def create(self, dashboard: Dashboard, first_draft: Draft) -> None:
        with transaction(self._db_path) as conn:
            _write(conn, dashboard)
            insert_draft(conn, first_draft)

    def save(self, dashboard: Dashboard) -> None:
        with transaction(self._db_path) as conn:
            _write(conn, dashboard)

    def get_by_id(self, dashboard_id: str) -> Optional[Dashboard]:
        with connect(self._db_path) as conn:
            row = conn.execute("SELECT * FROM dashboards WHERE id = ?", (dashboard_id,)).fetchone()
        return row_to_dashboard(row) if row else None

    def list_visible(
        self,
        user_id: Optional[str] = None,
        role: Optional[str] = None,
        is_published: Optional[bool] = None,
        limit: Optional[int] = None,
        offset: int = 0,
    ) -> List[Dashboard]:
        clauses = []
        params: dict = {"limit": -1 if limit is None else limit, "offset": offset}
        if user_id is not None or role is not None:
            clauses.append(
                """
                (created_by = :user_id
                 OR EXISTS (SELECT 1 FROM json_each(dashboards.role_access) WHERE value = :role))
                """
            )
            params["user_id"] = user_id
            params["role"] = role
        if is_published is not None:
            clauses.append("is_published = :is_published")
            params["is_published"] = int(is_published)

        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""
        with connect(self._db_path) as conn:
            rows = conn.execute(
                f"""
                SELECT * FROM dashboards
                {where}
                ORDER BY created_at DESC, id ASC
                LIMIT :limit OFFSET :offset
                """,
                params,
            ).fetchall()
        return [row_to_dashboard(r) for r in rows]

    def delete(self, dashboard_id: str) -> bool:
        with dashboard_locks.hold(dashboard_id), transaction(self._db_path) as conn:
            deleted = conn.execute("DELETE FROM dashboards WHERE id = ?", (dashboard_id,)).rowcount
        return deleted > 0
