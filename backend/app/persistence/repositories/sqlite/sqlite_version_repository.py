"""SQLite implementation of VersionRepository."""
from __future__ import annotations
import sqlite3
from typing import List, Optional

from app.domain.common.errors import ConcurrencyConflictError, NotFoundError
from app.domain.dashboard.models import Placement, Version
from app.persistence.db import connect, transaction
from app.persistence.interfaces.version_repository import Snapshotter, VersionRepository
from app.persistence.locks import dashboard_locks
from app.persistence.repositories.sqlite.rows import (
    insert_placements,
    row_to_draft,
    row_to_version,
    select_draft_placements,
    select_version_placements,
)


class SqliteVersionRepository(VersionRepository):

    def __init__(self, db_path: Optional[str] = None):
        self._db_path = db_path

    def publish(self, dashboard_id: str, snapshot: Snapshotter) -> Version:
        try:
            with dashboard_locks.hold(dashboard_id), transaction(self._db_path) as conn:
                if not conn.execute("SELECT 1 FROM dashboards WHERE id = ?", (dashboard_id,)).fetchone():
                    raise NotFoundError(f"Dashboard '{dashboard_id}' not found.")

                draft_row = conn.execute(
                    "SELECT * FROM dashboard_drafts WHERE dashboard_id = ? AND is_current = 1",
                    (dashboard_id,),
                ).fetchone()
                draft = row_to_draft(draft_row) if draft_row else None
                draft_placements = select_draft_placements(conn, draft.id) if draft else []

                latest = conn.execute(
                    "SELECT MAX(version_number) FROM dashboard_versions WHERE dashboard_id = ?",
                    (dashboard_id,),
                ).fetchone()[0] or 0

                version, copies = snapshot(draft, draft_placements, latest + 1)

                conn.execute(
                    """
                    INSERT INTO dashboard_versions (
                        id, dashboard_id, version_number, created_by,
                        name, description, is_active, created_at
                    ) VALUES (
                        :id, :dashboard_id, :version_number, :created_by,
                        :name, :description, 0, :created_at
                    )
                    """,
                    {
                        "id": version.id,
                        "dashboard_id": version.dashboard_id,
                        "version_number": version.version_number,
                        "created_by": version.created_by,
                        "name": version.name,
                        "description": version.description,
                        "created_at": version.created_at,
                    },
                )
                insert_placements(conn, copies)

                # Deactivate first: the partial unique index allows one active row at a time
                conn.execute(
                    "UPDATE dashboard_versions SET is_active = 0 WHERE dashboard_id = ? AND is_active = 1",
                    (dashboard_id,),
                )
                conn.execute("UPDATE dashboard_versions SET is_active = 1 WHERE id = ?", (version.id,))
                conn.execute(
                    "UPDATE dashboards SET is_published = 1, updated_at = ? WHERE id = ?",
                    (version.created_at, dashboard_id),
                )
        except sqlite3.IntegrityError as exc:
            # Only a unique-index collision means another writer got there first
            if not str(exc).startswith("UNIQUE constraint failed"):
                raise
            raise ConcurrencyConflictError(f"Publish of dashboard '{dashboard_id}' collided: {exc}") from exc

        version.is_active = True
        return version

    def get_active(self, dashboard_id: str) -> Optional[Version]:
        with connect(self._db_path) as conn:
            row = conn.execute(
                "SELECT * FROM dashboard_versions WHERE dashboard_id = ? AND is_active = 1",
                (dashboard_id,),
            ).fetchone()
        return row_to_version(row) if row else None

    def get_by_id(self, version_id: str) -> Optional[Version]:
        with connect(self._db_path) as conn:
            row = conn.execute("SELECT * FROM dashboard_versions WHERE id = ?", (version_id,)).fetchone()
        return row_to_version(row) if row else None

    def list_for_dashboard(self, dashboard_id: str) -> List[Version]:
        with connect(self._db_path) as conn:
            rows = conn.execute(
                "SELECT * FROM dashboard_versions WHERE dashboard_id = ? ORDER BY version_number DESC",
                (dashboard_id,),
            ).fetchall()
        return [row_to_version(r) for r in rows]

    def get_placements(self, version_id: str) -> List[Placement]:
        with connect(self._db_path) as conn:
            return select_version_placements(conn, version_id)
