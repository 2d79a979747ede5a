"""SQLite implementation of DraftRepository."""
from __future__ import annotations
import sqlite3
from datetime import datetime, timezone
from typing import List, Optional

from app.domain.common.errors import NotEditableError, NotFoundError
from app.domain.dashboard.models import Draft, Placement
from app.persistence.db import connect, transaction
from app.persistence.interfaces.draft_repository import DraftRepository, PlacementBuilder
from app.persistence.locks import dashboard_locks
from app.persistence.repositories.sqlite.rows import (
    INSERT_DRAFT,
    draft_params,
    insert_draft,
    insert_placements,
    row_to_draft,
    select_draft_placements,
    select_version_placements,
)

_SELECT_CURRENT = "SELECT * FROM dashboard_drafts WHERE dashboard_id = ? AND is_current = 1"


def _lock_current(conn: sqlite3.Connection, draft: Draft) -> None:
    """Inside a write transaction: the draft must still exist and be current."""
    row = conn.execute("SELECT is_current FROM dashboard_drafts WHERE id = ?", (draft.id,)).fetchone()
    if not row:
        raise NotEditableError(f"Draft '{draft.id}' no longer exists.")
    if not row["is_current"]:
        raise NotEditableError(f"Draft '{draft.id}' has been superseded and is read-only.")


class SqliteDraftRepository(DraftRepository):

    def __init__(self, db_path: Optional[str] = None):
        self._db_path = db_path

    def get_or_create_current(self, candidate: Draft) -> Draft:
        # The partial unique index on (dashboard_id) WHERE is_current = 1 decides the winner
        try:
            with transaction(self._db_path) as conn:
                conn.execute(
                    INSERT_DRAFT + " ON CONFLICT (dashboard_id) WHERE is_current = 1 DO NOTHING",
                    draft_params(candidate),
                )
                row = conn.execute(_SELECT_CURRENT, (candidate.dashboard_id,)).fetchone()
        except sqlite3.IntegrityError as exc:
            raise NotFoundError(f"Dashboard '{candidate.dashboard_id}' not found.") from exc
        return row_to_draft(row)

    def get_current(self, dashboard_id: str) -> Optional[Draft]:
        with connect(self._db_path) as conn:
            row = conn.execute(_SELECT_CURRENT, (dashboard_id,)).fetchone()
        return row_to_draft(row) if row else None

    def get_by_id(self, draft_id: str) -> Optional[Draft]:
        with connect(self._db_path) as conn:
            row = conn.execute("SELECT * FROM dashboard_drafts WHERE id = ?", (draft_id,)).fetchone()
        return row_to_draft(row) if row else None

    def list_for_dashboard(self, dashboard_id: str) -> List[Draft]:
        with connect(self._db_path) as conn:
            rows = conn.execute(
                """
                SELECT * FROM dashboard_drafts
                WHERE dashboard_id = ?
                ORDER BY is_current DESC, created_at DESC
                """,
                (dashboard_id,),
            ).fetchall()
        return [row_to_draft(r) for r in rows]

    def get_placements(self, draft_id: str) -> List[Placement]:
        with connect(self._db_path) as conn:
            return select_draft_placements(conn, draft_id)

    def replace_placements(self, draft: Draft, placements: List[Placement]) -> None:
        now = datetime.now(timezone.utc).isoformat()
        with dashboard_locks.hold(draft.dashboard_id), transaction(self._db_path) as conn:
            _lock_current(conn, draft)
            conn.execute("DELETE FROM draft_widget_placements WHERE draft_id = ?", (draft.id,))
            insert_placements(conn, placements)
            conn.execute("UPDATE dashboard_drafts SET updated_at = ? WHERE id = ?", (now, draft.id))
        draft.updated_at = now

    def supersede(
        self,
        new_draft: Draft,
        build_placements: PlacementBuilder,
        seed_version_id: Optional[str] = None,
    ) -> Draft:
        dashboard_id = new_draft.dashboard_id
        with dashboard_locks.hold(dashboard_id), transaction(self._db_path) as conn:
            if not conn.execute("SELECT 1 FROM dashboards WHERE id = ?", (dashboard_id,)).fetchone():
                raise NotFoundError(f"Dashboard '{dashboard_id}' not found.")
            current = conn.execute(_SELECT_CURRENT, (dashboard_id,)).fetchone()

            if seed_version_id is not None:
                owner = conn.execute(
                    "SELECT dashboard_id FROM dashboard_versions WHERE id = ?", (seed_version_id,)
                ).fetchone()
                if not owner or owner["dashboard_id"] != dashboard_id:
                    raise NotFoundError(f"Version '{seed_version_id}' not found for dashboard '{dashboard_id}'.")
                seed = select_version_placements(conn, seed_version_id)
            elif current:
                seed = select_draft_placements(conn, current["id"])
            else:
                seed = []

            if current:
                conn.execute(
                    "UPDATE dashboard_drafts SET is_current = 0, updated_at = ? WHERE id = ?",
                    (new_draft.created_at, current["id"]),
                )
            insert_draft(conn, new_draft)
            insert_placements(conn, build_placements([p.spec for p in seed]))
        return new_draft

    def update_details(self, draft: Draft) -> None:
        with transaction(self._db_path) as conn:
            _lock_current(conn, draft)
            conn.execute(
                "UPDATE dashboard_drafts SET name = ?, description = ?, updated_at = ? WHERE id = ?",
                (draft.name, draft.description, draft.updated_at, draft.id),
            )
