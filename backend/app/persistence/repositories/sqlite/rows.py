"""Row <-> domain object mapping shared by the SQLite repositories."""
from __future__ import annotations
import json
import sqlite3
from typing import Iterable, List

from app.domain.dashboard.models import (
    Dashboard,
    Draft,
    DraftScope,
    Placement,
    PlacementScope,
    Version,
    VersionScope,
)

PLACEMENT_ORDER = "ORDER BY layout_type ASC, position_y ASC, position_x ASC"


def row_to_dashboard(row) -> Dashboard:
    return Dashboard(
        id=row["id"],
        name=row["name"],
        description=row["description"],
        created_by=row["created_by"],
        created_at=row["created_at"],
        updated_at=row["updated_at"],
        is_published=bool(row["is_published"]),
        is_default=bool(row["is_default"]),
        role_access=json.loads(row["role_access"] or "[]"),
    )


def row_to_draft(row) -> Draft:
    return Draft(
        id=row["id"],
        dashboard_id=row["dashboard_id"],
        created_by=row["created_by"],
        created_at=row["created_at"],
        updated_at=row["updated_at"],
        name=row["name"],
        description=row["description"],
        is_current=bool(row["is_current"]),
    )


def row_to_version(row) -> Version:
    return Version(
        id=row["id"],
        dashboard_id=row["dashboard_id"],
        version_number=row["version_number"],
        created_by=row["created_by"],
        created_at=row["created_at"],
        name=row["name"],
        description=row["description"],
        is_active=bool(row["is_active"]),
    )


def row_to_placement(row, scope: PlacementScope) -> Placement:
    return Placement(
        id=row["id"],
        scope=scope,
        widget_id=row["widget_id"],
        position_x=row["position_x"],
        position_y=row["position_y"],
        width=row["width"],
        height=row["height"],
        layout_type=row["layout_type"],
        created_at=row["created_at"],
        created_by=row["created_by"],
    )


INSERT_DRAFT = """
    INSERT INTO dashboard_drafts (
        id, dashboard_id, created_by, name, description, is_current, created_at, updated_at
    ) VALUES (
        :id, :dashboard_id, :created_by, :name, :description, :is_current, :created_at, :updated_at
    )
"""


def draft_params(draft: Draft) -> dict:
    return {
        "id": draft.id,
        "dashboard_id": draft.dashboard_id,
        "created_by": draft.created_by,
        "name": draft.name,
        "description": draft.description,
        "is_current": int(draft.is_current),
        "created_at": draft.created_at,
        "updated_at": draft.updated_at,
    }


def insert_draft(conn: sqlite3.Connection, draft: Draft) -> None:
    conn.execute(INSERT_DRAFT, draft_params(draft))


def _placement_params(p: Placement) -> dict:
    return {
        "id": p.id,
        "owner_id": p.scope.owner_id,
        "widget_id": p.widget_id,
        "position_x": p.position_x,
        "position_y": p.position_y,
        "width": p.width,
        "height": p.height,
        "layout_type": p.layout_type,
        "created_by": p.created_by,
        "created_at": p.created_at,
    }


def insert_placements(conn: sqlite3.Connection, placements: Iterable[Placement]) -> None:
    """Each placement goes to the table of its scope; the scope type picks the owner column."""
    draft_rows: List[dict] = []
    version_rows: List[dict] = []
    for p in placements:
        if isinstance(p.scope, DraftScope):
            draft_rows.append(_placement_params(p))
        elif isinstance(p.scope, VersionScope):
            version_rows.append(_placement_params(p))
        else:
            raise TypeError(f"Unknown placement scope {p.scope!r}")

    columns = "widget_id, position_x, position_y, width, height, layout_type, created_by, created_at"
    values = ":widget_id, :position_x, :position_y, :width, :height, :layout_type, :created_by, :created_at"
    if draft_rows:
        conn.executemany(
            f"INSERT INTO draft_widget_placements (id, draft_id, {columns}) VALUES (:id, :owner_id, {values})",
            draft_rows,
        )
    if version_rows:
        conn.executemany(
            f"INSERT INTO widget_placements (id, version_id, {columns}) VALUES (:id, :owner_id, {values})",
            version_rows,
        )


def select_draft_placements(conn: sqlite3.Connection, draft_id: str) -> List[Placement]:
    rows = conn.execute(
        f"SELECT * FROM draft_widget_placements WHERE draft_id = ? {PLACEMENT_ORDER}",
        (draft_id,),
    ).fetchall()
    scope = DraftScope(draft_id)
    return [row_to_placement(r, scope) for r in rows]


def select_version_placements(conn: sqlite3.Connection, version_id: str) -> List[Placement]:
    rows = conn.execute(
        f"SELECT * FROM widget_placements WHERE version_id = ? {PLACEMENT_ORDER}",
        (version_id,),
    ).fetchall()
    scope = VersionScope(version_id)
    return [row_to_placement(r, scope) for r in rows]
