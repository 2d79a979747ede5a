"""Domain service: pure business logic for the draft/version lifecycle."""
from __future__ import annotations
import uuid
from datetime import datetime, timezone
from typing import List, Optional, Sequence, Tuple

from app.domain.common.result import Result
from app.domain.dashboard.grid import validate_placement_set
from app.domain.dashboard.models import (
    Dashboard,
    Draft,
    DraftScope,
    Placement,
    PlacementScope,
    PlacementSpec,
    Version,
    VersionScope,
)
from app.domain.dashboard.rules import (
    DEFAULT_DRAFT_NAME,
    default_version_name,
    ensure_draft_editable,
    ensure_publishable,
    validate_dashboard_content,
)


def now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def new_id() -> str:
    return str(uuid.uuid4())


class DashboardDomainService:
    """
    Pure domain operations: no I/O. All methods return Result[T] or plain values.
    The application layer calls these and then persists via the repositories.
    """

    def create_dashboard(self, owner_id: str, data: dict) -> Result[Dashboard]:
        validation = validate_dashboard_content(data)
        if not validation.is_success:
            return Result.fail(validation.error)

        now = now_iso()
        return Result.ok(
            Dashboard(
                id=new_id(),
                name=data["name"].strip(),
                description=data.get("description"),
                created_by=owner_id,
                created_at=now,
                updated_at=now,
                is_default=bool(data.get("is_default", False)),
                role_access=list(data.get("role_access") or []),
            )
        )

    def update_dashboard(self, dashboard: Dashboard, data: dict) -> Result[Dashboard]:
        """Apply the soft attributes present in `data`. Publication state is never set here."""
        validation = validate_dashboard_content(data, partial=True)
        if not validation.is_success:
            return Result.fail(validation.error)

        if data.get("name") is not None:
            dashboard.name = data["name"].strip()
        if "description" in data:
            dashboard.description = data["description"]
        if data.get("role_access") is not None:
            dashboard.role_access = list(data["role_access"])
        if data.get("is_default") is not None:
            dashboard.is_default = bool(data["is_default"])
        dashboard.updated_at = now_iso()
        return Result.ok(dashboard)

    def new_draft(
        self,
        dashboard_id: str,
        creator_id: str,
        name: Optional[str] = None,
        description: Optional[str] = None,
    ) -> Draft:
        now = now_iso()
        return Draft(
            id=new_id(),
            dashboard_id=dashboard_id,
            created_by=creator_id,
            created_at=now,
            updated_at=now,
            name=name or DEFAULT_DRAFT_NAME,
            description=description,
            is_current=True,
        )

    def place(self, scope: PlacementScope, specs: Sequence[PlacementSpec], creator_id: Optional[str]) -> List[Placement]:
        """Materialise specs as placements owned by `scope`, with fresh ids."""
        now = now_iso()
        return [
            Placement(
                id=new_id(),
                scope=scope,
                widget_id=s.widget_id,
                position_x=s.position_x,
                position_y=s.position_y,
                width=s.width,
                height=s.height,
                layout_type=s.layout_type,
                created_at=now,
                created_by=creator_id,
            )
            for s in specs
        ]

    def replace_placements(
        self,
        draft: Draft,
        specs: Sequence[PlacementSpec],
        editor_id: str,
    ) -> Result[List[Placement]]:
        """Build the full replacement set for a draft. Rejects historical drafts and invalid grids."""
        editable = ensure_draft_editable(draft)
        if not editable.is_success:
            return Result.fail(editable.error)

        validation = validate_placement_set(specs)
        if not validation.is_success:
            return Result.fail(validation.error)

        return Result.ok(self.place(DraftScope(draft.id), specs, editor_id))

    def snapshot(
        self,
        draft: Optional[Draft],
        draft_placements: List[Placement],
        version_number: int,
        publisher_id: str,
        name: Optional[str] = None,
        description: Optional[str] = None,
    ) -> Result[Tuple[Version, List[Placement]]]:
        """
        Freeze a draft into an inactive Version plus copies of its placements.
        Activation is the caller's job, inside the same transaction.
        """
        publishable = ensure_publishable(draft, draft_placements)
        if not publishable.is_success:
            return Result.fail(publishable.error)

        version = Version(
            id=new_id(),
            dashboard_id=draft.dashboard_id,
            version_number=version_number,
            created_by=publisher_id,
            created_at=now_iso(),
            name=default_version_name(version_number, name, draft),
            description=description if description is not None else draft.description,
            is_active=False,
        )
        copies = self.place(VersionScope(version.id), [p.spec for p in draft_placements], publisher_id)
        return Result.ok((version, copies))
