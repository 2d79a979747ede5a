"""Application service: the current draft of a dashboard and wholesale replacement of its placements."""
from __future__ import annotations
from typing import List, Optional, Sequence

from app.application.permissions import EDIT, PREVIEW, PermissionProvider
from app.application.retry import retry_on_conflict
from app.core import config
from app.core.logging import get_logger
from app.domain.common.actor import Actor
from app.domain.common.errors import DashboardError, GridError, NotEditableError, NotFoundError
from app.domain.common.result import Result
from app.domain.dashboard.models import Draft, DraftScope, Placement, PlacementSpec
from app.domain.dashboard.rules import ensure_draft_editable
from app.domain.dashboard.service import DashboardDomainService, now_iso
from app.persistence.interfaces.dashboard_repository import DashboardRepository
from app.persistence.interfaces.draft_repository import DraftRepository
from app.persistence.interfaces.widget_registry import WidgetRegistry

logger = get_logger(__name__)


class DraftAppService:
    def __init__(
        self,
        drafts: DraftRepository,
        dashboards: DashboardRepository,
        widgets: WidgetRegistry,
        permissions: PermissionProvider,
    ):
        self._drafts = drafts
        self._dashboards = dashboards
        self._widgets = widgets
        self._permissions = permissions
        self._domain = DashboardDomainService()

    # ------------------------------------------------------------------
    # GET OR CREATE
    # ------------------------------------------------------------------
    def get_or_create_current_draft(self, dashboard_id: str, actor: Actor) -> Result[Draft]:
        """Idempotent: concurrent callers all get the same current draft."""
        dashboard = self._dashboards.get_by_id(dashboard_id)
        if not dashboard:
            return Result.fail(NotFoundError(f"Dashboard '{dashboard_id}' not found."))
        denied = self._permissions.require(actor, EDIT, dashboard)
        if denied:
            return Result.fail(denied)

        candidate = self._domain.new_draft(dashboard_id, actor.id)
        try:
            draft = self._create_current(candidate)
        except DashboardError as e:
            return Result.fail(e)
        if draft.id == candidate.id:
            logger.info("draft_created", dashboard_id=dashboard_id, draft_id=draft.id, actor=actor.id)
        return Result.ok(draft)

    @retry_on_conflict
    def _create_current(self, candidate: Draft) -> Draft:
        return self._drafts.get_or_create_current(candidate)

    # ------------------------------------------------------------------
    # REPLACE PLACEMENTS
    # ------------------------------------------------------------------
    def replace_draft_placements(
        self,
        draft_id: str,
        new_placements: Sequence[PlacementSpec],
        actor: Actor,
    ) -> Result[List[Placement]]:
        """
        Swap the draft's whole placement set for `new_placements`. On any
        failure the stored placements are left exactly as they were.
        """
        draft = self._drafts.get_by_id(draft_id)
        if not draft:
            return Result.fail(NotEditableError(f"Draft '{draft_id}' does not exist and cannot be edited."))
        dashboard = self._dashboards.get_by_id(draft.dashboard_id)
        denied = self._permissions.require(actor, EDIT, dashboard)
        if denied:
            return Result.fail(denied)

        result = self._domain.replace_placements(draft, new_placements, actor.id)
        if not result.is_success:
            self._log_rejected(draft, result.error)
            return Result.fail(result.error)

        odd_layouts = {p.layout_type for p in new_placements} - set(config.KNOWN_LAYOUT_TYPES)
        if odd_layouts:
            logger.info("unrecognised_layout_types", draft_id=draft.id, layout_types=sorted(odd_layouts))

        unknown = self._unknown_widgets(new_placements)
        if unknown:
            error = GridError(
                f"Unknown widget(s): {', '.join(sorted({new_placements[i].widget_id for i in unknown}))}.",
                "unknown_widget",
                unknown,
            )
            self._log_rejected(draft, error)
            return Result.fail(error)

        try:
            self._store_placements(draft, result.value)
        except DashboardError as e:
            self._log_rejected(draft, e)
            return Result.fail(e)
        logger.info(
            "draft_placements_replaced",
            dashboard_id=draft.dashboard_id,
            draft_id=draft.id,
            count=len(result.value),
            actor=actor.id,
        )
        return Result.ok(result.value)

    @retry_on_conflict
    def _store_placements(self, draft: Draft, placements: List[Placement]) -> None:
        self._drafts.replace_placements(draft, placements)

    def _unknown_widgets(self, specs: Sequence[PlacementSpec]) -> List[int]:
        known = {}
        missing = []
        for index, spec in enumerate(specs):
            if spec.widget_id not in known:
                known[spec.widget_id] = self._widgets.exists(spec.widget_id)
            if not known[spec.widget_id]:
                missing.append(index)
        return missing

    def _log_rejected(self, draft: Draft, error: DashboardError) -> None:
        logger.info("draft_write_rejected", draft_id=draft.id, code=error.code, reason=error.message)

    # ------------------------------------------------------------------
    # NEW DRAFT (supersede the current one)
    # ------------------------------------------------------------------
    def start_new_draft(
        self,
        dashboard_id: str,
        actor: Actor,
        from_version_id: Optional[str] = None,
        name: Optional[str] = None,
        description: Optional[str] = None,
    ) -> Result[Draft]:
        """
        Retire the current draft and open a fresh one, seeded from a published
        version when given, else from the retired draft.
        """
        dashboard = self._dashboards.get_by_id(dashboard_id)
        if not dashboard:
            return Result.fail(NotFoundError(f"Dashboard '{dashboard_id}' not found."))
        denied = self._permissions.require(actor, EDIT, dashboard)
        if denied:
            return Result.fail(denied)

        draft = self._domain.new_draft(dashboard_id, actor.id, name=name, description=description)
        scope = DraftScope(draft.id)
        try:
            self._supersede(draft, lambda specs: self._domain.place(scope, specs, actor.id), from_version_id)
        except DashboardError as e:
            return Result.fail(e)
        logger.info(
            "draft_superseded",
            dashboard_id=dashboard_id,
            draft_id=draft.id,
            seed_version_id=from_version_id,
            actor=actor.id,
        )
        return Result.ok(draft)

    @retry_on_conflict
    def _supersede(self, draft: Draft, build, seed_version_id: Optional[str]) -> Draft:
        return self._drafts.supersede(draft, build, seed_version_id)

    # ------------------------------------------------------------------
    # DRAFT DETAILS
    # ------------------------------------------------------------------
    def update_draft_details(
        self,
        draft_id: str,
        actor: Actor,
        name: Optional[str] = None,
        description: Optional[str] = None,
    ) -> Result[Draft]:
        draft = self._drafts.get_by_id(draft_id)
        if not draft:
            return Result.fail(NotFoundError(f"Draft '{draft_id}' not found."))
        editable = ensure_draft_editable(draft)
        if not editable.is_success:
            return Result.fail(editable.error)
        denied = self._permissions.require(actor, EDIT, self._dashboards.get_by_id(draft.dashboard_id))
        if denied:
            return Result.fail(denied)

        if name is not None and name.strip():
            draft.name = name.strip()
        if description is not None:
            draft.description = description
        draft.updated_at = now_iso()
        try:
            self._drafts.update_details(draft)
        except DashboardError as e:
            return Result.fail(e)
        return Result.ok(draft)

    # ------------------------------------------------------------------
    # READ (drafts are unpublished work: preview permission required)
    # ------------------------------------------------------------------
    def get_current_draft(self, dashboard_id: str, actor: Actor) -> Result[Draft]:
        denied = self._preview_denied(dashboard_id, actor)
        if denied:
            return Result.fail(denied)
        draft = self._drafts.get_current(dashboard_id)
        if not draft:
            return Result.fail(NotFoundError(f"Dashboard '{dashboard_id}' has no current draft."))
        return Result.ok(draft)

    def get_draft(self, draft_id: str, actor: Actor) -> Result[Draft]:
        draft = self._drafts.get_by_id(draft_id)
        if not draft:
            return Result.fail(NotFoundError(f"Draft '{draft_id}' not found."))
        denied = self._preview_denied(draft.dashboard_id, actor)
        if denied:
            return Result.fail(denied)
        return Result.ok(draft)

    def get_draft_placements(self, draft_id: str, actor: Actor) -> Result[List[Placement]]:
        draft = self.get_draft(draft_id, actor)
        if not draft.is_success:
            return Result.fail(draft.error)
        return Result.ok(self._drafts.get_placements(draft_id))

    def list_drafts(self, dashboard_id: str, actor: Actor) -> Result[List[Draft]]:
        denied = self._preview_denied(dashboard_id, actor)
        if denied:
            return Result.fail(denied)
        return Result.ok(self._drafts.list_for_dashboard(dashboard_id))

    def _preview_denied(self, dashboard_id: str, actor: Actor) -> Optional[DashboardError]:
        dashboard = self._dashboards.get_by_id(dashboard_id)
        if not dashboard:
            return NotFoundError(f"Dashboard '{dashboard_id}' not found.")
        return self._permissions.require(actor, PREVIEW, dashboard)
