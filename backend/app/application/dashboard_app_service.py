"""Application service: dashboard directory. Lookup and CRUD; draft and version work is delegated."""
from __future__ import annotations
from typing import List, Optional

from app.application.draft_app_service import DraftAppService
from app.application.permissions import CREATE, MANAGE, PermissionProvider
from app.application.publish_app_service import PublishAppService
from app.core.logging import get_logger
from app.domain.common.actor import Actor
from app.domain.common.errors import NotFoundError
from app.domain.common.result import Result
from app.domain.dashboard.models import Dashboard, Draft, Version
from app.domain.dashboard.service import DashboardDomainService
from app.persistence.interfaces.dashboard_repository import DashboardRepository

logger = get_logger(__name__)


class DashboardAppService:
    def __init__(
        self,
        dashboards: DashboardRepository,
        drafts: DraftAppService,
        publishing: PublishAppService,
        permissions: PermissionProvider,
    ):
        self._dashboards = dashboards
        self._drafts = drafts
        self._publishing = publishing
        self._permissions = permissions
        self._domain = DashboardDomainService()

    # ------------------------------------------------------------------
    # CREATE
    # ------------------------------------------------------------------
    def create_dashboard(self, actor: Actor, data: dict) -> Result[Dashboard]:
        """Create the dashboard and its first draft in one transaction."""
        denied = self._permissions.require(actor, CREATE)
        if denied:
            return Result.fail(denied)

        result = self._domain.create_dashboard(actor.id, data)
        if not result.is_success:
            return Result.fail(result.error)
        dashboard = result.value
        draft = self._domain.new_draft(dashboard.id, actor.id)
        self._dashboards.create(dashboard, draft)
        logger.info("dashboard_created", dashboard_id=dashboard.id, draft_id=draft.id, actor=actor.id)
        return Result.ok(dashboard)

    # ------------------------------------------------------------------
    # READ
    # ------------------------------------------------------------------
    def get_dashboard(self, dashboard_id: str) -> Optional[Dashboard]:
        return self._dashboards.get_by_id(dashboard_id)

    def list_dashboards(
        self,
        actor: Actor,
        is_published: Optional[bool] = None,
        limit: Optional[int] = None,
        offset: int = 0,
    ) -> List[Dashboard]:
        """Admins see everything; others see their own dashboards and those shared with their role."""
        if actor.is_admin:
            return self._dashboards.list_visible(is_published=is_published, limit=limit, offset=offset)
        return self._dashboards.list_visible(
            user_id=actor.id,
            role=actor.role,
            is_published=is_published,
            limit=limit,
            offset=offset,
        )

    def list_drafts(self, dashboard_id: str, actor: Actor) -> Result[List[Draft]]:
        return self._drafts.list_drafts(dashboard_id, actor)

    def list_versions(self, dashboard_id: str) -> Result[List[Version]]:
        return self._publishing.list_versions(dashboard_id)

    # ------------------------------------------------------------------
    # UPDATE
    # ------------------------------------------------------------------
    def update_dashboard(self, dashboard_id: str, actor: Actor, data: dict) -> Result[Dashboard]:
        dashboard = self._dashboards.get_by_id(dashboard_id)
        if not dashboard:
            return Result.fail(NotFoundError(f"Dashboard '{dashboard_id}' not found."))
        denied = self._permissions.require(actor, MANAGE, dashboard)
        if denied:
            return Result.fail(denied)

        result = self._domain.update_dashboard(dashboard, data)
        if not result.is_success:
            return Result.fail(result.error)
        self._dashboards.save(result.value)
        return Result.ok(result.value)

    # ------------------------------------------------------------------
    # DELETE
    # ------------------------------------------------------------------
    def delete_dashboard(self, dashboard_id: str, actor: Actor) -> Result[bool]:
        dashboard = self._dashboards.get_by_id(dashboard_id)
        if not dashboard:
            return Result.fail(NotFoundError(f"Dashboard '{dashboard_id}' not found."))
        denied = self._permissions.require(actor, MANAGE, dashboard)
        if denied:
            return Result.fail(denied)

        if not self._dashboards.delete(dashboard_id):
            return Result.fail(NotFoundError(f"Dashboard '{dashboard_id}' not found."))
        logger.info("dashboard_deleted", dashboard_id=dashboard_id, actor=actor.id)
        return Result.ok(True)
