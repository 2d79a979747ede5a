"""Application service: turns the current draft into the one active version."""
from __future__ import annotations
from typing import List, Optional, Tuple

from app.application.permissions import PUBLISH, PermissionProvider
from app.application.retry import retry_on_conflict
from app.core.logging import get_logger
from app.domain.common.actor import Actor
from app.domain.common.errors import DashboardError, NotEditableError, NotFoundError, PublishFailed
from app.domain.common.result import Result
from app.domain.dashboard.models import Draft, Placement, Version
from app.domain.dashboard.service import DashboardDomainService
from app.persistence.interfaces.dashboard_repository import DashboardRepository
from app.persistence.interfaces.draft_repository import DraftRepository
from app.persistence.interfaces.version_repository import Snapshotter, VersionRepository

logger = get_logger(__name__)


class PublishAppService:
    def __init__(
        self,
        versions: VersionRepository,
        drafts: DraftRepository,
        dashboards: DashboardRepository,
        permissions: PermissionProvider,
    ):
        self._versions = versions
        self._drafts = drafts
        self._dashboards = dashboards
        self._permissions = permissions
        self._domain = DashboardDomainService()

    # ------------------------------------------------------------------
    # PUBLISH
    # ------------------------------------------------------------------
    def publish(
        self,
        dashboard_id: str,
        actor: Actor,
        name: Optional[str] = None,
        description: Optional[str] = None,
        expected_draft_id: Optional[str] = None,
    ) -> Result[Version]:
        """
        Snapshot the current draft as version max+1 and make it the only active
        version. Either every step lands or none does. The draft stays current.
        """
        dashboard = self._dashboards.get_by_id(dashboard_id)
        if not dashboard:
            return Result.fail(NotFoundError(f"Dashboard '{dashboard_id}' not found."))
        denied = self._permissions.require(actor, PUBLISH, dashboard)
        if denied:
            return Result.fail(denied)

        def snapshot(draft: Optional[Draft], placements: List[Placement], version_number: int):
            if expected_draft_id is not None and (draft is None or draft.id != expected_draft_id):
                raise NotEditableError(f"Draft '{expected_draft_id}' is no longer the current draft.")
            return self._domain.snapshot(draft, placements, version_number, actor.id, name, description).unwrap()

        try:
            version = self._publish(dashboard_id, snapshot)
        except DashboardError as e:
            logger.info("publish_rejected", dashboard_id=dashboard_id, code=e.code, reason=e.message)
            return Result.fail(e)
        except Exception as e:
            logger.exception("publish_failed", dashboard_id=dashboard_id)
            failure = PublishFailed(f"Publishing dashboard '{dashboard_id}' failed; nothing was changed.")
            failure.__cause__ = e
            return Result.fail(failure)

        logger.info(
            "dashboard_published",
            dashboard_id=dashboard_id,
            version_id=version.id,
            version_number=version.version_number,
            actor=actor.id,
        )
        return Result.ok(version)

    @retry_on_conflict
    def _publish(self, dashboard_id: str, snapshot: Snapshotter) -> Version:
        return self._versions.publish(dashboard_id, snapshot)

    def publish_draft(
        self,
        draft_id: str,
        actor: Actor,
        name: Optional[str] = None,
        description: Optional[str] = None,
    ) -> Result[Version]:
        """Publish by draft id. Only the current draft of its dashboard can be published."""
        draft = self._drafts.get_by_id(draft_id)
        if not draft:
            return Result.fail(NotFoundError(f"Draft '{draft_id}' not found."))
        if not draft.is_current:
            return Result.fail(NotEditableError(f"Draft '{draft_id}' has been superseded and cannot be published."))
        return self.publish(draft.dashboard_id, actor, name, description, expected_draft_id=draft.id)

    # ------------------------------------------------------------------
    # READ
    # ------------------------------------------------------------------
    def get_active_version(self, dashboard_id: str) -> Result[Optional[Version]]:
        """Ok(None) means the dashboard exists but has never been published."""
        if not self._dashboards.get_by_id(dashboard_id):
            return Result.fail(NotFoundError(f"Dashboard '{dashboard_id}' not found."))
        return Result.ok(self._versions.get_active(dashboard_id))

    def get_version(self, version_id: str) -> Optional[Version]:
        return self._versions.get_by_id(version_id)

    def get_version_placements(self, version_id: str) -> Result[List[Placement]]:
        if not self._versions.get_by_id(version_id):
            return Result.fail(NotFoundError(f"Version '{version_id}' not found."))
        return Result.ok(self._versions.get_placements(version_id))

    def list_versions(self, dashboard_id: str) -> Result[List[Version]]:
        if not self._dashboards.get_by_id(dashboard_id):
            return Result.fail(NotFoundError(f"Dashboard '{dashboard_id}' not found."))
        return Result.ok(self._versions.list_for_dashboard(dashboard_id))

    def get_published_view(self, dashboard_id: str) -> Result[Tuple[Optional[Version], List[Placement]]]:
        """What viewers see: the active version and its placements, or (None, [])."""
        active = self.get_active_version(dashboard_id)
        if not active.is_success:
            return Result.fail(active.error)
        if active.value is None:
            return Result.ok((None, []))
        return Result.ok((active.value, self._versions.get_placements(active.value.id)))
