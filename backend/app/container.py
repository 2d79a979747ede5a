"""Dependency injection container: wires implementations to interfaces."""
from __future__ import annotations
from functools import lru_cache

from app.application.dashboard_app_service import DashboardAppService
from app.application.draft_app_service import DraftAppService
from app.application.permissions import RolePermissionProvider
from app.application.publish_app_service import PublishAppService
from app.persistence.repositories.sqlite.sqlite_dashboard_repository import SqliteDashboardRepository
from app.persistence.repositories.sqlite.sqlite_draft_repository import SqliteDraftRepository
from app.persistence.repositories.sqlite.sqlite_version_repository import SqliteVersionRepository
from app.persistence.repositories.sqlite.sqlite_widget_registry import SqliteWidgetRegistry


@lru_cache(maxsize=1)
def get_dashboard_repo() -> SqliteDashboardRepository:
    return SqliteDashboardRepository()


@lru_cache(maxsize=1)
def get_draft_repo() -> SqliteDraftRepository:
    return SqliteDraftRepository()


@lru_cache(maxsize=1)
def get_version_repo() -> SqliteVersionRepository:
    return SqliteVersionRepository()


@lru_cache(maxsize=1)
def get_widget_registry() -> SqliteWidgetRegistry:
    return SqliteWidgetRegistry()


@lru_cache(maxsize=1)
def get_permission_provider() -> RolePermissionProvider:
    return RolePermissionProvider()


@lru_cache(maxsize=1)
def get_draft_app_service() -> DraftAppService:
    return DraftAppService(
        drafts=get_draft_repo(),
        dashboards=get_dashboard_repo(),
        widgets=get_widget_registry(),
        permissions=get_permission_provider(),
    )


@lru_cache(maxsize=1)
def get_publish_app_service() -> PublishAppService:
    return PublishAppService(
        versions=get_version_repo(),
        drafts=get_draft_repo(),
        dashboards=get_dashboard_repo(),
        permissions=get_permission_provider(),
    )


@lru_cache(maxsize=1)
def get_dashboard_app_service() -> DashboardAppService:
    return DashboardAppService(
        dashboards=get_dashboard_repo(),
        drafts=get_draft_app_service(),
        publishing=get_publish_app_service(),
        permissions=get_permission_provider(),
    )


def reset() -> None:
    """Drop cached singletons so the next call rewires against the current config."""
    for factory in (
        get_dashboard_repo,
        get_draft_repo,
        get_version_repo,
        get_widget_registry,
        get_permission_provider,
        get_draft_app_service,
        get_publish_app_service,
        get_dashboard_app_service,
    ):
        factory.cache_clear()
