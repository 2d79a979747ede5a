"""Dashboard directory + viewing API endpoints."""
from __future__ import annotations
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import BaseModel

from app.api.auth import get_current_actor
from app.api.errors import http_error
from app.api.serializers import serialize_dashboard, serialize_draft, serialize_placement, serialize_version
from app.application.dashboard_app_service import DashboardAppService
from app.application.publish_app_service import PublishAppService
from app.container import get_dashboard_app_service, get_publish_app_service
from app.domain.common.actor import Actor

router = APIRouter(tags=["dashboards"])


# ------------------------------------------------------------------
# Pydantic schemas
# ------------------------------------------------------------------
class DashboardCreateBody(BaseModel):
    name: str
    description: Optional[str] = None
    role_access: List[str] = []
    is_default: bool = False


class DashboardUpdateBody(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    role_access: Optional[List[str]] = None
    is_default: Optional[bool] = None


# ------------------------------------------------------------------
# Health check
# ------------------------------------------------------------------
@router.get("/health")
def health():
    return {"status": "ok"}


# ------------------------------------------------------------------
# Dashboard endpoints
# ------------------------------------------------------------------
@router.get("/dashboards/")
def list_dashboards(
    is_published: Optional[bool] = None,
    limit: Optional[int] = Query(None, ge=1, le=500),
    offset: int = Query(0, ge=0),
    svc: DashboardAppService = Depends(get_dashboard_app_service),
    actor: Actor = Depends(get_current_actor),
):
    dashboards = svc.list_dashboards(actor, is_published=is_published, limit=limit, offset=offset)
    return [serialize_dashboard(d) for d in dashboards]


@router.post("/dashboards/", status_code=status.HTTP_201_CREATED)
def create_dashboard(
    body: DashboardCreateBody,
    svc: DashboardAppService = Depends(get_dashboard_app_service),
    actor: Actor = Depends(get_current_actor),
):
    result = svc.create_dashboard(actor, body.model_dump())
    if not result.is_success:
        raise http_error(result.error)
    return serialize_dashboard(result.value)


@router.get("/dashboards/{dashboard_id}")
def get_dashboard(
    dashboard_id: str,
    svc: DashboardAppService = Depends(get_dashboard_app_service),
    actor: Actor = Depends(get_current_actor),
):
    dashboard = svc.get_dashboard(dashboard_id)
    if not dashboard:
        raise HTTPException(status_code=404, detail=f"Dashboard '{dashboard_id}' not found")
    return serialize_dashboard(dashboard)


@router.patch("/dashboards/{dashboard_id}")
def update_dashboard(
    dashboard_id: str,
    body: DashboardUpdateBody,
    svc: DashboardAppService = Depends(get_dashboard_app_service),
    actor: Actor = Depends(get_current_actor),
):
    result = svc.update_dashboard(dashboard_id, actor, body.model_dump(exclude_unset=True))
    if not result.is_success:
        raise http_error(result.error)
    return serialize_dashboard(result.value)


@router.delete("/dashboards/{dashboard_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_dashboard(
    dashboard_id: str,
    svc: DashboardAppService = Depends(get_dashboard_app_service),
    actor: Actor = Depends(get_current_actor),
):
    result = svc.delete_dashboard(dashboard_id, actor)
    if not result.is_success:
        raise http_error(result.error)


# ------------------------------------------------------------------
# History
# ------------------------------------------------------------------
@router.get("/dashboards/{dashboard_id}/drafts")
def list_drafts(
    dashboard_id: str,
    svc: DashboardAppService = Depends(get_dashboard_app_service),
    actor: Actor = Depends(get_current_actor),
):
    result = svc.list_drafts(dashboard_id, actor)
    if not result.is_success:
        raise http_error(result.error)
    return [serialize_draft(d) for d in result.value]


@router.get("/dashboards/{dashboard_id}/versions")
def list_versions(
    dashboard_id: str,
    svc: DashboardAppService = Depends(get_dashboard_app_service),
    actor: Actor = Depends(get_current_actor),
):
    result = svc.list_versions(dashboard_id)
    if not result.is_success:
        raise http_error(result.error)
    return [serialize_version(v) for v in result.value]


# ------------------------------------------------------------------
# Published view
# ------------------------------------------------------------------
@router.get("/dashboards/{dashboard_id}/active")
def get_published_view(
    dashboard_id: str,
    svc: PublishAppService = Depends(get_publish_app_service),
    actor: Actor = Depends(get_current_actor),
):
    result = svc.get_published_view(dashboard_id)
    if not result.is_success:
        raise http_error(result.error)
    version, placements = result.value
    if version is None:
        return {"status": "not_published", "version": None, "placements": []}
    return {
        "status": "published",
        "version": serialize_version(version),
        "placements": [serialize_placement(p) for p in placements],
    }
