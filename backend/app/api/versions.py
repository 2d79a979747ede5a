"""Publish + version history API endpoints."""
from __future__ import annotations
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel

from app.api.auth import get_current_actor
from app.api.errors import http_error
from app.api.serializers import serialize_placement, serialize_version
from app.application.publish_app_service import PublishAppService
from app.container import get_publish_app_service
from app.domain.common.actor import Actor

router = APIRouter(tags=["versions"])


class PublishBody(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None


# ------------------------------------------------------------------
# Publish
# ------------------------------------------------------------------
@router.post("/dashboards/{dashboard_id}/publish", status_code=status.HTTP_201_CREATED)
def publish_dashboard(
    dashboard_id: str,
    body: PublishBody,
    svc: PublishAppService = Depends(get_publish_app_service),
    actor: Actor = Depends(get_current_actor),
):
    result = svc.publish(dashboard_id, actor, name=body.name, description=body.description)
    if not result.is_success:
        raise http_error(result.error)
    return serialize_version(result.value)


@router.post("/drafts/{draft_id}/publish", status_code=status.HTTP_201_CREATED)
def publish_draft(
    draft_id: str,
    body: PublishBody,
    svc: PublishAppService = Depends(get_publish_app_service),
    actor: Actor = Depends(get_current_actor),
):
    result = svc.publish_draft(draft_id, actor, name=body.name, description=body.description)
    if not result.is_success:
        raise http_error(result.error)
    return serialize_version(result.value)


# ------------------------------------------------------------------
# Versions
# ------------------------------------------------------------------
@router.get("/versions/{version_id}")
def get_version(
    version_id: str,
    svc: PublishAppService = Depends(get_publish_app_service),
    actor: Actor = Depends(get_current_actor),
):
    version = svc.get_version(version_id)
    if not version:
        raise HTTPException(status_code=404, detail=f"Version '{version_id}' not found")
    return serialize_version(version)


@router.get("/versions/{version_id}/placements")
def get_version_placements(
    version_id: str,
    svc: PublishAppService = Depends(get_publish_app_service),
    actor: Actor = Depends(get_current_actor),
):
    result = svc.get_version_placements(version_id)
    if not result.is_success:
        raise http_error(result.error)
    return [serialize_placement(p) for p in result.value]
