"""Draft editing API endpoints."""
from __future__ import annotations
from typing import List, Optional

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel

from app.api.auth import get_current_actor
from app.api.errors import http_error
from app.api.serializers import serialize_draft, serialize_placement
from app.application.draft_app_service import DraftAppService
from app.container import get_draft_app_service
from app.core.config import DEFAULT_LAYOUT_TYPE
from app.domain.common.actor import Actor
from app.domain.dashboard.models import PlacementSpec

router = APIRouter(tags=["drafts"])


# ------------------------------------------------------------------
# Pydantic schemas
# ------------------------------------------------------------------
class PlacementBody(BaseModel):
    widget_id: str
    position_x: int = 0
    position_y: int = 0
    width: int = 3
    height: int = 2
    layout_type: str = DEFAULT_LAYOUT_TYPE

    def to_spec(self) -> PlacementSpec:
        return PlacementSpec(**self.model_dump())


class ReplacePlacementsBody(BaseModel):
    placements: List[PlacementBody]


class NewDraftBody(BaseModel):
    from_version_id: Optional[str] = None
    name: Optional[str] = None
    description: Optional[str] = None


class DraftDetailsBody(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None


# ------------------------------------------------------------------
# Current draft
# ------------------------------------------------------------------
@router.post("/dashboards/{dashboard_id}/drafts/current")
def get_or_create_current_draft(
    dashboard_id: str,
    svc: DraftAppService = Depends(get_draft_app_service),
    actor: Actor = Depends(get_current_actor),
):
    result = svc.get_or_create_current_draft(dashboard_id, actor)
    if not result.is_success:
        raise http_error(result.error)
    return serialize_draft(result.value)


@router.get("/dashboards/{dashboard_id}/drafts/current")
def get_current_draft(
    dashboard_id: str,
    svc: DraftAppService = Depends(get_draft_app_service),
    actor: Actor = Depends(get_current_actor),
):
    """Draft-mode preview: the current draft with its placements."""
    draft = svc.get_current_draft(dashboard_id, actor)
    if not draft.is_success:
        raise http_error(draft.error)
    placements = svc.get_draft_placements(draft.value.id, actor)
    if not placements.is_success:
        raise http_error(placements.error)
    return {"draft": serialize_draft(draft.value), "placements": [serialize_placement(p) for p in placements.value]}


@router.post("/dashboards/{dashboard_id}/drafts", status_code=status.HTTP_201_CREATED)
def start_new_draft(
    dashboard_id: str,
    body: NewDraftBody,
    svc: DraftAppService = Depends(get_draft_app_service),
    actor: Actor = Depends(get_current_actor),
):
    result = svc.start_new_draft(
        dashboard_id,
        actor,
        from_version_id=body.from_version_id,
        name=body.name,
        description=body.description,
    )
    if not result.is_success:
        raise http_error(result.error)
    return serialize_draft(result.value)


# ------------------------------------------------------------------
# Draft by id
# ------------------------------------------------------------------
@router.get("/drafts/{draft_id}")
def get_draft(
    draft_id: str,
    svc: DraftAppService = Depends(get_draft_app_service),
    actor: Actor = Depends(get_current_actor),
):
    result = svc.get_draft(draft_id, actor)
    if not result.is_success:
        raise http_error(result.error)
    return serialize_draft(result.value)


@router.patch("/drafts/{draft_id}")
def update_draft_details(
    draft_id: str,
    body: DraftDetailsBody,
    svc: DraftAppService = Depends(get_draft_app_service),
    actor: Actor = Depends(get_current_actor),
):
    result = svc.update_draft_details(draft_id, actor, name=body.name, description=body.description)
    if not result.is_success:
        raise http_error(result.error)
    return serialize_draft(result.value)


@router.get("/drafts/{draft_id}/placements")
def get_draft_placements(
    draft_id: str,
    svc: DraftAppService = Depends(get_draft_app_service),
    actor: Actor = Depends(get_current_actor),
):
    result = svc.get_draft_placements(draft_id, actor)
    if not result.is_success:
        raise http_error(result.error)
    return [serialize_placement(p) for p in result.value]


@router.put("/drafts/{draft_id}/placements")
def replace_draft_placements(
    draft_id: str,
    body: ReplacePlacementsBody,
    svc: DraftAppService = Depends(get_draft_app_service),
    actor: Actor = Depends(get_current_actor),
):
    """Full-set save: whatever is sent becomes the draft's entire layout."""
    result = svc.replace_draft_placements(draft_id, [p.to_spec() for p in body.placements], actor)
    if not result.is_success:
        raise http_error(result.error)
    return [serialize_placement(p) for p in result.value]
