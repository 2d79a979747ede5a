"""Widget registry endpoints: register references that placements may point at."""
from __future__ import annotations
import sqlite3
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel

from app.api.auth import get_current_actor
from app.container import get_widget_registry
from app.domain.common.actor import Actor
from app.persistence.interfaces.widget_registry import WidgetRegistry

router = APIRouter(prefix="/widgets", tags=["widgets"])


class WidgetBody(BaseModel):
    id: Optional[str] = None
    name: str
    widget_type: str
    is_published: bool = False


@router.get("")
def list_widgets(
    registry: WidgetRegistry = Depends(get_widget_registry),
    actor: Actor = Depends(get_current_actor),
):
    return registry.list_all()


@router.post("", status_code=status.HTTP_201_CREATED)
def register_widget(
    body: WidgetBody,
    registry: WidgetRegistry = Depends(get_widget_registry),
    actor: Actor = Depends(get_current_actor),
):
    try:
        return registry.register({**body.model_dump(), "created_by": actor.id})
    except sqlite3.IntegrityError:
        raise HTTPException(status_code=409, detail=f"Widget '{body.id}' already exists")
