"""Domain object -> JSON-ready dict."""
from __future__ import annotations

from app.domain.dashboard.models import Dashboard, Draft, DraftScope, Placement, Version


def serialize_dashboard(d: Dashboard) -> dict:
    return {
        "id": d.id,
        "name": d.name,
        "description": d.description,
        "is_published": d.is_published,
        "is_default": d.is_default,
        "role_access": d.role_access,
        "created_by": d.created_by,
        "created_at": d.created_at,
        "updated_at": d.updated_at,
    }


def serialize_draft(d: Draft) -> dict:
    return {
        "id": d.id,
        "dashboard_id": d.dashboard_id,
        "name": d.name,
        "description": d.description,
        "is_current": d.is_current,
        "created_by": d.created_by,
        "created_at": d.created_at,
        "updated_at": d.updated_at,
    }


def serialize_version(v: Version) -> dict:
    return {
        "id": v.id,
        "dashboard_id": v.dashboard_id,
        "version_number": v.version_number,
        "name": v.name,
        "description": v.description,
        "is_active": v.is_active,
        "created_by": v.created_by,
        "created_at": v.created_at,
    }


def serialize_placement(p: Placement) -> dict:
    owner = "draft_id" if isinstance(p.scope, DraftScope) else "version_id"
    return {
        "id": p.id,
        owner: p.scope.owner_id,
        "widget_id": p.widget_id,
        "position_x": p.position_x,
        "position_y": p.position_y,
        "width": p.width,
        "height": p.height,
        "layout_type": p.layout_type,
        "created_by": p.created_by,
        "created_at": p.created_at,
    }
