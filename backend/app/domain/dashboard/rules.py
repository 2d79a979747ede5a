"""Business rules for dashboards, drafts and versions."""
from __future__ import annotations
from typing import List, Optional

from app.domain.common.errors import EmptyPublishError, NotEditableError, ValidationError
from app.domain.common.result import Result
from app.domain.dashboard.models import Draft, Placement

NAME_MAX_LENGTH = 200
DEFAULT_DRAFT_NAME = "Draft"


def validate_dashboard_content(data: dict, partial: bool = False) -> Result[dict]:
    """Checks name (required unless partial) and role_access shape."""
    if not partial or "name" in data:
        name = (data.get("name") or "").strip()
        if not name:
            return Result.fail(ValidationError("Dashboard 'name' is required and cannot be empty.", "invalid_dashboard"))
        if len(name) > NAME_MAX_LENGTH:
            return Result.fail(
                ValidationError(f"Dashboard 'name' must be at most {NAME_MAX_LENGTH} characters.", "invalid_dashboard")
            )
    role_access = data.get("role_access")
    if role_access is not None and not all(isinstance(r, str) and r for r in role_access):
        return Result.fail(ValidationError("'role_access' must be a list of role names.", "invalid_dashboard"))
    return Result.ok(data)


def ensure_draft_editable(draft: Draft) -> Result[Draft]:
    if not draft.is_current:
        return Result.fail(
            NotEditableError(f"Draft '{draft.id}' has been superseded and is read-only.")
        )
    return Result.ok(draft)


def ensure_publishable(draft: Optional[Draft], placements: List[Placement]) -> Result[Draft]:
    """An empty draft is never published, so a live dashboard cannot be blanked by accident."""
    if draft is None:
        return Result.fail(EmptyPublishError("Dashboard has no current draft to publish."))
    if not placements:
        return Result.fail(EmptyPublishError(f"Draft '{draft.id}' has no placements; nothing to publish."))
    return Result.ok(draft)


def default_version_name(version_number: int, requested: Optional[str], draft: Draft) -> str:
    if requested and requested.strip():
        return requested.strip()
    if draft.name and draft.name != DEFAULT_DRAFT_NAME:
        return draft.name
    return f"Version {version_number}"
