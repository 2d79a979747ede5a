"""Permission decisions for mutating operations. The core only asks yes/no."""
from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Dict, FrozenSet, Optional

from app.domain.common.actor import Actor
from app.domain.common.errors import PermissionDenied
from app.domain.dashboard.models import Dashboard

CREATE = "create"
EDIT = "edit"
PUBLISH = "publish"
MANAGE = "manage"
PREVIEW = "preview"

ROLE_ACTIONS: Dict[str, FrozenSet[str]] = {
    "admin": frozenset({CREATE, PREVIEW, EDIT, PUBLISH, MANAGE}),
    "editor": frozenset({CREATE, PREVIEW, EDIT, PUBLISH}),
    "author": frozenset({CREATE, PREVIEW, EDIT}),
    "viewer": frozenset(),
}

# Owners keep full control of their own dashboards whatever their role
OWNER_ACTIONS: FrozenSet[str] = frozenset({PREVIEW, EDIT, PUBLISH, MANAGE})


class PermissionProvider(ABC):

    @abstractmethod
    def can(self, actor: Actor, action: str, dashboard: Optional[Dashboard] = None) -> bool:
        ...

    def require(self, actor: Actor, action: str, dashboard: Optional[Dashboard] = None) -> Optional[PermissionDenied]:
        """None when allowed, otherwise the error to hand back."""
        if self.can(actor, action, dashboard):
            return None
        target = f" dashboard '{dashboard.id}'" if dashboard else ""
        return PermissionDenied(f"Role '{actor.role}' may not {action}{target}.")


class RolePermissionProvider(PermissionProvider):

    def __init__(self, role_actions: Optional[Dict[str, FrozenSet[str]]] = None):
        self._role_actions = role_actions or ROLE_ACTIONS

    def can(self, actor: Actor, action: str, dashboard: Optional[Dashboard] = None) -> bool:
        if action in self._role_actions.get(actor.role, frozenset()):
            return True
        return dashboard is not None and dashboard.created_by == actor.id and action in OWNER_ACTIONS
