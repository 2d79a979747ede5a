"""Dashboard domain models: pure Python, no DB or HTTP dependencies."""
from __future__ import annotations
from dataclasses import dataclass, field
from typing import List, Optional, Union


@dataclass
class Dashboard:
    id: str
    name: str
    created_by: str
    created_at: str
    updated_at: str
    description: Optional[str] = None
    is_published: bool = False
    is_default: bool = False
    role_access: List[str] = field(default_factory=list)


@dataclass
class Draft:
    id: str
    dashboard_id: str
    created_by: str
    created_at: str
    updated_at: str
    name: str = "Draft"
    description: Optional[str] = None
    is_current: bool = True


@dataclass
class Version:
    id: str
    dashboard_id: str
    version_number: int
    created_by: str
    created_at: str
    name: str = ""
    description: Optional[str] = None
    is_active: bool = False


# ------------------------------------------------------------------
# Placement scope: a placement belongs to exactly one draft or one version
# ------------------------------------------------------------------
@dataclass(frozen=True)
class DraftScope:
    draft_id: str

    @property
    def owner_id(self) -> str:
        return self.draft_id


@dataclass(frozen=True)
class VersionScope:
    version_id: str

    @property
    def owner_id(self) -> str:
        return self.version_id


PlacementScope = Union[DraftScope, VersionScope]


@dataclass(frozen=True)
class PlacementSpec:
    """A rectangle on the grid before it is stored in any scope."""
    widget_id: str
    position_x: int
    position_y: int
    width: int
    height: int
    layout_type: str

    @property
    def right(self) -> int:
        return self.position_x + self.width

    @property
    def bottom(self) -> int:
        return self.position_y + self.height


@dataclass
class Placement:
    id: str
    scope: PlacementScope
    widget_id: str
    position_x: int
    position_y: int
    width: int
    height: int
    layout_type: str
    created_at: str
    created_by: Optional[str] = None

    @property
    def spec(self) -> PlacementSpec:
        return PlacementSpec(
            widget_id=self.widget_id,
            position_x=self.position_x,
            position_y=self.position_y,
            width=self.width,
            height=self.height,
            layout_type=self.layout_type,
        )
