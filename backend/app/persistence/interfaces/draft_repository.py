"""Abstract repository interface for drafts and their placements."""
from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Callable, List, Optional

from app.domain.dashboard.models import Draft, Placement, PlacementSpec

# Turns copied rectangles into placements owned by the new draft
PlacementBuilder = Callable[[List[PlacementSpec]], List[Placement]]


class DraftRepository(ABC):

    @abstractmethod
    def get_or_create_current(self, candidate: Draft) -> Draft:
        """
        Insert `candidate` as the current draft unless the dashboard already has
        one; either way return the draft that is current afterwards.
        """
        ...

    @abstractmethod
    def get_current(self, dashboard_id: str) -> Optional[Draft]:
        ...

    @abstractmethod
    def get_by_id(self, draft_id: str) -> Optional[Draft]:
        ...

    @abstractmethod
    def list_for_dashboard(self, dashboard_id: str) -> List[Draft]:
        """All drafts, current and historical, newest first."""
        ...

    @abstractmethod
    def get_placements(self, draft_id: str) -> List[Placement]:
        """Ordered by layout_type, position_y, position_x."""
        ...

    @abstractmethod
    def replace_placements(self, draft: Draft, placements: List[Placement]) -> None:
        """
        Delete every placement of the draft and insert `placements`, atomically.
        Raises NotEditableError if the draft stopped being current.
        """
        ...

    @abstractmethod
    def supersede(
        self,
        new_draft: Draft,
        build_placements: PlacementBuilder,
        seed_version_id: Optional[str] = None,
    ) -> Draft:
        """
        Retire the dashboard's current draft and make `new_draft` current, in one
        transaction. The new draft starts with copies of the seed version's
        placements, or of the retired draft's when no version is given.
        """
        ...

    @abstractmethod
    def update_details(self, draft: Draft) -> None:
        """Persist name, description and updated_at."""
        ...
