"""Abstract repository interface for published versions."""
from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Callable, List, Optional, Tuple

from app.domain.dashboard.models import Draft, Placement, Version

# (current draft or None, its placements, next version number) -> (inactive version, copied placements)
Snapshotter = Callable[[Optional[Draft], List[Placement], int], Tuple[Version, List[Placement]]]


class VersionRepository(ABC):

    @abstractmethod
    def publish(self, dashboard_id: str, snapshot: Snapshotter) -> Version:
        """
        Under the dashboard's serialization point: read the current draft,
        allocate the next version number, store the snapshot, make it the only
        active version and mark the dashboard published. All or nothing.
        Errors raised by `snapshot` abort the transaction and propagate.
        """
        ...

    @abstractmethod
    def get_active(self, dashboard_id: str) -> Optional[Version]:
        ...

    @abstractmethod
    def get_by_id(self, version_id: str) -> Optional[Version]:
        ...

    @abstractmethod
    def list_for_dashboard(self, dashboard_id: str) -> List[Version]:
        """Ordered by version_number DESC."""
        ...

    @abstractmethod
    def get_placements(self, version_id: str) -> List[Placement]:
        """Ordered by layout_type, position_y, position_x."""
        ...
