"""Abstract repository interface for the Dashboard aggregate root."""
from __future__ import annotations
from abc import ABC, abstractmethod
from typing import List, Optional

from app.domain.dashboard.models import Dashboard, Draft


class DashboardRepository(ABC):

    @abstractmethod
    def create(self, dashboard: Dashboard, first_draft: Draft) -> None:
        """Insert a new dashboard together with its first current draft, atomically."""
        ...

    @abstractmethod
    def save(self, dashboard: Dashboard) -> None:
        """Insert or update the dashboard's soft attributes. Never touches is_published."""
        ...

    @abstractmethod
    def get_by_id(self, dashboard_id: str) -> Optional[Dashboard]:
        ...

    @abstractmethod
    def list_visible(
        self,
        user_id: Optional[str] = None,
        role: Optional[str] = None,
        is_published: Optional[bool] = None,
        limit: Optional[int] = None,
        offset: int = 0,
    ) -> List[Dashboard]:
        """
        Dashboards owned by `user_id` or shared with `role`, newest first.
        With neither given, every dashboard.
        """
        ...

    @abstractmethod
    def delete(self, dashboard_id: str) -> bool:
        """Delete dashboard and cascade to drafts, versions and placements. Returns True if deleted."""
        ...
