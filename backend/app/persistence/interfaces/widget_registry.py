"""Abstract interface to the widget catalog. The core only asks whether a widget exists."""
from __future__ import annotations
from abc import ABC, abstractmethod
from typing import List


class WidgetRegistry(ABC):

    @abstractmethod
    def exists(self, widget_id: str) -> bool:
        ...

    @abstractmethod
    def register(self, widget: dict) -> dict:
        """Add a widget reference (id, name, widget_type, is_published)."""
        ...

    @abstractmethod
    def list_all(self) -> List[dict]:
        ...
