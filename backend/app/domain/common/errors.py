"""Error taxonomy shared by every layer. Each error has a stable machine-readable code."""
from __future__ import annotations
from typing import List, Optional, Tuple


class DashboardError(Exception):
    code = "error"

    def __init__(self, message: str, code: Optional[str] = None):
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code

    def to_dict(self) -> dict:
        return {"code": self.code, "message": self.message}

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.code!r}, {self.message!r})"


class ValidationError(DashboardError):
    code = "validation_error"


class GridError(ValidationError):
    """A placement set that cannot be stored. `placements` are indexes into the submitted list."""

    def __init__(
        self,
        message: str,
        code: str,
        placements: Optional[List[int]] = None,
        layout_type: Optional[str] = None,
    ):
        super().__init__(message, code)
        self.placements = placements or []
        self.layout_type = layout_type

    @classmethod
    def invalid_dimensions(cls, index: int, message: str) -> "GridError":
        return cls(message, "invalid_dimensions", [index])

    @classmethod
    def overlap(cls, pair: Tuple[int, int], layout_type: str) -> "GridError":
        first, second = sorted(pair)
        return cls(
            f"Placements {first} and {second} overlap in layout '{layout_type}'.",
            "overlap",
            [first, second],
            layout_type,
        )

    def to_dict(self) -> dict:
        data = super().to_dict()
        data["placements"] = self.placements
        if self.layout_type is not None:
            data["layout_type"] = self.layout_type
        return data


class NotFoundError(DashboardError):
    code = "not_found"


class NotEditableError(DashboardError):
    code = "draft_not_editable"


class EmptyPublishError(DashboardError):
    code = "no_draft_to_publish"


class ConcurrencyConflictError(DashboardError):
    """Lost a race at a serialization point. Safe to retry."""
    code = "concurrency_conflict"


class PermissionDenied(DashboardError):
    code = "permission_denied"


class PublishFailed(DashboardError):
    code = "publish_failed"
