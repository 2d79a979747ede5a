"""Maps domain errors carried by a failed Result onto HTTP errors."""
from __future__ import annotations
from typing import Dict, Type

from fastapi import HTTPException

from app.domain.common.errors import (
    ConcurrencyConflictError,
    DashboardError,
    EmptyPublishError,
    NotEditableError,
    NotFoundError,
    PermissionDenied,
    PublishFailed,
    ValidationError,
)

STATUS_BY_ERROR: Dict[Type[DashboardError], int] = {
    ValidationError: 422,
    NotFoundError: 404,
    NotEditableError: 409,
    EmptyPublishError: 409,
    ConcurrencyConflictError: 409,
    PermissionDenied: 403,
    PublishFailed: 500,
}


def http_error(error: DashboardError) -> HTTPException:
    code = 400
    for cls in type(error).__mro__:
        if cls in STATUS_BY_ERROR:
            code = STATUS_BY_ERROR[cls]
            break
    return HTTPException(status_code=code, detail=error.to_dict())
