"""Bounded retry for writes that lost a race at a serialization point."""
from __future__ import annotations

from tenacity import RetryCallState, retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from app.core import config
from app.core.logging import get_logger
from app.domain.common.errors import ConcurrencyConflictError

logger = get_logger(__name__)


def _log_retry(state: RetryCallState) -> None:
    logger.warning(
        "write_conflict_retry",
        operation=state.fn.__name__ if state.fn else None,
        attempt=state.attempt_number,
        error=str(state.outcome.exception()) if state.outcome else None,
    )


retry_on_conflict = retry(
    stop=stop_after_attempt(config.PUBLISH_MAX_ATTEMPTS),
    wait=wait_exponential(multiplier=0.05, min=0.05, max=1.0),
    retry=retry_if_exception_type(ConcurrencyConflictError),
    before_sleep=_log_retry,
    reraise=True,
)
