"""Publish engine: numbering, single active version, atomicity, end-to-end flows."""
import sqlite3
import threading

import pytest

from app import container
from app.domain.common.errors import (
    ConcurrencyConflictError,
    EmptyPublishError,
    NotEditableError,
    PermissionDenied,
    PublishFailed,
    ValidationError,
)


def _rects(placements):
    return sorted((p.widget_id, p.position_x, p.position_y, p.width, p.height, p.layout_type) for p in placements)


@pytest.fixture
def filled_draft(draft_service, draft, admin, spec):
    draft_service.replace_draft_placements(draft.id, [spec("w-a", 0, 0), spec("w-b", 3, 0)], admin).unwrap()
    return draft


def _active_versions(publish_service, dashboard_id):
    return [v for v in publish_service.list_versions(dashboard_id).unwrap() if v.is_active]


# ------------------------------------------------------------------
# Numbering and activation
# ------------------------------------------------------------------
def test_first_publish_is_version_one(publish_service, dashboard, filled_draft, admin, dashboard_service):
    version = publish_service.publish(dashboard.id, admin).unwrap()

    assert version.version_number == 1
    assert version.is_active
    assert version.name == "Version 1"
    assert [v.id for v in _active_versions(publish_service, dashboard.id)] == [version.id]
    assert dashboard_service.get_dashboard(dashboard.id).is_published


def test_second_publish_supersedes_first(publish_service, dashboard, filled_draft, admin):
    first = publish_service.publish(dashboard.id, admin).unwrap()
    second = publish_service.publish(dashboard.id, admin, name="Launch").unwrap()

    assert second.version_number > first.version_number
    assert publish_service.get_version(first.id).is_active is False
    assert publish_service.get_version(second.id).is_active is True
    assert [v.id for v in _active_versions(publish_service, dashboard.id)] == [second.id]
    assert second.name == "Launch"


def test_publish_keeps_draft_current(publish_service, draft_service, dashboard, filled_draft, admin):
    publish_service.publish(dashboard.id, admin).unwrap()
    assert draft_service.get_current_draft(dashboard.id, admin).unwrap().id == filled_draft.id


def test_version_placements_are_copies(publish_service, draft_service, dashboard, filled_draft, admin, spec):
    version = publish_service.publish(dashboard.id, admin).unwrap()
    draft_service.replace_draft_placements(filled_draft.id, [spec("w-c", 9, 9)], admin).unwrap()

    placements = publish_service.get_version_placements(version.id).unwrap()
    assert _rects(placements) == [("w-a", 0, 0, 3, 2, "lg"), ("w-b", 3, 0, 3, 2, "lg")]
    assert all(p.scope.owner_id == version.id for p in placements)


# ------------------------------------------------------------------
# Rejections
# ------------------------------------------------------------------
def test_empty_draft_is_not_published(publish_service, dashboard, draft, admin):
    result = publish_service.publish(dashboard.id, admin)

    assert isinstance(result.error, EmptyPublishError)
    assert result.error.code == "no_draft_to_publish"
    assert publish_service.list_versions(dashboard.id).unwrap() == []
    assert publish_service.get_active_version(dashboard.id).unwrap() is None


def test_author_cannot_publish(publish_service, dashboard, filled_draft, author):
    result = publish_service.publish(dashboard.id, author)
    assert isinstance(result.error, PermissionDenied)


def test_publish_superseded_draft_rejected(publish_service, draft_service, dashboard, filled_draft, admin):
    draft_service.start_new_draft(dashboard.id, admin).unwrap()
    result = publish_service.publish_draft(filled_draft.id, admin)
    assert isinstance(result.error, NotEditableError)
    assert publish_service.list_versions(dashboard.id).unwrap() == []


def test_publish_draft_by_id(publish_service, dashboard, filled_draft, admin):
    version = publish_service.publish_draft(filled_draft.id, admin, name="From draft").unwrap()
    assert version.dashboard_id == dashboard.id
    assert version.name == "From draft"


def test_storage_failure_rolls_back(publish_service, dashboard, filled_draft, admin, monkeypatch):
    from app.persistence.repositories.sqlite import sqlite_version_repository

    def broken(conn, placements):
        raise RuntimeError("disk full")

    monkeypatch.setattr(sqlite_version_repository, "insert_placements", broken)
    result = publish_service.publish(dashboard.id, admin)

    assert isinstance(result.error, PublishFailed)
    assert isinstance(result.error.__cause__, RuntimeError)
    assert publish_service.list_versions(dashboard.id).unwrap() == []
    assert container.get_dashboard_repo().get_by_id(dashboard.id).is_published is False


def test_constraint_violation_is_not_a_conflict(publish_service, dashboard, filled_draft, admin, monkeypatch):
    from app.persistence.repositories.sqlite import sqlite_version_repository

    calls = []

    def rejected(conn, placements):
        calls.append(1)
        raise sqlite3.IntegrityError("CHECK constraint failed: width > 0")

    monkeypatch.setattr(sqlite_version_repository, "insert_placements", rejected)
    result = publish_service.publish(dashboard.id, admin)

    assert isinstance(result.error, PublishFailed)
    assert isinstance(result.error.__cause__, sqlite3.IntegrityError)
    assert len(calls) == 1
    assert publish_service.list_versions(dashboard.id).unwrap() == []


def test_unique_collision_is_retried_as_conflict(publish_service, dashboard, filled_draft, admin, monkeypatch):
    from app.core import config
    from app.persistence.repositories.sqlite import sqlite_version_repository

    calls = []

    def collided(conn, placements):
        calls.append(1)
        raise sqlite3.IntegrityError("UNIQUE constraint failed: dashboard_versions.dashboard_id")

    monkeypatch.setattr(sqlite_version_repository, "insert_placements", collided)
    result = publish_service.publish(dashboard.id, admin)

    assert isinstance(result.error, ConcurrencyConflictError)
    assert len(calls) == config.PUBLISH_MAX_ATTEMPTS
    assert publish_service.list_versions(dashboard.id).unwrap() == []


# ------------------------------------------------------------------
# Concurrency
# ------------------------------------------------------------------
def test_concurrent_publishes_get_unique_numbers(publish_service, dashboard, filled_draft, admin):
    barrier = threading.Barrier(5)
    numbers = []
    errors = []

    def call():
        barrier.wait()
        result = publish_service.publish(dashboard.id, admin)
        if result.is_success:
            numbers.append(result.value.version_number)
        else:
            errors.append(result.error)

    threads = [threading.Thread(target=call) for _ in range(5)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert errors == []
    assert sorted(numbers) == [1, 2, 3, 4, 5]
    active = _active_versions(publish_service, dashboard.id)
    assert [v.version_number for v in active] == [5]


# ------------------------------------------------------------------
# End-to-end
# ------------------------------------------------------------------
def test_publish_then_view(dashboard_service, draft_service, publish_service, admin, widgets, spec):
    dashboard = dashboard_service.create_dashboard(admin, {"name": "Revenue"}).unwrap()
    draft = draft_service.get_or_create_current_draft(dashboard.id, admin).unwrap()
    draft_service.replace_draft_placements(draft.id, [spec("w-a", 0, 0, 3, 2), spec("w-b", 3, 0, 3, 2)], admin).unwrap()

    publish_service.publish(dashboard.id, admin, name="Version 1").unwrap()

    active = publish_service.get_active_version(dashboard.id).unwrap()
    assert active.version_number == 1
    version, placements = publish_service.get_published_view(dashboard.id).unwrap()
    assert version.id == active.id
    assert _rects(placements) == [("w-a", 0, 0, 3, 2, "lg"), ("w-b", 3, 0, 3, 2, "lg")]


def test_rejected_edit_does_not_touch_published_version(draft_service, publish_service, dashboard, filled_draft, admin, spec):
    published = publish_service.publish(dashboard.id, admin, name="Version 1").unwrap()

    result = draft_service.replace_draft_placements(filled_draft.id, [spec("w-a", 3, 0), spec("w-b", 3, 0)], admin)

    assert isinstance(result.error, ValidationError)
    version, placements = publish_service.get_published_view(dashboard.id).unwrap()
    assert version.id == published.id
    assert version.version_number == 1
    assert _rects(placements) == [("w-a", 0, 0, 3, 2, "lg"), ("w-b", 3, 0, 3, 2, "lg")]


def test_unpublished_view_is_empty(publish_service, dashboard):
    assert publish_service.get_published_view(dashboard.id).unwrap() == (None, [])
