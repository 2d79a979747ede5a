"""Draft workspace: current-draft creation, full-set replacement, supersede."""
import threading

from app import container
from app.domain.common.errors import GridError, NotEditableError, NotFoundError, PermissionDenied, ValidationError
from app.domain.dashboard.service import DashboardDomainService


def _rects(placements):
    return [(p.widget_id, p.position_x, p.position_y, p.width, p.height, p.layout_type) for p in placements]


# ------------------------------------------------------------------
# Get or create
# ------------------------------------------------------------------
def test_create_dashboard_opens_a_draft(dashboard, draft_service, admin):
    draft = draft_service.get_current_draft(dashboard.id, admin).unwrap()
    assert draft.dashboard_id == dashboard.id
    assert draft.is_current
    assert draft.name == "Draft"


def test_get_or_create_is_idempotent(draft_service, dashboard, admin):
    first = draft_service.get_or_create_current_draft(dashboard.id, admin).unwrap()
    second = draft_service.get_or_create_current_draft(dashboard.id, admin).unwrap()
    assert first.id == second.id


def test_get_or_create_unknown_dashboard(draft_service, admin, db_path):
    result = draft_service.get_or_create_current_draft("nope", admin)
    assert isinstance(result.error, NotFoundError)


def test_concurrent_get_or_create_yields_one_draft(draft_service, admin, db_path):
    bare = DashboardDomainService().create_dashboard(admin.id, {"name": "Race"}).unwrap()
    container.get_dashboard_repo().save(bare)

    barrier = threading.Barrier(8)
    ids = []
    errors = []

    def call():
        barrier.wait()
        result = draft_service.get_or_create_current_draft(bare.id, admin)
        if result.is_success:
            ids.append(result.value.id)
        else:
            errors.append(result.error)

    threads = [threading.Thread(target=call) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert errors == []
    assert len(set(ids)) == 1
    drafts = draft_service.list_drafts(bare.id, admin).unwrap()
    assert [d.is_current for d in drafts] == [True]


def test_viewer_cannot_open_draft(draft_service, dashboard, viewer):
    result = draft_service.get_or_create_current_draft(dashboard.id, viewer)
    assert isinstance(result.error, PermissionDenied)


# ------------------------------------------------------------------
# Replace placements
# ------------------------------------------------------------------
def test_replace_stores_full_set(draft_service, draft, admin, spec):
    result = draft_service.replace_draft_placements(draft.id, [spec("w-a", 0, 0), spec("w-b", 3, 0)], admin)
    assert result.is_success
    stored = draft_service.get_draft_placements(draft.id, admin).unwrap()
    assert sorted(_rects(stored)) == [("w-a", 0, 0, 3, 2, "lg"), ("w-b", 3, 0, 3, 2, "lg")]


def test_replace_swaps_rather_than_appends(draft_service, draft, admin, spec):
    draft_service.replace_draft_placements(draft.id, [spec("w-a", 0, 0), spec("w-b", 3, 0)], admin).unwrap()
    draft_service.replace_draft_placements(draft.id, [spec("w-c", 0, 5)], admin).unwrap()
    assert _rects(draft_service.get_draft_placements(draft.id, admin).unwrap()) == [("w-c", 0, 5, 3, 2, "lg")]


def test_replace_with_empty_set_clears_draft(draft_service, draft, admin, spec):
    draft_service.replace_draft_placements(draft.id, [spec("w-a", 0, 0)], admin).unwrap()
    draft_service.replace_draft_placements(draft.id, [], admin).unwrap()
    assert draft_service.get_draft_placements(draft.id, admin).unwrap() == []


def test_same_widget_twice_in_one_layout(draft_service, draft, admin, spec):
    result = draft_service.replace_draft_placements(draft.id, [spec("w-a", 0, 0), spec("w-a", 3, 0)], admin)
    assert result.is_success
    stored = draft_service.get_draft_placements(draft.id, admin).unwrap()
    assert sorted(_rects(stored)) == [("w-a", 0, 0, 3, 2, "lg"), ("w-a", 3, 0, 3, 2, "lg")]
    assert len({p.id for p in stored}) == 2


def test_rejected_overlap_leaves_placements_unchanged(draft_service, draft, admin, spec):
    draft_service.replace_draft_placements(draft.id, [spec("w-a", 0, 0), spec("w-b", 3, 0)], admin).unwrap()
    before = _rects(draft_service.get_draft_placements(draft.id, admin).unwrap())

    result = draft_service.replace_draft_placements(draft.id, [spec("w-a", 2, 0), spec("w-b", 3, 0)], admin)

    assert isinstance(result.error, ValidationError)
    assert result.error.code == "overlap"
    assert _rects(draft_service.get_draft_placements(draft.id, admin).unwrap()) == before


def test_unknown_widget_rejected(draft_service, draft, admin, spec):
    result = draft_service.replace_draft_placements(draft.id, [spec("w-a", 0, 0), spec("ghost", 5, 5)], admin)
    assert isinstance(result.error, GridError)
    assert result.error.code == "unknown_widget"
    assert result.error.placements == [1]
    assert draft_service.get_draft_placements(draft.id, admin).unwrap() == []


def test_replace_unknown_draft_is_not_editable(draft_service, admin, spec, db_path):
    result = draft_service.replace_draft_placements("missing", [spec("w-a", 0, 0)], admin)
    assert isinstance(result.error, NotEditableError)


def test_author_can_edit_but_viewer_cannot(draft_service, draft, author, viewer, spec):
    assert draft_service.replace_draft_placements(draft.id, [spec("w-a", 0, 0)], author).is_success
    result = draft_service.replace_draft_placements(draft.id, [spec("w-b", 0, 0)], viewer)
    assert isinstance(result.error, PermissionDenied)


# ------------------------------------------------------------------
# Supersede
# ------------------------------------------------------------------
def test_start_new_draft_retires_the_old_one(draft_service, draft, dashboard, admin, spec):
    draft_service.replace_draft_placements(draft.id, [spec("w-a", 0, 0)], admin).unwrap()

    fresh = draft_service.start_new_draft(dashboard.id, admin, name="Redesign").unwrap()

    assert fresh.id != draft.id
    assert draft_service.get_current_draft(dashboard.id, admin).unwrap().id == fresh.id
    assert draft_service.get_draft(draft.id, admin).unwrap().is_current is False
    # Seeded from the retired draft
    assert _rects(draft_service.get_draft_placements(fresh.id, admin).unwrap()) == [("w-a", 0, 0, 3, 2, "lg")]
    assert len(draft_service.list_drafts(dashboard.id, admin).unwrap()) == 2


def test_historical_draft_is_read_only(draft_service, draft, dashboard, admin, spec):
    draft_service.start_new_draft(dashboard.id, admin).unwrap()
    result = draft_service.replace_draft_placements(draft.id, [spec("w-a", 0, 0)], admin)
    assert isinstance(result.error, NotEditableError)
    assert isinstance(draft_service.update_draft_details(draft.id, admin, name="x").error, NotEditableError)


def test_start_new_draft_from_version(draft_service, publish_service, draft, dashboard, admin, spec):
    draft_service.replace_draft_placements(draft.id, [spec("w-a", 0, 0)], admin).unwrap()
    version = publish_service.publish(dashboard.id, admin).unwrap()
    draft_service.replace_draft_placements(draft.id, [spec("w-b", 6, 6)], admin).unwrap()

    fresh = draft_service.start_new_draft(dashboard.id, admin, from_version_id=version.id).unwrap()

    assert _rects(draft_service.get_draft_placements(fresh.id, admin).unwrap()) == [("w-a", 0, 0, 3, 2, "lg")]


def test_start_new_draft_from_foreign_version(draft_service, dashboard, admin, db_path):
    result = draft_service.start_new_draft(dashboard.id, admin, from_version_id="not-a-version")
    assert isinstance(result.error, NotFoundError)
    assert draft_service.get_current_draft(dashboard.id, admin).is_success


def test_update_draft_details(draft_service, draft, admin):
    updated = draft_service.update_draft_details(draft.id, admin, name=" Spring ", description="seasonal").unwrap()
    assert updated.name == "Spring"
    stored = draft_service.get_draft(draft.id, admin).unwrap()
    assert stored.name == "Spring"
    assert stored.description == "seasonal"


# ------------------------------------------------------------------
# Reads
# ------------------------------------------------------------------
def test_viewer_cannot_read_drafts(draft_service, draft, dashboard, admin, viewer, spec):
    draft_service.replace_draft_placements(draft.id, [spec("w-a", 0, 0)], admin).unwrap()

    assert isinstance(draft_service.get_current_draft(dashboard.id, viewer).error, PermissionDenied)
    assert isinstance(draft_service.get_draft(draft.id, viewer).error, PermissionDenied)
    assert isinstance(draft_service.get_draft_placements(draft.id, viewer).error, PermissionDenied)
    assert isinstance(draft_service.list_drafts(dashboard.id, viewer).error, PermissionDenied)


def test_author_can_preview_drafts(draft_service, draft, dashboard, author):
    assert draft_service.get_current_draft(dashboard.id, author).unwrap().id == draft.id
    assert draft_service.get_draft_placements(draft.id, author).unwrap() == []


def test_get_unknown_draft(draft_service, admin, db_path):
    assert isinstance(draft_service.get_draft("missing", admin).error, NotFoundError)
    assert isinstance(draft_service.get_draft_placements("missing", admin).error, NotFoundError)
