"""Shared fixtures: a fresh SQLite file per test and services wired against it."""
import pytest

from app import container
from app.core import config
from app.domain.common.actor import Actor
from app.domain.dashboard.models import PlacementSpec
from app.persistence.db import init_db


@pytest.fixture
def db_path(tmp_path, monkeypatch):
    path = str(tmp_path / "dashboards.db")
    monkeypatch.setattr(config, "DATABASE_PATH", path)
    init_db(path, seed_admin=False)
    container.reset()
    yield path
    container.reset()


# ------------------------------------------------------------------
# Actors
# ------------------------------------------------------------------
@pytest.fixture
def admin():
    return Actor(id="u-admin", role="admin", username="admin")


@pytest.fixture
def editor():
    return Actor(id="u-editor", role="editor", username="editor")


@pytest.fixture
def author():
    return Actor(id="u-author", role="author", username="author")


@pytest.fixture
def viewer():
    return Actor(id="u-viewer", role="viewer", username="viewer")


# ------------------------------------------------------------------
# Services
# ------------------------------------------------------------------
@pytest.fixture
def dashboard_service(db_path):
    return container.get_dashboard_app_service()


@pytest.fixture
def draft_service(db_path):
    return container.get_draft_app_service()


@pytest.fixture
def publish_service(db_path):
    return container.get_publish_app_service()


@pytest.fixture
def widgets(db_path):
    registry = container.get_widget_registry()
    for widget_id, widget_type in (("w-a", "chart"), ("w-b", "table"), ("w-c", "kpi")):
        registry.register({"id": widget_id, "name": widget_id.upper(), "widget_type": widget_type})
    return ["w-a", "w-b", "w-c"]


@pytest.fixture
def dashboard(dashboard_service, admin, widgets):
    return dashboard_service.create_dashboard(admin, {"name": "Sales overview"}).unwrap()


@pytest.fixture
def draft(draft_service, dashboard, admin):
    return draft_service.get_or_create_current_draft(dashboard.id, admin).unwrap()


@pytest.fixture
def spec():
    def make(widget_id, x, y, width=3, height=2, layout_type="lg"):
        return PlacementSpec(widget_id, x, y, width, height, layout_type)
    return make
