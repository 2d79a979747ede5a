from app.application.permissions import CREATE, EDIT, MANAGE, PREVIEW, PUBLISH, RolePermissionProvider
from app.domain.common.actor import Actor
from app.domain.dashboard.models import Dashboard


def _dashboard(owner="u-owner"):
    return Dashboard(id="d1", name="Ops", created_by=owner, created_at="t", updated_at="t")


def test_admin_can_do_everything():
    perms = RolePermissionProvider()
    admin = Actor("u1", "admin")
    assert all(perms.can(admin, action, _dashboard()) for action in (CREATE, PREVIEW, EDIT, PUBLISH, MANAGE))


def test_editor_cannot_manage_others_dashboards():
    perms = RolePermissionProvider()
    editor = Actor("u1", "editor")
    assert perms.can(editor, PUBLISH, _dashboard())
    assert not perms.can(editor, MANAGE, _dashboard())


def test_author_cannot_publish():
    perms = RolePermissionProvider()
    assert not perms.can(Actor("u1", "author"), PUBLISH, _dashboard())


def test_owner_keeps_control_of_own_dashboard():
    perms = RolePermissionProvider()
    owner = Actor("u-owner", "viewer")
    assert perms.can(owner, PUBLISH, _dashboard())
    assert perms.can(owner, MANAGE, _dashboard())
    assert not perms.can(owner, CREATE)


def test_require_returns_denial():
    perms = RolePermissionProvider()
    denied = perms.require(Actor("u1", "viewer"), EDIT, _dashboard())
    assert denied.code == "permission_denied"
    assert "d1" in denied.message
    assert perms.require(Actor("u1", "admin"), EDIT, _dashboard()) is None


def test_unknown_role_gets_nothing():
    assert not RolePermissionProvider().can(Actor("u1", "intern"), EDIT, _dashboard())


def test_viewer_cannot_preview_drafts():
    perms = RolePermissionProvider()
    assert not perms.can(Actor("u1", "viewer"), PREVIEW, _dashboard())
    assert perms.can(Actor("u1", "author"), PREVIEW, _dashboard())
    assert perms.can(Actor("u-owner", "viewer"), PREVIEW, _dashboard())
