import requests

from crisma.context import HOME_PATH, LOGIN_PATH, AppContext
from crisma.schemas import Confirmand, LoginPayload, User

from conftest import confirmand

ME = {"id": 1, "username": "admin"}


def test_start_without_session(settings, api, backend):
    backend.route("GET", "/api/auth/me", status=401, json={"error": "Not authenticated"})
    ctx = AppContext(settings, api)
    assert ctx.is_loading
    assert ctx.redirect_for("/participants") is None

    assert ctx.start() is None
    assert not ctx.is_loading
    assert not ctx.is_authenticated
    assert ctx.redirect_for("/participants") == LOGIN_PATH
    assert ctx.redirect_for(LOGIN_PATH) is None


def test_start_with_live_cookie(settings, api, backend):
    backend.route("GET", "/api/auth/me", json=ME)
    ctx = AppContext(settings, api)
    ctx.ensure_started()
    ctx.ensure_started()
    assert ctx.user.username == "admin"
    assert len(backend.calls_to("GET", "/api/auth/me")) == 1
    assert ctx.redirect_for(LOGIN_PATH) == HOME_PATH


def test_network_failure_on_start_means_logged_out(settings, api, backend):
    backend.route("GET", "/api/auth/me", raises=requests.ConnectionError("refused"))
    ctx = AppContext(settings, api)
    assert ctx.start() is None
    assert not ctx.is_loading


def test_login_then_logout_resets_pages(settings, api, backend):
    backend.route("GET", "/api/auth/me", status=401)
    backend.route("POST", "/api/auth/login", json=ME)
    backend.route("POST", "/api/auth/logout", status=204)
    ctx = AppContext(settings, api)
    ctx.start()

    ctx.login(LoginPayload(username="admin", password="secret"))
    assert ctx.is_authenticated
    first_page = ctx.participants
    ctx.open_import()
    backend.cookies.set("session", "abc")

    assert ctx.logout() == LOGIN_PATH
    assert ctx.user is None
    assert ctx.participants is not first_page
    assert ctx.import_modal is None
    assert len(backend.cookies) == 0


def test_logout_clears_locally_even_if_backend_fails(settings, api, backend):
    backend.route("POST", "/api/auth/logout", status=500)
    ctx = AppContext(settings, api)
    ctx.user = User(**ME)
    assert ctx.logout() == LOGIN_PATH
    assert ctx.user is None


def test_detail_pages_are_reused_per_id(settings, api):
    ctx = AppContext(settings, api)
    assert ctx.participant_detail(3) is ctx.participant_detail(3)
    assert ctx.participant_detail(3) is not ctx.participant_detail(4)
    assert ctx.group_editor(7) is ctx.group_editor(7)
    assert ctx.catechist_detail(1) is ctx.catechist_detail(1)


def test_import_modal_feeds_participant_list(settings, api):
    ctx = AppContext(settings, api)
    widget = ctx.open_import()
    assert ctx.open_import() is widget
    assert widget.on_success == ctx.participants.merge
    ctx.close_import()
    assert ctx.import_modal is None


def test_stale_auto_close_keeps_a_new_selection(settings, api, backend):
    backend.route("POST", "/api/confirmands/import", json={
        "new_participants_imported": 0, "rows_skipped": 0, "imported_records": [],
    })
    ctx = AppContext(settings, api)
    pending = []
    widget = ctx.open_import()
    widget.scheduler = lambda delay, callback: pending.append(callback)
    widget.select_text("a\tb\n")
    widget.submit()

    ctx.open_import().select_text("c\td\n", file_name="next.tsv")
    for callback in pending:
        callback()

    assert ctx.import_modal is widget
    assert widget.file_name == "next.tsv"


def test_close_import_ignores_a_replaced_widget(settings, api):
    ctx = AppContext(settings, api)
    old = ctx.open_import()
    ctx.close_import()
    current = ctx.open_import()
    ctx.close_import(old)
    assert ctx.import_modal is current
    ctx.close_import(current)
    assert ctx.import_modal is None


def test_group_candidates_follow_participant_changes(settings, api, backend, roster):
    backend.route("GET", "/api/confirmands", json=roster)
    backend.route("GET", "/api/groups/7", json={
        "id": 7, "module": 2, "day_of_the_week": "Sunday", "start_date": "2025-08-03",
        "members": [roster[2]],
    })
    backend.route("DELETE", "/api/confirmands/2", status=204)
    ctx = AppContext(settings, api)
    ctx.participants.load()
    editor = ctx.group_editor(7)
    editor.load()
    assert [c.id for c in editor.available_candidates] == [2, 1]

    ctx.participants.merge([Confirmand(**confirmand(9, "Bruno Dias"))])
    assert [c.id for c in editor.available_candidates] == [2, 9, 1]

    ctx.participants.delete(2, confirm=True)
    assert [c.id for c in editor.available_candidates] == [9, 1]
