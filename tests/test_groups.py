import pytest

from crisma.api_client import ApiError
from crisma.schemas import ConfirmationGroup
from crisma.services.groups import (
    SELECT_PARTICIPANT_MESSAGE,
    GroupMembershipEditor,
    GroupsController,
    group_display_name,
)
from crisma.services.list_view import PageState

from conftest import confirmand

GROUP = {
    "id": 7,
    "module": 2,
    "catechist_name": "Joana Lima",
    "day_of_the_week": "Sunday",
    "start_date": "2025-08-03",
}


@pytest.fixture
def editor(api, backend, roster):
    backend.route("GET", "/api/groups/7", json={**GROUP, "members": [roster[2]]})
    backend.route("GET", "/api/confirmands", json=roster)
    ed = GroupMembershipEditor(api, 7)
    assert ed.load() == PageState.READY
    return ed


def test_candidates_exclude_members(editor):
    assert [m.id for m in editor.members] == [3]
    assert [c.full_name for c in editor.available_candidates] == ["Ana Costa", "Maria Silva"]


def test_add_member_moves_participant_across(editor, backend):
    backend.route("POST", "/api/groups/7/participants", status=201)
    added = editor.add_member(1)

    assert added.full_name == "Maria Silva"
    assert [m.full_name for m in editor.members] == ["Maria Silva", "Pedro Alves"]
    assert [c.id for c in editor.available_candidates] == [2]
    assert backend.calls_to("POST", "/api/groups/7/participants")[0]["json"] == {"confirmand_id": 1}


def test_add_without_selection_sends_nothing(editor, backend):
    assert editor.add_member(None) is None
    assert editor.error == SELECT_PARTICIPANT_MESSAGE
    assert backend.calls_to("POST", "/api/groups/7/participants") == []


def test_add_failure_leaves_members(editor, backend):
    backend.route("POST", "/api/groups/7/participants", status=409, json={"error": "Already in a group"})
    with pytest.raises(ApiError):
        editor.add_member(2)
    assert [m.id for m in editor.members] == [3]
    assert editor.error == "Already in a group"


def test_remove_member_requires_confirmation(editor, backend):
    backend.route("DELETE", "/api/groups/7/participants/3", status=204)
    assert editor.remove_member(3, confirm=False) is False
    assert backend.calls_to("DELETE", "/api/groups/7/participants/3") == []

    assert editor.remove_member(3, confirm=True) is True
    assert editor.members == []
    assert len(editor.available_candidates) == 3


def test_load_fails_when_either_fetch_fails(api, backend, roster):
    backend.route("GET", "/api/groups/7", status=404, text="Group not found")
    backend.route("GET", "/api/confirmands", json=roster)
    ed = GroupMembershipEditor(api, 7)
    assert ed.load() == PageState.ERROR
    assert ed.error == "Group not found"


def test_group_list_searches_display_name(api, backend):
    backend.route("GET", "/api/groups", json=[
        GROUP,
        {**GROUP, "id": 8, "module": 1, "catechist_name": None, "start_date": "2026-02-01"},
    ])
    backend.route("GET", "/api/catechists", json=[
        {"id": 2, "full_name": "Rui Nunes"},
        {"id": 1, "full_name": "Joana Lima"},
    ])
    page = GroupsController(api)
    page.load()

    assert [o.name for o in page.catechist_options()] == ["Joana Lima", "Rui Nunes"]
    page.query = "joana"
    assert [g.id for g in page.projection] == [7]
    page.query = "unassigned"
    assert [g.id for g in page.projection] == [8]


def test_group_display_name():
    group = ConfirmationGroup(**GROUP)
    assert group_display_name(group) == "Module 2 - Joana Lima - 2025 2nd Semester"
