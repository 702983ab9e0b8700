import pytest

from crisma.services.list_view import PageState
from crisma.services.participants import SACRAMENT_UPDATE_FAILED, ParticipantDetailController

from conftest import confirmand

SACRAMENTS = [{"id": 1, "name": "Baptism"}, {"id": 2, "name": "First Communion"}, {"id": 3, "name": "Confirmation"}]


@pytest.fixture
def detail(api, backend):
    backend.route("GET", "/api/confirmands/5/details", json={
        **confirmand(5, "Ana Costa"),
        "sacraments": [SACRAMENTS[0]],
        "group_history": [{"id": 7, "module": 2, "start_date": "2025-08-03", "catechist_name": "Joana Lima"}],
    })
    backend.route("GET", "/api/sacraments", json=SACRAMENTS)
    page = ParticipantDetailController(api, 5)
    assert page.load() == PageState.READY
    return page


def test_loads_details_and_catalogue(detail):
    assert detail.details.full_name == "Ana Costa"
    assert detail.completed_ids == {1}
    assert [s.name for s in detail.all_sacraments] == ["Baptism", "First Communion", "Confirmation"]
    assert detail.details.group_history[0].module == 2


def test_check_sacrament(detail, backend):
    backend.route("POST", "/api/confirmands/5/sacraments", status=201)
    assert detail.toggle_sacrament(2, True) is True
    assert detail.completed_ids == {1, 2}
    assert backend.calls_to("POST", "/api/confirmands/5/sacraments")[0]["json"] == {"sacrament_id": 2}


def test_uncheck_sacrament(detail, backend):
    backend.route("DELETE", "/api/confirmands/5/sacraments/1", status=204)
    assert detail.toggle_sacrament(1, False) is True
    assert detail.completed_ids == set()


def test_rejected_toggle_rolls_back(detail, backend):
    backend.route("POST", "/api/confirmands/5/sacraments", status=500, text="boom")
    assert detail.toggle_sacrament(3, True) is False
    assert detail.completed_ids == {1}
    assert detail.error == SACRAMENT_UPDATE_FAILED


def test_rejected_uncheck_restores(detail, backend):
    backend.route("DELETE", "/api/confirmands/5/sacraments/1", status=404, text="Not found")
    assert detail.toggle_sacrament(1, False) is False
    assert detail.completed_ids == {1}


def test_unknown_sacrament_is_refused(detail, backend):
    assert detail.toggle_sacrament(99, True) is False
    assert backend.calls_to("POST", "/api/confirmands/5/sacraments") == []


def test_missing_catalogue_fails_page(api, backend):
    backend.route("GET", "/api/confirmands/5/details", json=confirmand(5, "Ana Costa"))
    backend.route("GET", "/api/sacraments", status=503, text="Service unavailable")
    page = ParticipantDetailController(api, 5)
    assert page.load() == PageState.ERROR
    assert page.error == "Service unavailable"
