"""End-to-end tests through the FastAPI application."""

import json

import pytest

from scholaria_api.app.core.errors import PartialCascadeFailure
from scholaria_api.app.services.subject_service import SubjectService

BASE = "/api/v1"


def create_subject(client, **overrides):
    body = {"name": "Toxicology", "field_of_study": "Animal Science"}
    body.update(overrides)
    response = client.post(f"{BASE}/subjects/", json=body)
    assert response.status_code == 201
    return response.json()


def create_researcher(client, **overrides):
    body = {
        "first_name": "James",
        "last_name": "Bond",
        "institution": "Universal Exports",
        "orcid_id": "MI6-007",
    }
    body.update(overrides)
    response = client.post(f"{BASE}/researchers/", json=body)
    assert response.status_code == 201
    return response.json()


def test_create_and_get_subject(client):
    subject = create_subject(client)
    assert subject["researchers"] == [] and subject["findings"] == []
    assert subject["created_at"] == subject["updated_at"]

    fetched = client.get(f"{BASE}/subjects/{subject['id']}").json()
    assert fetched["name"] == "Toxicology"


def test_create_rejects_missing_required_fields(client):
    response = client.post(f"{BASE}/researchers/", json={"first_name": "James"})
    assert response.status_code == 422
    response = client.post(f"{BASE}/subjects/", json={"name": "", "field_of_study": "x"})
    assert response.status_code == 422


def test_missing_ids_answer_empty_objects(client):
    assert client.get(f"{BASE}/findings/nope").json() == {}
    assert client.put(f"{BASE}/findings/nope", json={"title": "x"}).json() == {}
    response = client.delete(f"{BASE}/findings/nope")
    assert response.status_code == 200
    assert response.json() == {}


def test_delete_cascades_to_listed_researcher(client):
    subject = create_subject(client)
    researcher = create_researcher(client, subjects=[subject["id"]])
    client.put(f"{BASE}/subjects/{subject['id']}", json={"researchers": [researcher["id"]]})

    removed = client.delete(f"{BASE}/subjects/{subject['id']}").json()
    assert removed["id"] == subject["id"]

    fetched = client.get(f"{BASE}/researchers/{researcher['id']}").json()
    assert fetched["subjects"] == []
    assert client.get(f"{BASE}/subjects/{subject['id']}").json() == {}


def test_update_populates_references(client):
    subject = create_subject(client)
    researcher = create_researcher(client)
    updated = client.put(
        f"{BASE}/researchers/{researcher['id']}",
        json={"institution": "MI6", "subjects": [subject["id"]]},
    ).json()
    assert updated["institution"] == "MI6"
    assert updated["subjects"][0]["name"] == "Toxicology"


def test_finding_publication_date_round_trips_as_iso(client):
    response = client.post(
        f"{BASE}/findings/",
        json={"title": "Lead in cattle", "abstract": "We measured.", "publication_date": "2017-02-13"},
    )
    assert response.status_code == 201
    assert response.json()["publication_date"] == "2017-02-13"
    bad = client.post(
        f"{BASE}/findings/", json={"title": "x", "abstract": "y", "publication_date": "yesterday"}
    )
    assert bad.status_code == 422


def test_search_returns_options_and_bounded_result(client):
    for n in range(3):
        create_subject(client, name=f"S{n}", field_of_study="Biology" if n else "Physics")

    response = client.get(
        f"{BASE}/subjects/search",
        params={"filter": json.dumps({"field_of_study": "Biology"}), "limit": "1", "page": "0", "sort": "-name"},
    )
    assert response.status_code == 200
    body = response.json()
    assert body["options"]["page"] == 1
    assert body["options"]["limit"] == 1
    assert [r["name"] for r in body["result"]] == ["S2"]


def test_search_with_garbage_parameters_still_answers(client):
    create_subject(client)
    response = client.get(
        f"{BASE}/subjects/search", params={"filter": "{oops", "page": "x", "limit": "-5", "sort": ""}
    )
    assert response.status_code == 200
    body = response.json()
    assert body["options"]["filter"] == {}
    assert body["options"]["page"] == 1
    assert len(body["result"]) == 1


@pytest.mark.parametrize(
    "params",
    [
        {"page": "99999999999999999999"},
        {"filter": '{"name": 100000000000000000000}'},
    ],
)
def test_search_with_oversized_numbers_answers_empty_result(client, params):
    create_subject(client)
    response = client.get(f"{BASE}/subjects/search", params=params)
    assert response.status_code == 200
    body = response.json()
    assert body["result"] == []
    options = body["options"]
    assert (options["page"] - 1) * options["limit"] <= 2 ** 63 - 1


@pytest.mark.parametrize(
    "path, body",
    [
        ("subjects", {"name": None}),
        ("researchers", {"first_name": None}),
        ("findings", {"title": None}),
    ],
)
def test_update_rejects_null_for_required_text(client, path, body):
    created = client.post(
        f"{BASE}/{path}/",
        json={
            "subjects": {"name": "Toxicology", "field_of_study": "Animal Science"},
            "researchers": {"first_name": "James", "last_name": "Bond", "institution": "MI6", "orcid_id": "007"},
            "findings": {"title": "Lead in cattle", "abstract": "We measured."},
        }[path],
    ).json()

    response = client.put(f"{BASE}/{path}/{created['id']}", json=body)

    assert response.status_code == 422
    field = next(iter(body))
    assert client.get(f"{BASE}/{path}/{created['id']}").json()[field] is not None


def test_update_still_allows_clearing_publication_date(client):
    created = client.post(
        f"{BASE}/findings/",
        json={"title": "Lead in cattle", "abstract": "We measured.", "publication_date": "2017-02-13"},
    ).json()
    updated = client.put(f"{BASE}/findings/{created['id']}", json={"publication_date": None}).json()
    assert updated["publication_date"] is None
    assert updated["title"] == "Lead in cattle"


def test_partial_cascade_failure_is_rendered_as_error(client, monkeypatch):
    subject = create_subject(client)

    async def failing_remove(self, record_id):
        raise PartialCascadeFailure("subject", record_id, "researcher", "boom")

    monkeypatch.setattr(SubjectService, "remove", failing_remove)
    response = client.delete(f"{BASE}/subjects/{subject['id']}")
    assert response.status_code == 500
    error = response.json()["error"]
    assert error["code"] == "partial_cascade_failure"
    assert error["context"]["failed_step"] == "researcher"


@pytest.mark.parametrize("path", ["/info/", "/info/health"])
def test_info_endpoints(client, path):
    response = client.get(f"{BASE}{path}")
    assert response.status_code == 200
