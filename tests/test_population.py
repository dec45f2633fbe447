"""Tests for populate: reference ids expanded into record bodies."""

from scholaria_api.app.core.store import RESEARCHER, SUBJECT, EntityStore
from scholaria_api.app.services.population import populate


def test_reference_ids_become_records_in_order(database, clock):
    subjects = EntityStore(database, SUBJECT, clock=clock)
    researchers = EntityStore(database, RESEARCHER, clock=clock)
    s1 = subjects.insert({"name": "Toxicology"})
    s2 = subjects.insert({"name": "Genetics"})
    researcher = researchers.insert({"first_name": "Ada", "subjects": [s2["id"], s1["id"]]})

    populated = populate(database, RESEARCHER, researcher)

    assert [s["name"] for s in populated["subjects"]] == ["Genetics", "Toxicology"]
    assert populated["findings"] == []
    # Stored record is untouched.
    assert researchers.get_one({"id": researcher["id"]})["subjects"] == [s2["id"], s1["id"]]


def test_dangling_references_are_dropped(database, clock):
    subjects = EntityStore(database, SUBJECT, clock=clock)
    s1 = subjects.insert({"name": "Toxicology"})
    record = {"id": "r1", "subjects": ["gone", s1["id"]], "findings": ["also-gone"]}

    populated = populate(database, RESEARCHER, record)

    assert [s["id"] for s in populated["subjects"]] == [s1["id"]]
    assert populated["findings"] == []
    assert record["subjects"] == ["gone", s1["id"]]


def test_projected_records_without_reference_fields_pass_through(database):
    records = [{"id": "a", "name": "X"}, {"id": "b", "name": "Y"}]
    assert populate(database, SUBJECT, records) == records


def test_empty_record_stays_empty(database):
    assert populate(database, SUBJECT, {}) == {}
