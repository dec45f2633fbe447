"""Tests for ScholariaAPI with a stubbed requests session."""

import json

import pytest
import requests

from scholaria_client import ScholariaAPI


class FakeResponse:
    def __init__(self, status_code=200, payload=None, text=""):
        self.status_code = status_code
        self._payload = payload
        self.text = text
        self.content = json.dumps(payload).encode() if payload is not None else text.encode()

    def json(self):
        if self._payload is None:
            raise ValueError("no json")
        return self._payload

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error", response=self)


class FakeSession:
    def __init__(self, response=None, exc=None):
        self.response = response
        self.exc = exc
        self.calls = []

    def request(self, **kwargs):
        self.calls.append(kwargs)
        if self.exc is not None:
            raise self.exc
        return self.response


def test_create_posts_to_collection():
    session = FakeSession(FakeResponse(201, {"id": "s1", "name": "Toxicology"}))
    api = ScholariaAPI(base_url="http://api.test/", session=session, api_key="secret")

    data, error = api.create("subject", {"name": "Toxicology"})

    assert error is None
    assert data["id"] == "s1"
    call = session.calls[0]
    assert call["method"] == "POST"
    assert call["url"] == "http://api.test/api/v1/subjects/"
    assert call["json"] == {"name": "Toxicology"}
    assert call["headers"]["Authorization"] == "Bearer secret"


def test_search_serializes_filter_and_skips_unset_params():
    session = FakeSession(FakeResponse(200, {"options": {}, "result": []}))
    api = ScholariaAPI(base_url="http://api.test", session=session)

    api.search("researcher", filter={"institution": "UCL"}, limit=5)

    call = session.calls[0]
    assert call["url"] == "http://api.test/api/v1/researchers/search"
    assert call["params"] == {"filter": '{"institution": "UCL"}', "limit": 5}


def test_http_error_is_returned_not_raised():
    payload = {"error": {"code": "partial_cascade_failure", "message": "pull failed"}}
    session = FakeSession(FakeResponse(500, payload))
    api = ScholariaAPI(base_url="http://api.test", session=session)

    data, error = api.remove("finding", "f1")

    assert data is None
    assert error == {"status_code": 500, "message": "pull failed"}


def test_transport_error_is_returned_not_raised():
    session = FakeSession(exc=requests.ConnectionError("refused"))
    api = ScholariaAPI(base_url="http://api.test", session=session)

    data, error = api.get("subject", "s1")

    assert data is None
    assert error["status_code"] is None
    assert "refused" in error["message"]


def test_unknown_entity_is_rejected():
    api = ScholariaAPI(base_url="http://api.test", session=FakeSession())
    with pytest.raises(ValueError):
        api.get("journal", "j1")
