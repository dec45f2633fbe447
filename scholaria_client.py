"""Scholaria API client.

A thin wrapper around the REST API for scripts and other services.  It
uses the ``requests`` library and never raises on HTTP or transport
failures: every call returns a ``(data, error)`` tuple where exactly
one side is meaningful.  ``error`` is a dict with ``status_code`` and
``message`` keys.

Entity names are the singular type names (``researcher``,
``subject``, ``finding``)::

    api = ScholariaAPI(base_url="http://localhost:8000")
    subject, error = api.create("subject", {"name": "Toxicology", "field_of_study": "Animal Science"})
    page, error = api.search("subject", limit=10, sort="-created_at")
"""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, Mapping, Optional, Tuple

import requests

logger = logging.getLogger(__name__)

API_PREFIX = "/api/v1"

COLLECTIONS = {
    "researcher": "researchers",
    "subject": "subjects",
    "finding": "findings",
}

Result = Tuple[Optional[Any], Optional[Dict[str, Any]]]


class ScholariaAPI:
    """Client for the Scholaria REST API."""

    def __init__(
        self,
        *,
        base_url: str,
        api_key: Optional[str] = None,
        session: Optional[requests.Session] = None,
        timeout: float = 15,
    ) -> None:
        """Initialise the API client.

        Args:
            base_url: Base URL of the service, e.g. ``http://localhost:8000``.
            api_key: Optional token sent as ``Authorization: Bearer <api_key>``
                for deployments behind an authenticating proxy.
            session: Optional requests session; one is created if omitted.
            timeout: Per request timeout in seconds.
        """
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.session = session or requests.Session()
        self.timeout = timeout

    # ------------------------------------------------------------------
    # Low level HTTP helpers
    # ------------------------------------------------------------------
    def _path(self, entity: str, suffix: str = "") -> str:
        try:
            collection = COLLECTIONS[entity]
        except KeyError:
            raise ValueError(f"Unknown entity type {entity!r}") from None
        return f"{API_PREFIX}/{collection}/{suffix}"

    def _request(
        self, method: str, path: str, *, params: Optional[Dict[str, Any]] = None,
        json_body: Any | None = None
    ) -> Result:
        """Perform an HTTP request and return ``(data, error)``."""
        url = f"{self.base_url}{path}"
        headers: Dict[str, str] = {}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        try:
            logger.debug("Sending %s request to %s", method, url)
            response = self.session.request(
                method=method,
                url=url,
                params=params,
                json=json_body,
                headers=headers,
                timeout=self.timeout,
            )
            response.raise_for_status()
            if response.content:
                return response.json(), None
            return None, None
        except requests.HTTPError as exc:
            status = exc.response.status_code if exc.response is not None else None
            message = ""
            if exc.response is not None:
                try:
                    err_json = exc.response.json()
                except ValueError:
                    message = exc.response.text
                else:
                    error = err_json.get("error") if isinstance(err_json, dict) else None
                    if isinstance(error, dict):
                        message = error.get("message", "")
                    elif isinstance(err_json, dict):
                        message = str(err_json.get("detail") or err_json)
                    else:
                        message = str(err_json)
            if not message:
                message = str(exc)
            logger.error("API request failed (%s): %s", status, message)
            return None, {"status_code": status, "message": message}
        except requests.RequestException as exc:
            logger.error("API request failed: %s", exc)
            return None, {"status_code": None, "message": str(exc)}

    # ------------------------------------------------------------------
    # Entity operations
    # ------------------------------------------------------------------
    def create(self, entity: str, body: Mapping[str, Any]) -> Result:
        """Create a record and return it."""
        return self._request("POST", self._path(entity), json_body=dict(body))

    def get(self, entity: str, record_id: str) -> Result:
        """Fetch a populated record; ``{}`` when it does not exist."""
        return self._request("GET", self._path(entity, record_id))

    def search(
        self,
        entity: str,
        *,
        filter: Optional[Mapping[str, Any]] = None,
        fields: Optional[str] = None,
        page: Optional[int] = None,
        limit: Optional[int] = None,
        sort: Optional[str] = None,
    ) -> Result:
        """Search records; the data is ``{"options": ..., "result": [...]}``."""
        params: Dict[str, Any] = {}
        if filter:
            params["filter"] = json.dumps(dict(filter))
        for key, value in (("fields", fields), ("page", page), ("limit", limit), ("sort", sort)):
            if value is not None:
                params[key] = value
        return self._request("GET", self._path(entity, "search"), params=params)

    def update(self, entity: str, record_id: str, patch: Mapping[str, Any]) -> Result:
        """Update a record and return its populated state."""
        return self._request("PUT", self._path(entity, record_id), json_body=dict(patch))

    def remove(self, entity: str, record_id: str) -> Result:
        """Delete a record and return what was deleted."""
        return self._request("DELETE", self._path(entity, record_id))
