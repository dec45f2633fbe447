"""
Generic service for researchers, subjects and findings.

``EntityService`` wires the store, the search option normalizer, the
population resolver and the relationship maintainer together for one
entity type.  Subclasses only declare which type they serve and which
fields a search returns by default.

Not found is not an error at this boundary: ``get``, ``update`` and
``remove`` return an empty dict when the id does not exist.  Every
other failure propagates to the caller unchanged.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple, Union

from pydantic import BaseModel

from ..core.db import Database
from ..core.errors import NotFound
from ..core.search_options import SearchDefaults, normalize_search_options
from ..core.store import EntityStore, EntityType, utcnow
from ..schemas.search import SearchOptions
from .population import populate
from .relationships import remove_with_cascade

Payload = Union[Mapping[str, Any], BaseModel]


def _as_dict(payload: Payload, exclude_unset: bool = False) -> Dict[str, Any]:
    if isinstance(payload, BaseModel):
        return payload.model_dump(mode="json", exclude_unset=exclude_unset)
    return dict(payload)


class EntityService:
    """CRUD and search for a single entity type."""

    entity_type: EntityType
    default_fields: Tuple[str, ...] = ()

    def __init__(
        self,
        database: Database,
        defaults: Optional[SearchDefaults] = None,
        clock: Callable[[], str] = utcnow,
    ):
        self.database = database
        self.defaults = defaults
        self.clock = clock
        self.store = EntityStore(database, self.entity_type, clock=clock)
        self.logger = logging.getLogger(f"{__name__}.{self.entity_type.name}")

    def normalize(self, params: Union[Mapping[str, Any], SearchOptions, None]) -> SearchOptions:
        """Normalize raw search parameters with this type's default fields."""
        return normalize_search_options(params, self.default_fields, self.defaults)

    async def create(self, body: Payload) -> Dict[str, Any]:
        """Insert a new record; the store assigns id and timestamps."""
        record = self.store.insert(_as_dict(body))
        self.logger.info("Created %s %s", self.entity_type.name, record["id"])
        return record

    async def get(self, record_id: str) -> Dict[str, Any]:
        """Return the populated record, or ``{}`` if it does not exist."""
        try:
            record = self.store.get_one({"id": record_id})
        except NotFound:
            return {}
        return populate(self.database, self.entity_type, record)

    async def search(
        self, options: Union[Mapping[str, Any], SearchOptions, None] = None
    ) -> List[Dict[str, Any]]:
        """Return one page of populated records matching ``options``."""
        options = self.normalize(options)
        records = self.store.scan(
            filter=options.filter,
            projection=options.projection,
            sort=options.sort,
            limit=options.limit,
            skip=options.skip,
        )
        return populate(self.database, self.entity_type, records)

    async def search_page(
        self, params: Union[Mapping[str, Any], SearchOptions, None] = None
    ) -> Dict[str, Any]:
        """Search and echo the normalized options next to the result."""
        options = self.normalize(params)
        result = await self.search(options)
        return {"options": options.model_dump(), "result": result}

    async def update(self, record_id: str, patch: Payload) -> Dict[str, Any]:
        """Replace the given fields and refresh ``updated_at``.

        Returns the populated record, or ``{}`` if it does not exist.
        A caller supplied ``updated_at`` is always overwritten.
        """
        updates = _as_dict(patch, exclude_unset=True)
        updates.pop("id", None)
        updates.pop("created_at", None)
        updates["updated_at"] = self.clock()
        try:
            record = self.store.update_one({"id": record_id}, updates)
        except NotFound:
            return {}
        self.logger.info("Updated %s %s", self.entity_type.name, record_id)
        return populate(self.database, self.entity_type, record)

    async def remove(self, record_id: str) -> Dict[str, Any]:
        """Delete the record and prune its id from the records it lists."""
        return remove_with_cascade(self.database, self.entity_type, record_id)
