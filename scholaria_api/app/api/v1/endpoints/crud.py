"""
Route factory shared by the entity endpoints.

Every entity type exposes the same five operations:

* ``POST /``: create (201);
* ``GET /search``: paginated search, answering ``{"options", "result"}``;
* ``GET /{record_id}``: fetch one populated record;
* ``PUT /{record_id}``: update and return the populated record;
* ``DELETE /{record_id}``: remove and return the deleted record.

A missing id is answered with ``200`` and an empty object, not ``404``.
"""

from typing import Any, Dict, Optional, Type

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel

from scholaria_api.app.api.deps import service_dependency
from scholaria_api.app.schemas.search import SearchResponse
from scholaria_api.app.services.entity_service import EntityService


def build_crud_router(
    service_cls: Type[EntityService],
    create_schema: Type[BaseModel],
    update_schema: Type[BaseModel],
) -> APIRouter:
    """Create an APIRouter exposing ``service_cls``."""
    router = APIRouter()
    get_service = service_dependency(service_cls)
    entity = service_cls.entity_type.name

    @router.post("/", status_code=status.HTTP_201_CREATED, summary=f"Create {entity}")
    async def create(
        body: create_schema,  # type: ignore[valid-type]
        service: EntityService = Depends(get_service),
    ) -> Dict[str, Any]:
        return await service.create(body)

    # Declared before "/{record_id}" so "search" is not taken for an id.
    @router.get("/search", response_model=SearchResponse, summary=f"Search {entity} records")
    async def search(
        filter: Optional[str] = Query(None, description="JSON object of field/value pairs"),
        fields: Optional[str] = Query(None, description="Comma separated fields to return"),
        page: Optional[str] = Query(None, description="Page number, starting at 1"),
        limit: Optional[str] = Query(None, description="Maximum number of records"),
        sort: Optional[str] = Query(None, description="Sort field, prefix with '-' for descending"),
        service: EntityService = Depends(get_service),
    ) -> Dict[str, Any]:
        params = {"filter": filter, "fields": fields, "page": page, "limit": limit, "sort": sort}
        return await service.search_page(params)

    @router.get("/{record_id}", summary=f"Get {entity}")
    async def get(record_id: str, service: EntityService = Depends(get_service)) -> Dict[str, Any]:
        return await service.get(record_id)

    @router.put("/{record_id}", summary=f"Update {entity}")
    async def update(
        record_id: str,
        body: update_schema,  # type: ignore[valid-type]
        service: EntityService = Depends(get_service),
    ) -> Dict[str, Any]:
        return await service.update(record_id, body)

    @router.delete("/{record_id}", summary=f"Delete {entity}")
    async def remove(record_id: str, service: EntityService = Depends(get_service)) -> Dict[str, Any]:
        return await service.remove(record_id)

    return router
