"""
FastAPI dependencies.

The store handle is created by the application lifespan and kept on
``app.state``; handlers receive services built around it.
"""

from typing import Callable, Type

from fastapi import Request

from ..core.db import Database
from ..services.entity_service import EntityService


def get_database(request: Request) -> Database:
    """Return the process wide store handle."""
    return request.app.state.database


def service_dependency(service_cls: Type[EntityService]) -> Callable[[Request], EntityService]:
    """Build a dependency that yields ``service_cls`` bound to the store."""

    def _get_service(request: Request) -> EntityService:
        return service_cls(get_database(request))

    return _get_service
