"""
Search option normalization.

Clients may send any combination of ``filter``, ``fields``, ``page``,
``limit`` and ``sort`` as raw query string values, or omit them.
``normalize_search_options`` turns such a parameter bag into a complete
``SearchOptions`` that is always safe to hand to the store: the page is
at least 1 and small enough for its offset to fit a SQLite integer, the
limit lies between 1 and the configured maximum, and
missing values take the configured defaults.  It never fails; whether
the input had an acceptable shape is the API layer's concern.

Normalizing an already normalized option set returns an equal set.
"""

import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, Mapping, Optional, Union

from ..schemas.search import SearchOptions
from .config import settings
from .store import MAX_INTEGER

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SearchDefaults:
    """Configured page size bounds and sort key."""

    default_page_size: int = 20
    max_page_size: int = 100
    default_sort: str = "updated_at"

    @classmethod
    def from_settings(cls) -> "SearchDefaults":
        max_page_size = max(1, settings.max_page_size)
        default_page_size = min(max(1, settings.default_page_size), max_page_size)
        return cls(
            default_page_size=default_page_size,
            max_page_size=max_page_size,
            default_sort=settings.default_sort or "updated_at",
        )


def _to_int(value: Any) -> Optional[int]:
    """Best effort integer coercion; ``None`` for anything unusable."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value == value and abs(value) != float("inf") else None
    try:
        return int(str(value).strip())
    except ValueError:
        return None


def get_filter(raw: Any) -> Dict[str, Any]:
    """Filter mapping; the empty matcher for anything absent or unusable."""
    if isinstance(raw, Mapping):
        return dict(raw)
    if isinstance(raw, (str, bytes)) and raw.strip():
        try:
            parsed = json.loads(raw)
        except ValueError:
            logger.debug("Ignoring unparseable search filter %r", raw)
            return {}
        if isinstance(parsed, dict):
            return parsed
    return {}


def get_fields(raw: Any, default_fields: Iterable[str]) -> str:
    """Comma joined projection; ``default_fields`` when none were asked for."""
    if isinstance(raw, str):
        names = raw.split(",")
    elif isinstance(raw, (list, tuple)):
        names = [str(name) for name in raw]
    else:
        names = []
    names = [name.strip() for name in names if name and name.strip()]
    if not names:
        names = list(default_fields)
    return ",".join(names)


def get_page(raw: Any, defaults: SearchDefaults) -> int:
    page = _to_int(raw)
    if page is None or page < 1:
        return 1
    # Keep limit * (page - 1) within a SQLite INTEGER for any allowed limit.
    return min(page, MAX_INTEGER // defaults.max_page_size + 1)


def get_limit(raw: Any, defaults: SearchDefaults) -> int:
    limit = _to_int(raw)
    if limit is None or limit < 1:
        return defaults.default_page_size
    return min(limit, defaults.max_page_size)


def get_sort(raw: Any, defaults: SearchDefaults) -> str:
    if isinstance(raw, str):
        sort = raw.strip()
        if sort and sort not in {"-", "+"}:
            return sort
    return defaults.default_sort


def normalize_search_options(
    params: Union[Mapping[str, Any], SearchOptions, None],
    default_fields: Iterable[str] = (),
    defaults: Optional[SearchDefaults] = None,
) -> SearchOptions:
    """Build a bounded ``SearchOptions`` from a raw parameter bag."""
    if defaults is None:
        defaults = SearchDefaults.from_settings()
    if isinstance(params, SearchOptions):
        params = params.model_dump()
    params = params or {}
    return SearchOptions(
        filter=get_filter(params.get("filter")),
        fields=get_fields(params.get("fields"), default_fields),
        page=get_page(params.get("page"), defaults),
        limit=get_limit(params.get("limit"), defaults),
        sort=get_sort(params.get("sort"), defaults),
    )
