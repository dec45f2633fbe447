"""
Population of reference sets.

Stored records keep only the ids of their related records.  For
responses, ``populate`` replaces each id list with the bodies of the
referenced records, as stored (their own reference sets stay as ids).
Ids whose record no longer exists are dropped silently so that a
dangling reference never breaks a response.  Nothing is written back
to the store.
"""

import logging
from typing import Any, Dict, List, Union

from ..core.db import Database
from ..core.store import EntityType, store_for

logger = logging.getLogger(__name__)

Populatable = Union[Dict[str, Any], List[Dict[str, Any]]]


def populate_record(database: Database, entity_type: EntityType, record: Dict[str, Any]) -> Dict[str, Any]:
    """Return a copy of ``record`` with its reference fields expanded.

    Only reference fields present in ``record`` are expanded, so a
    projected record stays projected.
    """
    if not record:
        return record
    populated = dict(record)
    for ref_field, target_name in entity_type.references.items():
        if ref_field not in record:
            continue
        ids = record[ref_field] or []
        related = store_for(database, target_name).get_many(ids)
        if len(related) != len(ids):
            logger.debug(
                "Dropped %d dangling %s reference(s) from %s %s",
                len(ids) - len(related), target_name, entity_type.name, record.get("id"),
            )
        populated[ref_field] = related
    return populated


def populate(database: Database, entity_type: EntityType, records: Populatable) -> Populatable:
    """Expand reference fields of a record or of a list of records."""
    if isinstance(records, list):
        return [populate_record(database, entity_type, record) for record in records]
    return populate_record(database, entity_type, records)
