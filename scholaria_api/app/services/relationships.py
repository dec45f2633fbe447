"""
Reference set maintenance on delete.

Relationships are stored on both sides independently, so deleting a
record must also remove its id from the records it points at.
``remove_with_cascade`` runs the steps in a fixed order:

1. fetch the record (absent: return ``{}``, deleting twice is fine);
2. delete it;
3. for every reference field of the deleted record, pull its id from
   the reciprocal field of the records listed there.

Only neighbours named by the deleted record are visited.  A record that
references the deleted one without being referenced back keeps its
(now dangling) id; population drops such ids when rendering.

The steps are separate store calls.  If a pull fails the delete has
already happened; the failure is reported as ``PartialCascadeFailure``.
"""

import logging
from typing import Any, Dict

from ..core.db import Database
from ..core.errors import NotFound, PartialCascadeFailure, StoreError
from ..core.store import ENTITY_TYPES, EntityType, store_for

logger = logging.getLogger(__name__)


def remove_with_cascade(
    database: Database,
    entity_type: EntityType,
    record_id: str,
) -> Dict[str, Any]:
    """Delete ``record_id`` and prune it from its neighbours' reference sets.

    Returns the deleted record as it was stored, or ``{}`` if there was
    nothing to delete.
    """
    store = store_for(database, entity_type.name)
    try:
        record = store.get_one({"id": record_id})
    except NotFound:
        logger.debug("%s %s already absent; nothing to remove", entity_type.name, record_id)
        return {}

    try:
        record = store.delete_one({"id": record["id"]})
    except NotFound:
        # Lost a race with a concurrent delete.
        return {}
    logger.info("Deleted %s %s", entity_type.name, record_id)

    for ref_field, target_name in entity_type.references.items():
        neighbour_ids = record.get(ref_field) or []
        if not neighbour_ids:
            continue
        target = ENTITY_TYPES[target_name]
        back_field = entity_type.reciprocal_field(target)
        if back_field is None:
            continue
        try:
            modified = store_for(database, target_name).pull_reference(
                neighbour_ids, back_field, record["id"]
            )
        except StoreError as exc:
            logger.error(
                "Pulling %s %s from %s.%s failed: %s",
                entity_type.name, record_id, target.table, back_field, exc,
            )
            raise PartialCascadeFailure(
                entity_type.name, record["id"], target_name, str(exc)
            ) from exc
        logger.debug(
            "Pulled %s %s from %d %s record(s)", entity_type.name, record_id, modified, target_name
        )
    return record
