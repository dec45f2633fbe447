"""
Entity store for researchers, subjects and findings.

Each entity type is described by an ``EntityType`` (table, scalar
fields, reference fields) and accessed through an ``EntityStore``
bound to the shared ``Database`` handle.  Every method runs in its own
transaction, so operations are atomic per call; there is no
multi-call transaction.

Matchers and filters are plain mappings of field name to value:

* scalar fields (including ``id`` and the timestamps) match by
  equality, or by membership when the value is a list;
* reference fields match when the stored id set contains the value
  (or any of the values, for a list);
* a field the entity type does not have matches nothing.

All SQL is built from the fixed column lists below; user supplied
values are always bound as parameters.
"""

import json
import logging
import sqlite3
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from .db import Database
from .errors import NotFound

logger = logging.getLogger(__name__)

TIMESTAMP_FIELDS = ("created_at", "updated_at")
# Fields a patch may never replace.
IMMUTABLE_FIELDS = frozenset({"id", "created_at"})
FALLBACK_SORT = "created_at"
SCALAR_TYPES = (str, int, float)
# SQLite INTEGER is a signed 64-bit value.
MAX_INTEGER = 2 ** 63 - 1
MIN_INTEGER = -(2 ** 63)


def is_bindable(value: Any) -> bool:
    """True if ``value`` can be bound as a SQLite parameter."""
    if isinstance(value, int) and not MIN_INTEGER <= value <= MAX_INTEGER:
        return False
    return isinstance(value, SCALAR_TYPES)


def utcnow() -> str:
    """Current time as an ISO-8601 UTC string."""
    return datetime.now(timezone.utc).isoformat(timespec="microseconds")


def new_id() -> str:
    return uuid.uuid4().hex


@dataclass(frozen=True)
class EntityType:
    """Static description of one stored record type."""

    name: str
    table: str
    fields: Tuple[str, ...]
    # reference field -> name of the referenced entity type
    references: Dict[str, str] = field(default_factory=dict)

    @property
    def columns(self) -> Tuple[str, ...]:
        return ("id",) + self.fields + tuple(self.references) + TIMESTAMP_FIELDS

    def reciprocal_field(self, target: "EntityType") -> Optional[str]:
        """Name of the reference field on ``target`` that points back at us."""
        for ref_field, ref_type in target.references.items():
            if ref_type == self.name:
                return ref_field
        return None


RESEARCHER = EntityType(
    name="researcher",
    table="researchers",
    fields=("first_name", "last_name", "institution", "orcid_id"),
    references={"subjects": "subject", "findings": "finding"},
)

SUBJECT = EntityType(
    name="subject",
    table="subjects",
    fields=("name", "field_of_study"),
    references={"researchers": "researcher", "findings": "finding"},
)

FINDING = EntityType(
    name="finding",
    table="findings",
    fields=("title", "abstract", "publication_date"),
    references={"researchers": "researcher", "subjects": "subject"},
)

ENTITY_TYPES: Dict[str, EntityType] = {
    entity.name: entity for entity in (RESEARCHER, SUBJECT, FINDING)
}


def normalize_id_list(value: Any) -> List[str]:
    """Coerce a reference set value into a de-duplicated list of ids."""
    if value is None:
        return []
    if isinstance(value, (str, int)):
        value = [value]
    ids: List[str] = []
    for item in value:
        item = str(item)
        if item not in ids:
            ids.append(item)
    return ids


class EntityStore:
    """Keyed storage for a single entity type."""

    def __init__(
        self,
        database: Database,
        entity_type: EntityType,
        clock: Callable[[], str] = utcnow,
    ):
        self.database = database
        self.entity_type = entity_type
        self.clock = clock

    # ------------------------------------------------------------------
    # SQL helpers
    # ------------------------------------------------------------------
    def _where(self, matcher: Optional[Mapping[str, Any]]) -> Tuple[str, List[Any]]:
        """Build a WHERE clause for ``matcher``.

        Returns ``("0", [])`` when the matcher can never match.
        """
        if not matcher:
            return "1", []
        table = self.entity_type.table
        clauses: List[str] = []
        params: List[Any] = []
        for key, value in matcher.items():
            if isinstance(value, Mapping):
                # Operator documents are not supported by this store.
                logger.debug("Unsupported filter value for %s.%s", table, key)
                return "0", []
            if key in self.entity_type.references:
                values = normalize_id_list(value)
                if not values:
                    return "0", []
                placeholders = ", ".join("?" for _ in values)
                clauses.append(
                    f"EXISTS (SELECT 1 FROM json_each({table}.{key}) "
                    f"WHERE json_each.value IN ({placeholders}))"
                )
                params.extend(values)
            elif key in self.entity_type.columns:
                if isinstance(value, (list, tuple, set)):
                    values = list(value)
                    if not values or not all(is_bindable(item) for item in values):
                        return "0", []
                    placeholders = ", ".join("?" for _ in values)
                    clauses.append(f"{table}.{key} IN ({placeholders})")
                    params.extend(values)
                elif value is None:
                    clauses.append(f"{table}.{key} IS NULL")
                elif not is_bindable(value):
                    return "0", []
                else:
                    clauses.append(f"{table}.{key} = ?")
                    params.append(value)
            else:
                return "0", []
        return " AND ".join(clauses), params

    def _order_by(self, sort: Optional[str]) -> str:
        sort = (sort or "").strip()
        direction = "ASC"
        if sort.startswith("-"):
            direction = "DESC"
            sort = sort[1:]
        elif sort.startswith("+"):
            sort = sort[1:]
        if sort not in self.entity_type.columns:
            sort = FALLBACK_SORT
        order = f"{sort} {direction}"
        if sort != "id":
            # Stable paging across ties.
            order += ", id ASC"
        return order

    def _select_columns(self, projection: Optional[Iterable[str]]) -> List[str]:
        if not projection:
            return list(self.entity_type.columns)
        wanted = set(projection)
        return [col for col in self.entity_type.columns if col == "id" or col in wanted]

    def _row_to_record(self, row: sqlite3.Row) -> Dict[str, Any]:
        record: Dict[str, Any] = {}
        for key in row.keys():
            value = row[key]
            if key in self.entity_type.references:
                value = json.loads(value) if value else []
            record[key] = value
        return record

    def _encode(self, key: str, value: Any) -> Any:
        if key in self.entity_type.references:
            return json.dumps(normalize_id_list(value))
        return value

    def _fetch_one(self, cursor: sqlite3.Cursor, matcher: Mapping[str, Any]) -> Optional[sqlite3.Row]:
        where, params = self._where(matcher)
        return cursor.execute(
            f"SELECT * FROM {self.entity_type.table} WHERE {where} ORDER BY id LIMIT 1",
            params,
        ).fetchone()

    # ------------------------------------------------------------------
    # Public contract
    # ------------------------------------------------------------------
    def insert(self, body: Mapping[str, Any]) -> Dict[str, Any]:
        """Insert a new record and return it.

        A store assigned id is used unless ``body`` carries one.  Both
        timestamps are set to the same instant.  Keys that are not part
        of the entity type are ignored.
        """
        now = self.clock()
        record: Dict[str, Any] = {"id": str(body.get("id") or new_id())}
        for key in self.entity_type.fields:
            record[key] = body.get(key)
        for key in self.entity_type.references:
            record[key] = normalize_id_list(body.get(key))
        record["created_at"] = now
        record["updated_at"] = now

        columns = list(record)
        placeholders = ", ".join("?" for _ in columns)
        with self.database.transaction() as cursor:
            cursor.execute(
                f"INSERT INTO {self.entity_type.table} ({', '.join(columns)}) VALUES ({placeholders})",
                [self._encode(key, record[key]) for key in columns],
            )
        return record

    def get_one(self, matcher: Mapping[str, Any]) -> Dict[str, Any]:
        """Return the first record matching ``matcher`` or raise ``NotFound``."""
        with self.database.transaction() as cursor:
            row = self._fetch_one(cursor, matcher)
        if row is None:
            raise NotFound(f"{self.entity_type.name} not found")
        return self._row_to_record(row)

    def get_many(self, ids: Sequence[str]) -> List[Dict[str, Any]]:
        """Return the records for ``ids`` that exist, in the order given."""
        ids = normalize_id_list(ids)
        if not ids:
            return []
        placeholders = ", ".join("?" for _ in ids)
        with self.database.transaction() as cursor:
            rows = cursor.execute(
                f"SELECT * FROM {self.entity_type.table} WHERE id IN ({placeholders})",
                ids,
            ).fetchall()
        by_id = {row["id"]: self._row_to_record(row) for row in rows}
        return [by_id[record_id] for record_id in ids if record_id in by_id]

    def scan(
        self,
        filter: Optional[Mapping[str, Any]] = None,
        projection: Optional[Iterable[str]] = None,
        sort: Optional[str] = None,
        limit: Optional[int] = None,
        skip: int = 0,
    ) -> List[Dict[str, Any]]:
        """Filtered, projected, sorted and paged listing."""
        where, params = self._where(filter)
        if where == "0":
            return []
        columns = self._select_columns(projection)
        query = (
            f"SELECT {', '.join(columns)} FROM {self.entity_type.table} "
            f"WHERE {where} ORDER BY {self._order_by(sort)} LIMIT ? OFFSET ?"
        )
        # SQLite treats a negative LIMIT as "no limit".
        limit = -1 if limit is None else min(max(0, limit), MAX_INTEGER)
        params = params + [limit, min(max(0, skip), MAX_INTEGER)]
        with self.database.transaction() as cursor:
            rows = cursor.execute(query, params).fetchall()
        return [self._row_to_record(row) for row in rows]

    def update_one(self, matcher: Mapping[str, Any], patch: Mapping[str, Any]) -> Dict[str, Any]:
        """Replace the supplied fields of one record and return it.

        ``id`` and ``created_at`` are never replaced; unknown keys are
        ignored.  Raises ``NotFound`` if nothing matches.
        """
        updates = {
            key: value for key, value in patch.items()
            if key in self.entity_type.columns and key not in IMMUTABLE_FIELDS
        }
        with self.database.transaction() as cursor:
            row = self._fetch_one(cursor, matcher)
            if row is None:
                raise NotFound(f"{self.entity_type.name} not found")
            if updates:
                assignments = ", ".join(f"{key} = ?" for key in updates)
                cursor.execute(
                    f"UPDATE {self.entity_type.table} SET {assignments} WHERE id = ?",
                    [self._encode(key, value) for key, value in updates.items()] + [row["id"]],
                )
            row = cursor.execute(
                f"SELECT * FROM {self.entity_type.table} WHERE id = ?", (row["id"],)
            ).fetchone()
        return self._row_to_record(row)

    def delete_one(self, matcher: Mapping[str, Any]) -> Dict[str, Any]:
        """Delete one record and return its last stored state."""
        with self.database.transaction() as cursor:
            row = self._fetch_one(cursor, matcher)
            if row is None:
                raise NotFound(f"{self.entity_type.name} not found")
            cursor.execute(f"DELETE FROM {self.entity_type.table} WHERE id = ?", (row["id"],))
        return self._row_to_record(row)

    def pull_reference(self, ids: Sequence[str], ref_field: str, value: str) -> int:
        """Remove ``value`` from ``ref_field`` of every record in ``ids``.

        Returns the number of records that actually changed.
        """
        if ref_field not in self.entity_type.references:
            raise ValueError(f"{self.entity_type.name} has no reference field {ref_field!r}")
        ids = normalize_id_list(ids)
        if not ids:
            return 0
        placeholders = ", ".join("?" for _ in ids)
        modified = 0
        with self.database.transaction() as cursor:
            rows = cursor.execute(
                f"SELECT id, {ref_field} FROM {self.entity_type.table} WHERE id IN ({placeholders})",
                ids,
            ).fetchall()
            for row in rows:
                current = json.loads(row[ref_field]) if row[ref_field] else []
                if value not in current:
                    continue
                remaining = [item for item in current if item != value]
                cursor.execute(
                    f"UPDATE {self.entity_type.table} SET {ref_field} = ? WHERE id = ?",
                    (json.dumps(remaining), row["id"]),
                )
                modified += 1
        return modified


def store_for(database: Database, name: str, clock: Callable[[], str] = utcnow) -> EntityStore:
    """Build the ``EntityStore`` for an entity type name."""
    return EntityStore(database, ENTITY_TYPES[name], clock=clock)
