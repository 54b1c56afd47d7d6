"""
Record Storage - Generic table store for the appraisal services

Provides find / create / update / remove over named tables of JSON
records. This is an in-memory implementation with optional JSON file
persistence; every record gets a serial integer id, a uuid and
created/updated timestamps.
"""

from __future__ import annotations

import copy
import json
import logging
import threading
import uuid
from datetime import datetime
from pathlib import Path
from typing import Any, Final, Mapping, Optional


logger = logging.getLogger(__name__)


# =============================================================================
# Tables
# =============================================================================

USERS: Final = "users"
PROPERTIES: Final = "properties"
APPRAISAL_REPORTS: Final = "appraisal_reports"
COMPARABLES: Final = "comparables"
FORMS: Final = "forms"
FORM_SUBMISSIONS: Final = "form_submissions"

TABLES: Final[tuple[str, ...]] = (
    USERS,
    PROPERTIES,
    APPRAISAL_REPORTS,
    COMPARABLES,
    FORMS,
    FORM_SUBMISSIONS,
)

# Fields the store owns; callers cannot overwrite them through update()
PROTECTED_FIELDS: Final[frozenset[str]] = frozenset({"id", "uuid", "createdAt"})


# =============================================================================
# Errors
# =============================================================================


class UnknownTableError(KeyError):
    """Raised for a table name the store does not define."""

    def __init__(self, table: str):
        self.table = table
        super().__init__(f"Unknown table: {table}")


class RecordNotFoundError(LookupError):
    """Raised when a record id does not exist in a table."""

    def __init__(self, table: str, record_id: Any):
        self.table = table
        self.record_id = record_id
        super().__init__(f"No record {record_id} in {table}")


# =============================================================================
# Storage
# =============================================================================


class Storage:
    """
    Table store with CRUD operations and equality filtering.

    Records are returned as deep copies, so callers never mutate stored
    state by accident. Each operation holds a single lock for its
    duration; concurrent writers are serialised per operation only.
    """

    def __init__(self, persist_path: Optional[str] = None):
        """
        Initialise storage.

        Args:
            persist_path: Optional path to persist data to a JSON file
        """
        self._tables: dict[str, dict[int, dict]] = {name: {} for name in TABLES}
        self._next_ids: dict[str, int] = {name: 1 for name in TABLES}
        self._lock = threading.RLock()
        self._persist_path = Path(persist_path) if persist_path else None

        if self._persist_path and self._persist_path.exists():
            self._load_from_file()

    # =========================================================================
    # Persistence
    # =========================================================================

    def _save_to_file(self) -> None:
        """Persist data to file."""
        if not self._persist_path:
            return

        data = {
            "tables": {
                name: list(records.values())
                for name, records in self._tables.items()
            },
            "next_ids": dict(self._next_ids),
            "saved_at": datetime.utcnow().isoformat(),
        }

        self._persist_path.parent.mkdir(parents=True, exist_ok=True)
        self._persist_path.write_text(json.dumps(data, indent=2, default=str))

    def _load_from_file(self) -> None:
        """Load data from file."""
        try:
            data = json.loads(self._persist_path.read_text())
            for name, records in data.get("tables", {}).items():
                if name not in self._tables:
                    continue
                self._tables[name] = {int(r["id"]): r for r in records}
            for name, next_id in data.get("next_ids", {}).items():
                if name in self._next_ids:
                    self._next_ids[name] = int(next_id)
        except (json.JSONDecodeError, KeyError, ValueError, TypeError) as e:
            # Start fresh rather than refusing to boot on a corrupt file
            logger.error("Could not load storage file %s: %s", self._persist_path, e)
            self._tables = {name: {} for name in TABLES}
            self._next_ids = {name: 1 for name in TABLES}

    def _table(self, table: str) -> dict[int, dict]:
        try:
            return self._tables[table]
        except KeyError:
            raise UnknownTableError(table) from None

    # =========================================================================
    # CRUD Operations
    # =========================================================================

    def find(self, table: str, filters: Optional[Mapping[str, Any]] = None) -> list[dict]:
        """
        Find records whose fields equal every given filter value.

        Filters with a None value are ignored. Results are ordered by id.

        Args:
            table: Table name
            filters: Field -> required value

        Returns:
            Matching records
        """
        active = {k: v for k, v in (filters or {}).items() if v is not None}
        with self._lock:
            records = self._table(table)
            return [
                copy.deepcopy(record)
                for _, record in sorted(records.items())
                if all(record.get(k) == v for k, v in active.items())
            ]

    def find_one(self, table: str, filters: Mapping[str, Any]) -> Optional[dict]:
        """First record matching the filters, or None."""
        matches = self.find(table, filters)
        return matches[0] if matches else None

    def find_by_id(self, table: str, record_id: int) -> Optional[dict]:
        """
        Get a record by id.

        Returns:
            Record if found, None otherwise
        """
        with self._lock:
            record = self._table(table).get(record_id)
            return copy.deepcopy(record) if record is not None else None

    def get(self, table: str, record_id: int) -> dict:
        """
        Get a record by id.

        Raises:
            RecordNotFoundError: if the record does not exist
        """
        record = self.find_by_id(table, record_id)
        if record is None:
            raise RecordNotFoundError(table, record_id)
        return record

    def create(self, table: str, data: Mapping[str, Any]) -> dict:
        """
        Insert a new record.

        Args:
            table: Table name
            data: Record fields (id/uuid/timestamps are assigned here)

        Returns:
            The stored record
        """
        with self._lock:
            records = self._table(table)
            record_id = self._next_ids[table]
            self._next_ids[table] = record_id + 1

            now = datetime.utcnow().isoformat()
            record = {k: v for k, v in copy.deepcopy(dict(data)).items() if k not in PROTECTED_FIELDS}
            record.update({
                "id": record_id,
                "uuid": str(uuid.uuid4()),
                "createdAt": now,
                "updatedAt": now,
            })
            records[record_id] = record

            self._save_to_file()
            logger.debug("Created %s/%d", table, record_id)
            return copy.deepcopy(record)

    def update(self, table: str, record_id: int, data: Mapping[str, Any]) -> dict:
        """
        Merge fields into an existing record.

        Raises:
            RecordNotFoundError: if the record does not exist
        """
        with self._lock:
            records = self._table(table)
            record = records.get(record_id)
            if record is None:
                raise RecordNotFoundError(table, record_id)

            changes = {k: v for k, v in copy.deepcopy(dict(data)).items() if k not in PROTECTED_FIELDS}
            updated = {**record, **changes, "updatedAt": datetime.utcnow().isoformat()}
            records[record_id] = updated

            self._save_to_file()
            return copy.deepcopy(updated)

    def remove(self, table: str, record_id: int) -> bool:
        """
        Delete a record.

        Returns:
            True if deleted, False if not found
        """
        with self._lock:
            records = self._table(table)
            if record_id not in records:
                return False
            del records[record_id]
            self._save_to_file()
            return True

    def remove_where(self, table: str, filters: Mapping[str, Any]) -> int:
        """Delete every record matching the filters; returns the count."""
        with self._lock:
            doomed = [r["id"] for r in self.find(table, filters)]
            for record_id in doomed:
                del self._table(table)[record_id]
            if doomed:
                self._save_to_file()
            return len(doomed)

    def count(self, table: str) -> int:
        with self._lock:
            return len(self._table(table))


# =============================================================================
# Shared instance
# =============================================================================

_storage: Optional[Storage] = None


def get_storage() -> Storage:
    """Get the process-wide storage instance."""
    global _storage
    if _storage is None:
        from utils.config import Config

        config = Config.load()
        _storage = Storage(persist_path=config.data_file or None)
    return _storage


def set_storage(storage: Optional[Storage]) -> None:
    """Replace the process-wide storage instance (None resets it)."""
    global _storage
    _storage = storage
