# src/repositories/deal_repository.py
"""
Deal persistence collaborators.

The engine never talks to storage; callers hand a DealRecord (inputs plus the
analysis payload) to a repository. Stored analyses are returned exactly as
saved: nothing here re-derives or patches projection rows on load.

Public API
----------
class DealRepository(Protocol):
    save(record) -> DealRecord
    find_by_id(deal_id) -> DealRecord | None
    find_all(property_type=None) -> list[DealRecord]   (most recently updated first)
    delete(deal_id) -> bool

InMemoryDealRepository()
JsonFileDealRepository(base_dir)
new_deal_id() -> str
"""

from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone
from hashlib import sha256 as _sha256lib
from pathlib import Path
from typing import Protocol

from pydantic import ValidationError

from src.schemas.models import DealRecord

logger = logging.getLogger(__name__)


def new_deal_id() -> str:
    return uuid.uuid4().hex


def _touch(record: DealRecord, existing: DealRecord | None) -> DealRecord:
    """Keep the original created_at on update; bump updated_at."""
    now = datetime.now(timezone.utc)
    created = existing.created_at if existing is not None else record.created_at
    return record.model_copy(update={"created_at": created, "updated_at": now})


def _sorted(records: list[DealRecord], property_type: str | None) -> list[DealRecord]:
    if property_type is not None:
        records = [r for r in records if r.property_type == property_type]
    return sorted(records, key=lambda r: r.updated_at, reverse=True)


class DealRepository(Protocol):
    def save(self, record: DealRecord) -> DealRecord: ...

    def find_by_id(self, deal_id: str) -> DealRecord | None: ...

    def find_all(self, property_type: str | None = None) -> list[DealRecord]: ...

    def delete(self, deal_id: str) -> bool: ...


class InMemoryDealRepository:
    """Process-local repository (tests, single CLI runs)."""

    def __init__(self) -> None:
        self._records: dict[str, DealRecord] = {}

    def save(self, record: DealRecord) -> DealRecord:
        stored = _touch(record, self._records.get(record.id))
        self._records[record.id] = stored
        return stored

    def find_by_id(self, deal_id: str) -> DealRecord | None:
        return self._records.get(deal_id)

    def find_all(self, property_type: str | None = None) -> list[DealRecord]:
        return _sorted(list(self._records.values()), property_type)

    def delete(self, deal_id: str) -> bool:
        return self._records.pop(deal_id, None) is not None


class JsonFileDealRepository:
    """
    One JSON document per deal under a stable on-disk layout:

        <base_dir>/<sha256(id)[:2]>/<id>.json

    Unreadable or invalid documents are skipped by find_all() (with a warning)
    and reported as missing by find_by_id().
    """

    def __init__(self, base_dir: str | Path) -> None:
        self.base_dir = Path(base_dir)
        self.base_dir.mkdir(parents=True, exist_ok=True)

    def _path(self, deal_id: str) -> Path:
        if not deal_id or any(c in deal_id for c in "/\\") or deal_id in {".", ".."}:
            raise ValueError(f"Invalid deal id: {deal_id!r}")
        shard = _sha256lib(deal_id.encode("utf-8")).hexdigest()[:2]
        return self.base_dir / shard / f"{deal_id}.json"

    def _load(self, path: Path) -> DealRecord | None:
        try:
            return DealRecord.model_validate_json(path.read_text(encoding="utf-8"))
        except ValidationError as e:
            logger.warning("skipping invalid deal document %s: %s", path, e)
            return None

    def save(self, record: DealRecord) -> DealRecord:
        path = self._path(record.id)
        existing = self._load(path) if path.exists() else None
        stored = _touch(record, existing)
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp = path.with_suffix(".json.tmp")
        tmp.write_text(stored.model_dump_json(indent=2), encoding="utf-8")
        tmp.replace(path)
        logger.debug("saved deal %s -> %s", record.id, path)
        return stored

    def find_by_id(self, deal_id: str) -> DealRecord | None:
        path = self._path(deal_id)
        if not path.exists():
            return None
        return self._load(path)

    def find_all(self, property_type: str | None = None) -> list[DealRecord]:
        records: list[DealRecord] = []
        for path in self.base_dir.glob("*/*.json"):
            rec = self._load(path)
            if rec is not None:
                records.append(rec)
        return _sorted(records, property_type)

    def delete(self, deal_id: str) -> bool:
        path = self._path(deal_id)
        if not path.exists():
            return False
        path.unlink()
        logger.debug("deleted deal %s", deal_id)
        return True
