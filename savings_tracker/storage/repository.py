"""
Tracker Repository

Reads and writes the three entity collections through a key-value
store. Each collection is one JSON list under one key and is always
written in full.

Loading never fails: a missing, unreadable or malformed list is
logged and treated as empty, and individual records that do not
validate are logged and skipped. Before validation the raw lists go
through the versioned migrations and the id sanitation pass.
"""

import json
from typing import Any, Callable, Sequence, TypeVar

from pydantic import BaseModel, Field, ValidationError

from savings_tracker.config import get_settings
from savings_tracker.logs import get_logger
from savings_tracker.models.entities import (
    EntityModel,
    Payment,
    SavingsGoal,
    WishlistItem,
    generate_id,
)
from savings_tracker.storage.interface import (
    KeyValueStoreInterface,
    StorageReadError,
    StorageWriteError,
)
from savings_tracker.storage.migrations import (
    COLLECTION_NAMES,
    CURRENT_SCHEMA_VERSION,
    GOALS,
    PAYMENTS,
    WISHLIST,
    run_migrations,
    sanitize_ids,
)

logger = get_logger(__name__)

M = TypeVar("M", bound=EntityModel)

MODELS: dict[str, type[EntityModel]] = {
    GOALS: SavingsGoal,
    PAYMENTS: Payment,
    WISHLIST: WishlistItem,
}


class TrackerSnapshot(BaseModel):
    """Everything the tracker keeps, as loaded from the store."""

    goals: list[SavingsGoal] = Field(default_factory=list)
    payments: list[Payment] = Field(default_factory=list)
    wishlist: list[WishlistItem] = Field(default_factory=list)


class TrackerRepository:
    """
    Loads and saves entity collections.

    Only full lists are written; there are no partial updates.
    """

    def __init__(
        self,
        store: KeyValueStoreInterface,
        id_factory: Callable[[], str] = generate_id,
    ):
        settings = get_settings().storage
        self._store = store
        self._id_factory = id_factory
        self._keys = {
            GOALS: settings.goals_key,
            PAYMENTS: settings.payments_key,
            WISHLIST: settings.wishlist_key,
        }
        self._version_key = settings.schema_version_key

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def load(self) -> TrackerSnapshot:
        """
        Load all collections, upgrading and repairing them on the way.

        Collections changed by a migration or by id repair are written
        back immediately, so the work happens only once.
        """
        raw = {name: self._read_list(name) for name in COLLECTION_NAMES}
        changed: set[str] = set()

        version = self._read_version()
        if version < CURRENT_SCHEMA_VERSION:
            migrated, version = run_migrations(raw, version)
            changed.update(name for name in COLLECTION_NAMES if migrated[name] != raw[name])
            raw = migrated

        for name in COLLECTION_NAMES:
            raw[name], repaired = sanitize_ids(raw[name], self._id_factory)
            if repaired:
                logger.warning("ids_repaired", collection=name, repaired=repaired)
                changed.add(name)

        snapshot = TrackerSnapshot(
            goals=self._validate(GOALS, raw[GOALS]),
            payments=self._validate(PAYMENTS, raw[PAYMENTS]),
            wishlist=self._validate(WISHLIST, raw[WISHLIST]),
        )

        try:
            for name in sorted(changed):
                self._write_list(name, getattr(snapshot, name))
            if self._read_version() != version:
                self._store.set(self._version_key, str(version))
        except StorageWriteError as e:
            # Version stays behind so the upgrade is retried on the next load
            logger.error("storage_write_failed", stage="load_write_back", error=str(e))

        logger.info(
            "tracker_loaded",
            goals=len(snapshot.goals),
            payments=len(snapshot.payments),
            wishlist=len(snapshot.wishlist),
            schema_version=version,
        )
        return snapshot

    def _read_list(self, name: str) -> list[Any]:
        key = self._keys[name]
        try:
            text = self._store.get(key)
        except StorageReadError as e:
            logger.error("storage_read_failed", key=key, error=str(e))
            return []
        if text is None:
            return []
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            logger.error("storage_data_malformed", key=key, error=str(e))
            return []
        if not isinstance(data, list):
            logger.error("storage_data_malformed", key=key, error=f"expected a list, got {type(data).__name__}")
            return []
        return data

    def _read_version(self) -> int:
        try:
            text = self._store.get(self._version_key)
        except StorageReadError as e:
            logger.error("storage_read_failed", key=self._version_key, error=str(e))
            return 0
        if text is None:
            return 0
        try:
            return int(text.strip())
        except ValueError:
            logger.error("storage_data_malformed", key=self._version_key, error=f"not a version: {text!r}")
            return 0

    def _validate(self, name: str, records: list[Any]) -> list[Any]:
        model = MODELS[name]
        valid = []
        for position, record in enumerate(records):
            try:
                valid.append(model.model_validate(record))
            except ValidationError as e:
                logger.warning(
                    "stored_record_skipped",
                    collection=name,
                    position=position,
                    errors=e.error_count(),
                    detail=str(e),
                )
        return valid

    # ------------------------------------------------------------------
    # Saving
    # ------------------------------------------------------------------

    def save_goals(self, goals: Sequence[SavingsGoal]) -> None:
        self._write_list(GOALS, goals)

    def save_payments(self, payments: Sequence[Payment]) -> None:
        self._write_list(PAYMENTS, payments)

    def save_wishlist(self, wishlist: Sequence[WishlistItem]) -> None:
        self._write_list(WISHLIST, wishlist)

    def _write_list(self, name: str, items: Sequence[EntityModel]) -> None:
        payload = [
            item.model_dump(mode="json", by_alias=True, exclude_none=True)
            for item in items
        ]
        self._store.set(self._keys[name], json.dumps(payload, ensure_ascii=False))
        logger.debug("collection_saved", key=self._keys[name], records=len(payload))
