"""
Data-shape migrations and load-time sanitation.

Stored lists are raw JSON written by older versions of the app.
Two passes bring them up to date before they are validated:

1. Versioned migrations, each run exactly once. The store records
   the last version applied under the schema version key.
2. Id sanitation, run on every load. It is idempotent: a clean
   list comes back unchanged.
"""

from typing import Any, Callable

from savings_tracker.logs import get_logger
from savings_tracker.models.entities import generate_id

logger = get_logger(__name__)

RawRecord = dict[str, Any]
RawCollections = dict[str, list[Any]]

GOALS = "goals"
PAYMENTS = "payments"
WISHLIST = "wishlist"
COLLECTION_NAMES = (GOALS, PAYMENTS, WISHLIST)


# =============================================================================
# VERSIONED MIGRATIONS
# =============================================================================

def migrate_paid_flag(payments: list[Any]) -> list[Any]:
    """
    v1: payments used to carry a boolean isPaid instead of a paid amount.

    paidAmount = amount if isPaid else (paidAmount or 0)
    """
    migrated = []
    for record in payments:
        if not isinstance(record, dict):
            migrated.append(record)
            continue
        record = dict(record)
        is_paid = record.pop("isPaid", None)
        if is_paid:
            record["paidAmount"] = record.get("amount", 0)
        elif record.get("paidAmount") is None:
            record["paidAmount"] = 0
        migrated.append(record)
    return migrated


# version -> (collection it applies to, step)
MIGRATIONS: dict[int, tuple[str, Callable[[list[Any]], list[Any]]]] = {
    1: (PAYMENTS, migrate_paid_flag),
}

CURRENT_SCHEMA_VERSION = max(MIGRATIONS)


def run_migrations(collections: RawCollections, from_version: int) -> tuple[RawCollections, int]:
    """
    Apply every migration newer than from_version, in order.

    Returns:
        (migrated_collections, new_version)
    """
    result = dict(collections)
    version = from_version
    for target_version in sorted(MIGRATIONS):
        if target_version <= from_version:
            continue
        name, step = MIGRATIONS[target_version]
        result[name] = step(result.get(name, []))
        version = target_version
        logger.info(
            "data_migrated",
            collection=name,
            migration=step.__name__,
            schema_version=target_version,
            records=len(result[name]),
        )
    return result, version


# =============================================================================
# ID SANITATION
# =============================================================================

def sanitize_ids(
    records: list[Any],
    id_factory: Callable[[], str] = generate_id,
) -> tuple[list[Any], int]:
    """
    Give a fresh id to every record whose id is blank, missing, or a
    duplicate of an earlier record's id. Ids are compared as the models
    load them, with surrounding whitespace stripped; a padded id that is
    still unique is stored stripped. The first holder of an id keeps it.

    Returns:
        (sanitized_records, number_of_ids_repaired)
    """
    seen: set[str] = set()
    repaired = 0
    result = []
    for record in records:
        if not isinstance(record, dict):
            result.append(record)
            continue
        record_id = record.get("id")
        clean_id = record_id.strip() if isinstance(record_id, str) else ""
        if not clean_id or clean_id in seen:
            record = {**record, "id": id_factory()}
            repaired += 1
        elif clean_id != record_id:
            record = {**record, "id": clean_id}
            repaired += 1
        seen.add(record["id"])
        result.append(record)
    return result, repaired
