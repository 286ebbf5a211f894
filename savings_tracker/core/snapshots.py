"""
Copy-on-write helpers for entity collections.

Every function returns a new list and leaves its input untouched.
Entities are frozen, so sharing them between the old and the new
list is safe.
"""

from typing import Iterable, Optional, Sequence, TypeVar

from savings_tracker.models.entities import Entity

E = TypeVar("E", bound=Entity)


def find_by_id(items: Iterable[E], entity_id: str) -> Optional[E]:
    return next((item for item in items if item.id == entity_id), None)


def replace_by_id(items: Sequence[E], entity_id: str, *replacements: E) -> list[E]:
    """
    Replace the entity with entity_id by zero or more entities, in place.

    Unknown ids leave the order and contents unchanged.
    """
    result: list[E] = []
    for item in items:
        if item.id == entity_id:
            result.extend(replacements)
        else:
            result.append(item)
    return result


def remove_by_id(items: Sequence[E], entity_id: str) -> list[E]:
    return [item for item in items if item.id != entity_id]


def prepend(items: Sequence[E], item: E) -> list[E]:
    """New entities go first, matching the newest-first lists."""
    return [item, *items]
