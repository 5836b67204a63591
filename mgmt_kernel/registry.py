"""
Registry -- Append-only, ordered in-memory collection per entity kind.

Responsibility:
    Holds the entities created during one interactive session and enforces
    uniqueness of their identifying keys.

Invariants enforced:
    - Insertion order is preserved; there is no removal operation.
    - ``add`` scans every unique key before inserting, so a rejected entity
      is never partially registered.

Failure modes:
    - ``add`` raises ``DuplicateEntityError`` on a taken key.
    - ``get`` raises ``InvalidSelectionError`` for positions outside 1..len.

Scale:
    One interactive user, a few dozen entities.  Lookups are linear scans.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Generic, Iterator, TypeVar

from mgmt_kernel.exceptions import DuplicateEntityError, InvalidSelectionError
from mgmt_kernel.logging_config import get_logger

logger = get_logger("registry")

T = TypeVar("T")


@dataclass(frozen=True)
class UniqueKey(Generic[T]):
    """A named key function whose values must be unique across the registry."""
    name: str
    key: Callable[[T], str]
    case_insensitive: bool = True

    def normalize(self, value: str) -> str:
        return value.strip().casefold() if self.case_insensitive else value.strip()


class Registry(Generic[T]):
    """
    Ordered collection of one entity kind.

    Contract:
        ``add`` is the only mutation.  ``find_by``/``filter`` return views in
        insertion order.
    """

    def __init__(self, entity_kind: str, unique_keys: tuple[UniqueKey[T], ...] = ()):
        self.entity_kind = entity_kind
        self._unique_keys = unique_keys
        self._items: list[T] = []

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[T]:
        return iter(list(self._items))

    def is_empty(self) -> bool:
        return not self._items

    def all(self) -> list[T]:
        return list(self._items)

    def is_taken(self, key_name: str, value: str) -> bool:
        """True when ``value`` is already used for the named unique key."""
        unique = self._key(key_name)
        wanted = unique.normalize(value)
        return any(unique.normalize(unique.key(item)) == wanted for item in self._items)

    def check_unique(self, entity: T) -> None:
        for unique in self._unique_keys:
            value = unique.key(entity)
            if self.is_taken(unique.name, value):
                logger.info(
                    "registry_duplicate_rejected",
                    extra={
                        "entity_kind": self.entity_kind,
                        "key_name": unique.name,
                        "key_value": value,
                    },
                )
                raise DuplicateEntityError(self.entity_kind, unique.name, value)

    def add(self, entity: T) -> T:
        self.check_unique(entity)
        self._items.append(entity)
        logger.debug(
            "registry_entity_added",
            extra={"entity_kind": self.entity_kind, "size": len(self._items)},
        )
        return entity

    def find_by(self, key_name: str, value: str) -> T | None:
        unique = self._key(key_name)
        wanted = unique.normalize(value)
        for item in self._items:
            if unique.normalize(unique.key(item)) == wanted:
                return item
        return None

    def filter(self, predicate: Callable[[T], bool]) -> list[T]:
        return [item for item in self._items if predicate(item)]

    def get(self, position: int, what: str | None = None) -> T:
        """Return the entity at a 1-based menu position."""
        if position < 1 or position > len(self._items):
            raise InvalidSelectionError(what or self.entity_kind, position, len(self._items))
        return self._items[position - 1]

    def _key(self, key_name: str) -> UniqueKey[T]:
        for unique in self._unique_keys:
            if unique.name == key_name:
                return unique
        raise KeyError(f"{self.entity_kind} registry has no unique key {key_name!r}")
