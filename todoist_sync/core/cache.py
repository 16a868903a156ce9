"""
Implements a local cache of Todoist entities.
"""

from __future__ import annotations

import threading
from typing import TYPE_CHECKING

from .entity import ID, BaseEntity
from .session import SessionContainer

if TYPE_CHECKING:
    from .session import Session


class Cache[EntityT: BaseEntity](SessionContainer):
    """
    Copy-on-write collection of entities, serving as the client's read-side
    view of the server's state.

    Each mutation builds a new tuple and swaps it in with a single
    assignment, so readers never observe a partially updated collection.
    Writers are serialized by a lock since the scan-then-swap sequence isn't
    atomic.
    """

    _entities: tuple[EntityT, ...]
    """Current snapshot of entities"""

    _lock: threading.Lock

    def __init__(self, session: Session):
        super().__init__(session)
        self._entities = tuple()
        self._lock = threading.Lock()

    def __str__(self):
        return f"Cache: entities={[str(e) for e in self._entities]}"

    def __len__(self) -> int:
        return len(self._entities)

    def get_all(self) -> tuple[EntityT, ...]:
        """
        Get a snapshot of all entities at the time of the call.
        """
        return self._entities

    def resolve(self, entity_id: ID) -> EntityT | None:
        """
        Get the entity with the provided id, or `None`{l=python} if it's not
        cached.
        """
        ids = self._session.ids
        for entity in self._entities:
            if ids.equal(entity.id, entity_id):
                return entity
        return None

    def store(self, entity: EntityT) -> EntityT | None:
        """
        Replace the cached entity having the same identity as the provided
        one, or add it if there isn't one. A deleted entity is dropped
        rather than stored.

        :returns: Entity previously cached with this identity, if any
        """
        ids = self._session.ids
        entities: list[EntityT] = []
        previous: EntityT | None = None

        with self._lock:
            for cached in self._entities:
                if cached.equal(entity, ids):
                    if previous is None:
                        previous = cached
                        if not entity.is_deleted:
                            entities.append(entity)
                else:
                    entities.append(cached)

            if previous is None and not entity.is_deleted:
                entities.append(entity)

            self._entities = tuple(entities)

        if entity.is_deleted:
            if previous is not None:
                self._session._logger.debug(
                    f"Dropped from cache: id={entity.id}, type={type(entity).__name__}"
                )
        elif previous is None:
            self._session._logger.debug(
                f"Added to cache: id={entity.id}, type={type(entity).__name__}"
            )
        else:
            self._session._logger.debug(
                f"Replaced in cache: id={entity.id}, type={type(entity).__name__}"
            )

        return previous

    def remove(self, entity: EntityT) -> EntityT | None:
        """
        Purge the entity having the same identity as the provided one.

        :returns: Entity removed, if any
        """
        ids = self._session.ids
        removed: EntityT | None = None

        with self._lock:
            entities: list[EntityT] = []
            for cached in self._entities:
                if cached.equal(entity, ids):
                    removed = cached
                else:
                    entities.append(cached)
            self._entities = tuple(entities)

        if removed is not None:
            self._session._logger.debug(
                f"Removed from cache: id={entity.id}, type={type(entity).__name__}"
            )

        return removed

    def rekey(self):
        """
        Replace temporary ids of cached entities with their permanent ids
        where the session has learned them.
        """
        ids = self._session.ids
        with self._lock:
            self._entities = tuple(e.rekey(ids) for e in self._entities)

    def clear(self):
        with self._lock:
            self._entities = tuple()
