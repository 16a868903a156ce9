from __future__ import annotations

from typing import Any, Self

from pydantic import BaseModel, ConfigDict

from .types import ID, IdMapping

__all__ = [
    "BaseEntity",
]


class BaseEntity(BaseModel):
    """
    Base class for Todoist entities.

    Entities are immutable; to change one, create a copy using
    {obj}`BaseModel.model_copy` and submit it through the owning client.

    Should not be instantiated by user, but published for reference.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: ID
    """
    Temporary or permanent id.
    """

    is_deleted: bool = False
    """
    Soft-delete flag; a deleted entity is dropped from the cache when stored.
    """

    is_archived: bool = False

    def equal(self, other: BaseEntity, ids: IdMapping | None = None) -> bool:
        """
        Whether this entity and `other` denote the same remote entity,
        irrespective of other field values.

        :param other: Entity to compare
        :param ids: Mapping used to resolve temporary ids, or `None`{l=python} to compare ids directly
        """
        if ids is None:
            return self.id == other.id
        return ids.equal(self.id, other.id)

    def rekey(self, ids: IdMapping) -> Self:
        """
        Get a copy of this entity with every id field replaced by its
        permanent form, or this entity if none changed.
        """
        update: dict[str, ID] = {}

        for field in type(self).model_fields:
            value = getattr(self, field)
            if isinstance(value, ID):
                resolved = ids.resolve(value)
                if resolved is not value:
                    update[field] = resolved

        return self.model_copy(update=update) if update else self

    def to_wire(self) -> dict[str, Any]:
        """
        Get JSON-compatible representation as sent to the server, omitting
        unset optional fields.
        """
        return self.model_dump(mode="json", exclude_none=True)
