from __future__ import annotations

import threading
from typing import Any

from pydantic import GetCoreSchemaHandler
from pydantic_core import core_schema

from ..utils import generate_temp_id

__all__ = [
    "ID",
    "IdMapping",
]


class ID:
    """
    Identifier of a Todoist entity, either a temporary id generated locally
    before the server acknowledges the entity's creation or a permanent id
    issued by the server.

    The string form is the bare value regardless of which form it is. On the
    wire an id is just its value; ids decoded from server data are always
    permanent.
    """

    __slots__ = ("_value", "_is_temporary")

    _value: str
    _is_temporary: bool

    def __init__(self, value: str | int, *, is_temporary: bool = False):
        """
        :param value: Id value as received from the server or generated locally
        :param is_temporary: Whether this is a locally generated temporary id
        """
        value_str = str(value)
        assert len(value_str), "Id value must be non-empty"

        self._value = value_str
        self._is_temporary = is_temporary

    @classmethod
    def temporary(cls) -> ID:
        """
        Generate a new temporary id.
        """
        return cls(generate_temp_id(), is_temporary=True)

    @property
    def value(self) -> str:
        return self._value

    @property
    def is_temporary(self) -> bool:
        """
        Whether this id was generated locally and not yet confirmed by the
        server.
        """
        return self._is_temporary

    def __str__(self) -> str:
        return self._value

    def __repr__(self) -> str:
        form = "temporary" if self._is_temporary else "permanent"
        return f"ID('{self._value}', {form})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ID):
            return NotImplemented
        return self._value == other._value

    def __hash__(self) -> int:
        return hash(self._value)

    @classmethod
    def __get_pydantic_core_schema__(
        cls, source: Any, handler: GetCoreSchemaHandler
    ) -> core_schema.CoreSchema:
        return core_schema.no_info_plain_validator_function(
            cls._validate,
            serialization=core_schema.plain_serializer_function_ser_schema(
                str
            ),
        )

    @classmethod
    def _validate(cls, value: Any) -> ID:
        if isinstance(value, ID):
            return value

        # bool is a subclass of int but never a valid id
        if isinstance(value, (str, int)) and not isinstance(value, bool):
            if value == "":
                raise ValueError("id must be non-empty")
            return cls(value)

        raise ValueError(f"invalid id: {value!r}")


class IdMapping:
    """
    Mapping of temporary ids to the permanent ids the server assigned to
    them. Populated by the flush collaborator as creation commands are
    acknowledged.
    """

    _map: dict[str, ID]
    _lock: threading.Lock

    def __init__(self):
        self._map = dict()
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._map)

    def __contains__(self, id_: ID) -> bool:
        return id_.value in self._map

    def register(self, temp_id: ID, permanent_id: ID):
        """
        Record that the server assigned `permanent_id` to the entity created
        with `temp_id`.
        """
        if not temp_id.is_temporary:
            raise ValueError(f"Not a temporary id: {temp_id!r}")
        if permanent_id.is_temporary:
            raise ValueError(f"Not a permanent id: {permanent_id!r}")

        with self._lock:
            # copy so a concurrent resolve() sees either the old or new map
            mapping = dict(self._map)
            mapping[temp_id.value] = permanent_id
            self._map = mapping

    def resolve(self, id_: ID) -> ID:
        """
        Get the permanent form of the provided id if it's known, otherwise
        the id itself.
        """
        if not id_.is_temporary:
            return id_
        return self._map.get(id_.value, id_)

    def equal(self, id1: ID, id2: ID) -> bool:
        """
        Whether the ids denote the same logical entity.
        """
        return id1 == id2 or self.resolve(id1) == self.resolve(id2)
