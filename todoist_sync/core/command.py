"""
Implements commands and the queue of commands pending transmission.
"""

from __future__ import annotations

import threading
from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict
from rich.markup import escape

from .entity import ID, BaseEntity
from .session import SessionContainer
from .utils import generate_uuid

if TYPE_CHECKING:
    from .session import Session

__all__ = [
    "CommandType",
    "Command",
    "CommandQueue",
    "MoveArgs",
    "IdArgs",
    "ReorderArgs",
]


class CommandType(Enum):
    """
    Type of mutation requested by a command.
    """

    ADD = "add"
    UPDATE = "update"
    MOVE = "move"
    DELETE = "delete"
    ARCHIVE = "archive"
    UNARCHIVE = "unarchive"
    REORDER = "reorder"

    def __str__(self) -> str:
        color_map = {
            CommandType.ADD: "bright_green",
            CommandType.UPDATE: "bright_yellow",
            CommandType.MOVE: "cyan",
            CommandType.DELETE: "red",
            CommandType.ARCHIVE: "magenta",
            CommandType.UNARCHIVE: "magenta",
            CommandType.REORDER: "blue",
        }

        start = escape("[")
        end = escape("]")
        return f"{start}[{color_map[self]}]{self.name}[/{color_map[self]}]{end}"


class MoveArgs(BaseModel):
    """
    Arguments of a move command.
    """

    model_config = ConfigDict(frozen=True)

    id: ID
    parent_id: ID


class IdArgs(BaseModel):
    """
    Arguments of a command which only references an entity, e.g. delete.
    """

    model_config = ConfigDict(frozen=True)

    id: ID


class ReorderArgs(BaseModel):
    """
    Arguments of a reorder command, holding entities in their new order.
    """

    model_config = ConfigDict(frozen=True)

    projects: tuple[BaseEntity, ...]


type CommandArgs = BaseEntity | MoveArgs | IdArgs | ReorderArgs

ARGS_TYPES: dict[CommandType, type[BaseModel]] = {
    CommandType.ADD: BaseEntity,
    CommandType.UPDATE: BaseEntity,
    CommandType.MOVE: MoveArgs,
    CommandType.DELETE: IdArgs,
    CommandType.ARCHIVE: IdArgs,
    CommandType.UNARCHIVE: IdArgs,
    CommandType.REORDER: ReorderArgs,
}
"""
Mapping of command type to type of its arguments.
"""


@dataclass(frozen=True)
class Command:
    """
    Recorded intent to mutate an entity on the server, transmitted later as
    part of a batch.
    """

    entity_type: str
    """Name of entity type, e.g. `section`"""

    type: CommandType

    args: CommandArgs

    uuid: str = field(default_factory=generate_uuid)
    """Unique token used by the server to suppress duplicate submissions"""

    temp_id: ID | None = None
    """Temporary id of the entity being added, only set for add commands"""

    def __post_init__(self):
        args_type = ARGS_TYPES[self.type]
        if not isinstance(self.args, args_type):
            raise ValueError(
                f"Command {self.name} requires args of type {args_type.__name__}, got {type(self.args).__name__}"
            )

        if self.type is CommandType.ADD:
            if self.temp_id is None:
                raise ValueError(f"Command {self.name} requires temp_id")
        elif self.temp_id is not None:
            raise ValueError(f"Command {self.name} doesn't accept temp_id")

    def __str__(self) -> str:
        return f"Command({self.name}, uuid={self.uuid})"

    @property
    def name(self) -> str:
        """
        Command name as sent to the server, e.g. `section_add`.
        """
        return f"{self.entity_type}_{self.type.value}"

    def to_wire(self) -> dict[str, Any]:
        """
        Get JSON-compatible representation as sent to the server.
        """
        wire: dict[str, Any] = {
            "type": self.name,
            "uuid": self.uuid,
        }

        if self.temp_id is not None:
            wire["temp_id"] = str(self.temp_id)

        wire["args"] = self.args.model_dump(
            mode="json", exclude_none=True, serialize_as_any=True
        )

        return wire


class CommandQueue(SessionContainer):
    """
    Ordered list of commands pending transmission. Commands are kept in the
    order they were appended, since later commands may depend on an
    earlier one being accepted.
    """

    _commands: list[Command]
    _lock: threading.Lock

    def __init__(self, session: Session):
        super().__init__(session)
        self._commands = list()
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._commands)

    def __iter__(self) -> Iterator[Command]:
        return iter(self.pending)

    @property
    def pending(self) -> tuple[Command, ...]:
        """
        Snapshot of pending commands in order.
        """
        with self._lock:
            return tuple(self._commands)

    def append(self, command: Command):
        """
        Add command to end of queue.
        """
        with self._lock:
            self._commands.append(command)

        self._session._logger.debug(f"Enqueued: {command}")

    def drain(self) -> tuple[Command, ...]:
        """
        Take all pending commands in order, leaving the queue empty. Invoked
        by the flush collaborator when transmitting a batch.
        """
        with self._lock:
            commands = tuple(self._commands)
            self._commands = list()

        if len(commands):
            self._session._logger.debug(
                f"Drained {len(commands)} commands: {_get_summary(commands)}"
            )

        return commands

    def to_wire(self) -> list[dict[str, Any]]:
        """
        Get JSON-compatible representation of pending commands.
        """
        return [command.to_wire() for command in self.pending]

    @property
    def summary(self) -> str:
        """
        Brief summary of how many commands of each type are pending, using
        rich markup.
        """
        return _get_summary(self.pending)


def _get_summary(commands: tuple[Command, ...]) -> str:
    counts = {command_type: 0 for command_type in CommandType}

    for command in commands:
        counts[command.type] += 1

    return ", ".join(
        f"{count} {command_type}"
        for command_type, count in counts.items()
        if count
    )
