from __future__ import annotations

from collections.abc import Iterable

from pydantic import AliasChoices, BaseModel, Field

from ..cache import Cache
from ..command import Command, CommandArgs, CommandQueue, CommandType
from ..command import IdArgs, MoveArgs, ReorderArgs
from ..entity import ID
from ..session import Session, SessionContainer, _get_params, decode_body
from ..utils import SECTION_MARKER
from .section import Section

__all__ = [
    "SectionClient",
    "SectionGetResponse",
]


class SectionGetResponse(BaseModel):
    """
    Response of `sections/get` endpoint.
    """

    section: Section = Field(
        validation_alias=AliasChoices("section", "Section")
    )


class SectionClient(SessionContainer):
    """
    Interface to create, modify and look up sections.

    Mutations never contact the server. An added section is visible in the
    cache immediately; every mutation is queued as a command to be
    transmitted later by a flush collaborator, which drains
    {obj}`SectionClient.queue`.
    """

    _entity_type: str = "section"

    _cache: Cache[Section]
    """
    Sections known locally.
    """

    _queue: CommandQueue
    """
    Commands pending transmission, owned exclusively by this client.
    """

    def __init__(self, session: Session):
        super().__init__(session)
        self._cache = Cache(session)
        self._queue = CommandQueue(session)

    @property
    def queue(self) -> CommandQueue:
        """
        Commands pending transmission.
        """
        return self._queue

    def add(self, section: Section) -> Section:
        """
        Store section in cache and queue its creation.

        :param section: Section created by {obj}`Section.new`
        """
        self._cache.store(section)
        self._enqueue(CommandType.ADD, section, temp_id=section.id)
        return section

    def update(self, section: Section) -> Section:
        """
        Queue an update of section. The cache is updated once the server's
        response is applied.
        """
        self._enqueue(CommandType.UPDATE, section)
        return section

    def move(self, section_id: ID, parent_id: ID):
        """
        Queue a move of section to a different project.
        """
        self._enqueue(
            CommandType.MOVE, MoveArgs(id=section_id, parent_id=parent_id)
        )

    def delete(self, section_id: ID):
        """
        Queue deletion of section. It remains cached until the server's
        response is applied.
        """
        self._enqueue(CommandType.DELETE, IdArgs(id=section_id))

    def archive(self, section_id: ID):
        self._enqueue(CommandType.ARCHIVE, IdArgs(id=section_id))

    def unarchive(self, section_id: ID):
        self._enqueue(CommandType.UNARCHIVE, IdArgs(id=section_id))

    def reorder(self, sections: Iterable[Section]):
        """
        Queue a single command to reorder all provided sections.
        """
        self._enqueue(
            CommandType.REORDER, ReorderArgs(projects=tuple(sections))
        )

    def get(
        self, section_id: ID, *, timeout: float | None = None
    ) -> SectionGetResponse:
        """
        Fetch section from the server, bypassing the cache.

        :param section_id: Id of section
        :param timeout: Timeout in seconds, or `None`{l=python} to use the session default

        :raises TransportError: If the request fails
        :raises DecodingError: If the response is malformed
        """
        request = self._session.new_request(
            "GET", "sections/get", _get_params(section_id=section_id)
        )
        response = self._session.send(request, timeout=timeout)
        return decode_body(response, SectionGetResponse)

    def get_all(self) -> tuple[Section, ...]:
        """
        Get snapshot of all cached sections.
        """
        return self._cache.get_all()

    def resolve(self, section_id: ID) -> Section | None:
        """
        Get cached section by id, or `None`{l=python} if it's not cached.
        """
        return self._cache.resolve(section_id)

    def find_by_name(self, substr: str) -> list[Section]:
        """
        Get cached sections whose name contains `substr`, case-sensitive. A
        leading `#` is ignored.
        """
        substr = substr.removeprefix(SECTION_MARKER)
        return [s for s in self.get_all() if substr in s.name]

    def find_one_by_name(self, substr: str) -> Section | None:
        """
        Get cached section whose name is `substr`, or else the first whose
        name contains it. A leading `#` is ignored for both the exact and
        substring match, so `#work` prefers `work` over `workshop`.
        """
        sections = self.find_by_name(substr)
        name = substr.removeprefix(SECTION_MARKER)

        for section in sections:
            if section.name == name:
                return section

        return sections[0] if len(sections) else None

    def apply(self, sections: Iterable[Section]):
        """
        Store sections received from the server, replacing cached ones and
        dropping those which were deleted.
        """
        for section in sections:
            self._cache.store(section)

    def _enqueue(
        self,
        command_type: CommandType,
        args: CommandArgs,
        temp_id: ID | None = None,
    ):
        self._queue.append(
            Command(
                entity_type=self._entity_type,
                type=command_type,
                args=args,
                temp_id=temp_id,
            )
        )
