from __future__ import annotations

from dataclasses import dataclass

from pydantic import Field

from ..entity import ID, BaseEntity
from ..exceptions import _assert_validate
from ..utils import SECTION_MARKER

__all__ = [
    "Section",
    "NewSectionOpts",
]


@dataclass(frozen=True)
class NewSectionOpts:
    """
    Options for creating a new {obj}`Section`.
    """

    parent_id: ID | None = None
    """
    Id of the project containing the section, or `None`{l=python} for no
    parent.
    """


class Section(BaseEntity):
    """
    Encapsulates a section, which groups tasks within a project.

    Create a new section with {obj}`Section.new` and submit it with
    {obj}`SectionClient.add`.
    """

    name: str = Field(min_length=1)

    project_id: ID | None = None
    """
    Id of the parent project, or `None`{l=python} if unset.
    """

    section_order: int | None = None
    collapsed: bool | None = None
    date_added: str | None = None

    def __str__(self) -> str:
        return f"{SECTION_MARKER}{self.name}"

    @classmethod
    def new(cls, name: str, opts: NewSectionOpts | None = None) -> Section:
        """
        Create a section with a freshly generated temporary id. Has no
        effect on any cache or queue.

        :param name: Section name, must be non-empty
        :param opts: Options, or `None`{l=python} to use defaults

        :raises ValidationError: If `name` is empty
        """
        _assert_validate(len(name) > 0, "name required")

        opts = opts or NewSectionOpts()
        return cls(id=ID.temporary(), name=name, project_id=opts.parent_id)
