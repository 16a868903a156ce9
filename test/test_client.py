import requests
from pytest import raises

from todoist_sync import *


def test_add(sections: SectionClient, project_id: ID):
    section = Section.new("work", NewSectionOpts(parent_id=project_id))

    assert sections.add(section) is section

    # visible locally right away
    assert sections.get_all() == (section,)
    assert sections.resolve(section.id) is section

    command = sections.queue.pending[-1]
    assert command.type is CommandType.ADD
    assert command.args == section
    assert command.temp_id == section.id


def test_update(sections: SectionClient):
    section = sections.add(Section.new("work"))
    renamed = section.model_copy(update={"name": "home"})

    assert sections.update(renamed) is renamed

    # cache only updated once server response is applied
    assert sections.resolve(section.id).name == "work"

    command = sections.queue.pending[-1]
    assert command.type is CommandType.UPDATE
    assert command.args == renamed
    assert command.temp_id is None

    sections.apply([renamed])
    assert sections.resolve(section.id).name == "home"


def test_enqueue(sections: SectionClient, project_id: ID):
    section_id = ID("1")

    sections.move(section_id, project_id)
    sections.delete(section_id)
    sections.archive(section_id)
    sections.unarchive(section_id)

    # no cache effect
    assert sections.get_all() == ()

    wire = sections.queue.to_wire()
    assert [c["type"] for c in wire] == [
        "section_move",
        "section_delete",
        "section_archive",
        "section_unarchive",
    ]
    assert wire[0]["args"] == {"id": "1", "parent_id": "2203306141"}
    assert all(c["args"] == {"id": "1"} for c in wire[1:])
    assert all("temp_id" not in c for c in wire)


def test_reorder(sections: SectionClient):
    section1 = Section(id="1", name="a", section_order=2)
    section2 = Section(id="2", name="b", section_order=1)

    sections.reorder([section2, section1])

    assert len(sections.queue) == 1
    command = sections.queue.pending[0]
    assert command.type is CommandType.REORDER
    assert command.args.projects == (section2, section1)


def test_order(sections: SectionClient, project_id: ID):
    section = Section.new("work")

    sections.add(section)
    sections.move(section.id, project_id)
    sections.delete(section.id)

    assert [c.type for c in sections.queue] == [
        CommandType.ADD,
        CommandType.MOVE,
        CommandType.DELETE,
    ]

    # deletion deferred to response handling
    assert sections.resolve(section.id) is section

    sections.apply([section.model_copy(update={"is_deleted": True})])
    assert sections.get_all() == ()


def test_find_by_name(sections: SectionClient):
    work = sections.add(Section.new("work"))
    workshop = sections.add(Section.new("workshop"))
    sections.add(Section.new("Home"))

    assert sections.find_by_name("wor") == [work, workshop]
    assert sections.find_by_name("#wor") == sections.find_by_name("wor")
    assert sections.find_by_name("shop") == [workshop]

    # case-sensitive
    assert sections.find_by_name("home") == []
    assert sections.find_by_name("") == list(sections.get_all())


def test_find_one_by_name(sections: SectionClient):
    sections.add(Section.new("workshop"))
    work = sections.add(Section.new("work"))

    assert sections.find_one_by_name("work") is work
    assert sections.find_one_by_name("#work") is work
    assert sections.find_one_by_name("shop").name == "workshop"
    assert sections.find_one_by_name("garden") is None


def test_get(session: Session, sections: SectionClient, transport):
    transport.queue_json(
        {
            "section": {
                "id": "7025",
                "project_id": "2203306141",
                "name": "Groceries",
            }
        }
    )

    response = sections.get(ID("7025"))

    assert response.section.id == ID("7025")
    assert not response.section.id.is_temporary
    assert response.section.name == "Groceries"

    request, kwargs = transport.sent[0]
    assert request.method == "GET"
    assert request.url == f"{session.host}sections/get?section_id=7025"
    assert request.headers["Authorization"] == "Bearer test-token"
    assert kwargs["timeout"] == 10.0

    # cache bypassed
    assert sections.get_all() == ()


def test_get_capitalized(sections: SectionClient, transport):
    transport.queue_json({"Section": {"id": "1", "name": "work"}})

    assert sections.get(ID("1"), timeout=2.5).section.name == "work"
    assert transport.sent[0][1]["timeout"] == 2.5


def test_get_transport_error(sections: SectionClient, transport):
    transport.responses.append(requests.ConnectionError("refused"))

    with raises(TransportError):
        sections.get(ID("1"))

    transport.queue(b"", status_code=404)

    with raises(TransportError) as e:
        sections.get(ID("1"))

    assert e.value.status_code == 404


def test_get_decoding_error(sections: SectionClient, transport):
    transport.queue(b"not json")

    with raises(DecodingError):
        sections.get(ID("1"))

    # missing name
    transport.queue_json({"section": {"id": "1"}})

    with raises(DecodingError):
        sections.get(ID("1"))
