import logging
import threading

from pytest import LogCaptureFixture

from todoist_sync import *
from todoist_sync.core.cache import Cache


def test_store(cache: Cache[Section]):
    section = Section.new("work")

    assert cache.store(section) is None
    assert cache.get_all() == (section,)
    assert cache.resolve(section.id) is section


def test_store_replace(cache: Cache[Section]):
    section1 = Section(id="1", name="work")
    section2 = section1.model_copy(update={"name": "home"})
    other = Section(id="2", name="other")

    cache.store(section1)
    cache.store(other)
    assert cache.store(section2) is section1

    assert len(cache) == 2
    assert cache.resolve(ID("1")).name == "home"

    # position is kept on replace
    assert cache.get_all() == (section2, other)

    # idempotent
    cache.store(section2)
    assert cache.get_all() == (section2, other)


def test_store_deleted(cache: Cache[Section]):
    section = Section(id="1", name="work")
    deleted = section.model_copy(update={"is_deleted": True})

    cache.store(section)
    assert cache.store(deleted) is section
    assert len(cache) == 0
    assert cache.resolve(section.id) is None

    # deleted entity not known to cache isn't added
    assert cache.store(Section(id="2", name="x", is_deleted=True)) is None
    assert len(cache) == 0


def test_remove(cache: Cache[Section]):
    section = Section(id="1", name="work")
    other = Section(id="2", name="other")

    cache.store(section)
    cache.store(other)

    assert cache.remove(section.model_copy(update={"name": "?"})) is section
    assert cache.get_all() == (other,)

    assert cache.remove(section) is None
    assert cache.get_all() == (other,)


def test_snapshot(cache: Cache[Section]):
    section = Section(id="1", name="work")
    cache.store(section)

    snapshot = cache.get_all()

    cache.store(Section(id="2", name="other"))
    cache.remove(section)

    # previous snapshot unaffected by mutations
    assert snapshot == (section,)
    assert len(cache.get_all()) == 1


def test_rekey(session: Session, cache: Cache[Section]):
    project_temp_id = ID.temporary()
    section = Section.new("work", NewSectionOpts(parent_id=project_temp_id))
    cache.store(section)

    session.ids.register(section.id, ID("100"))
    session.ids.register(project_temp_id, ID("200"))

    # resolvable by permanent id before re-keying
    assert cache.resolve(ID("100")) is section

    cache.rekey()

    rekeyed = cache.resolve(ID("100"))
    assert rekeyed is not None
    assert not rekeyed.id.is_temporary
    assert not rekeyed.project_id.is_temporary
    assert rekeyed.project_id == ID("200")
    assert rekeyed.name == "work"

    # server echo with permanent id replaces the entry
    cache.store(Section(id="100", name="work (renamed)", project_id="200"))
    assert len(cache) == 1
    assert cache.get_all()[0].name == "work (renamed)"


def test_store_mapped(session: Session, cache: Cache[Section]):
    section = Section.new("work")
    cache.store(section)

    session.ids.register(section.id, ID("100"))

    # server record matches the temporary entry without re-keying
    assert cache.store(Section(id="100", name="work")) is section
    assert len(cache) == 1


def test_clear(cache: Cache[Section]):
    cache.store(Section.new("work"))
    cache.clear()
    assert cache.get_all() == ()


def test_logging(cache: Cache[Section], caplog: LogCaptureFixture):
    caplog.set_level(logging.DEBUG)
    section = Section(id="1", name="work")

    cache.store(section)
    cache.store(section)
    cache.store(section.model_copy(update={"is_deleted": True}))

    assert "Added to cache: id=1, type=Section" in caplog.text
    assert "Replaced in cache: id=1" in caplog.text
    assert "Dropped from cache: id=1" in caplog.text


def test_concurrent_store(cache: Cache[Section]):
    thread_count, per_thread = 8, 50

    first = Section(id="first", name="first")
    cache.store(first)
    snapshot = cache.get_all()

    barrier = threading.Barrier(thread_count)

    def store(thread_index: int):
        barrier.wait()
        for i in range(per_thread):
            cache.store(Section(id=f"{thread_index}-{i}", name=f"s{i}"))

    threads = [
        threading.Thread(target=store, args=(t,)) for t in range(thread_count)
    ]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    # no store lost to a concurrent writer
    assert len(cache) == thread_count * per_thread + 1
    assert len({e.id for e in cache.get_all()}) == len(cache)

    # snapshot taken beforehand unaffected
    assert snapshot == (first,)
