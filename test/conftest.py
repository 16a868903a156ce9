import json
import logging
from typing import Any, Generator

import requests
from pytest import MonkeyPatch, fixture

from todoist_sync import ID, Section, SectionClient, Session
from todoist_sync.core.cache import Cache

logging.basicConfig(level=logging.WARNING)

HOST = "https://todoist.test/sync/v9/"
TOKEN = "test-token"


class FakeTransport:
    """
    Stands in for the HTTP session's send(), returning queued responses and
    recording requests.
    """

    responses: list[requests.Response | Exception]
    sent: list[tuple[requests.PreparedRequest, dict[str, Any]]]

    def __init__(self):
        self.responses = []
        self.sent = []

    def send(self, request: requests.PreparedRequest, **kwargs):
        self.sent.append((request, kwargs))

        assert len(self.responses), f"No response queued for {request.url}"
        response = self.responses.pop(0)

        if isinstance(response, Exception):
            raise response
        return response

    def queue_json(self, body: Any, status_code: int = 200):
        self.queue(json.dumps(body).encode(), status_code=status_code)

    def queue(self, content: bytes, status_code: int = 200):
        self.responses.append(make_response(content, status_code))


@fixture
def session() -> Generator[Session, None, None]:
    """
    Create a new Session; no requests are made unless a test sends one.
    """
    session = Session(TOKEN, HOST)
    yield session
    session._http.close()


@fixture
def sections(session: Session) -> SectionClient:
    return session.sections


@fixture
def cache(session: Session) -> Cache[Section]:
    return Cache(session)


@fixture
def transport(session: Session, monkeypatch: MonkeyPatch) -> FakeTransport:
    transport = FakeTransport()
    monkeypatch.setattr(session._http, "send", transport.send)
    return transport


@fixture
def project_id() -> ID:
    return ID("2203306141")


def make_response(content: bytes, status_code: int = 200) -> requests.Response:
    response = requests.Response()
    response.status_code = status_code
    response._content = content
    response.url = HOST
    return response

