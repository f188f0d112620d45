"""Shared fixtures: fake HTTP session, controllable clock, seeded store."""

import json
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Any, Optional
from urllib.parse import urlsplit

import pytest
import requests

from babytracker.models import Baby, UserProfile
from babytracker.services import (
    ApiClient,
    BabyTrackerStore,
    EventBus,
    IdentityStore,
    StoreState,
    SyncOutbox,
)

API = "http://api.test"
NOW = datetime(2024, 3, 10, 12, 0, 0)


def make_response(status: int, payload: Any = None, url: str = API) -> requests.Response:
    resp = requests.Response()
    resp.status_code = status
    resp._content = json.dumps(payload).encode("utf-8")
    resp.encoding = "utf-8"
    resp.headers["Content-Type"] = "application/json"
    resp.url = url
    return resp


@dataclass
class Call:
    method: str
    path: str
    json: Optional[dict]
    params: Optional[dict]
    headers: Optional[dict]


class FakeSession:
    """Stands in for ``requests.Session``; answers from registered routes.

    A route registered several times answers in order, the last answer
    repeating once the others are used up.
    """

    def __init__(self):
        self.calls: list[Call] = []
        self._routes: dict[tuple[str, str], list] = {}

    def add(self, method: str, path: str, status: int = 200, payload: Any = None, exc: Exception | None = None):
        self._routes.setdefault((method, path), []).append((status, payload, exc))

    def request(self, method, url, json=None, params=None, headers=None, timeout=None):
        path = urlsplit(url).path
        self.calls.append(Call(method, path, json, params, headers))
        answers = self._routes.get((method, path))
        if not answers:
            raise AssertionError(f"Unexpected request {method} {path}")
        status, payload, exc = answers.pop(0) if len(answers) > 1 else answers[0]
        if exc is not None:
            raise exc
        return make_response(status, payload, url)

    def calls_to(self, method: str, path: str) -> list[Call]:
        return [c for c in self.calls if c.method == method and c.path == path]


class FakeClock:
    def __init__(self, now: datetime = NOW):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def session():
    return FakeSession()


@pytest.fixture
def identity(tmp_path):
    store = IdentityStore(tmp_path / "identity.json")
    store.save_email("parent@example.com")
    return store


@pytest.fixture
def client(session, identity):
    return ApiClient(base_url=API, identity=identity, session=session)


@pytest.fixture
def events():
    return EventBus()


@pytest.fixture
def baby():
    return Baby(
        id="b1",
        name="Léa",
        birth_date=date(2024, 1, 15),
        weight=4000,
        height=55,
        gender="female",
    )


@pytest.fixture
def profile():
    return UserProfile(id="u1", email="parent@example.com", first_name="Marie", last_name="Durand")


@pytest.fixture
def outbox(client, events):
    return SyncOutbox(client, events=events, max_attempts=3, backoff=0)


@pytest.fixture
def store(client, identity, clock, baby, profile, outbox):
    """Store with a loaded profile and one selected baby, syncing via ``outbox``."""
    state = StoreState(user_profile=profile, babies=(baby,), current_baby=baby)
    return BabyTrackerStore(client=client, outbox=outbox, identity=identity, clock=clock, state=state)


@pytest.fixture
def offline_store(identity, clock, baby, profile):
    state = StoreState(user_profile=profile, babies=(baby,), current_baby=baby)
    return BabyTrackerStore(identity=identity, clock=clock, state=state)
