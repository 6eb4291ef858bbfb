"""Shared fixtures: an app on a temp database, a controllable clock and a fake upstream."""

import pytest

from app import create_app
from services import http_session
from services.cache import ResponseCache, EXTENSION_KEY


class FakeClock:
    """Millisecond clock that only moves when told to."""

    def __init__(self, now=0):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, ms):
        self.now += ms


class FakeResponse:
    def __init__(self, payload=None, status_code=200, malformed=False):
        self.payload = payload
        self.status_code = status_code
        self.malformed = malformed

    def json(self):
        if self.malformed:
            raise ValueError('Expecting value: line 1 column 1 (char 0)')
        return self.payload


class FakeUpstream:
    """Stands in for ``http_session.request``.

    Queued items are returned (or raised, for exceptions) in order; once the
    queue is empty ``default`` is used.
    """

    def __init__(self):
        self.calls = []
        self.queue = []
        self.default = FakeResponse({'ok': True})

    def __call__(self, method, url, **kwargs):
        self.calls.append({'method': method, 'url': url, **kwargs})
        item = self.queue.pop(0) if self.queue else self.default
        if isinstance(item, Exception):
            raise item
        return item

    def reply(self, payload, status_code=200):
        self.queue.append(FakeResponse(payload, status_code))

    def reply_malformed(self, status_code=200):
        self.queue.append(FakeResponse(status_code=status_code, malformed=True))

    def fail(self, exc):
        self.queue.append(exc)

    @property
    def last(self):
        return self.calls[-1]


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def upstream(monkeypatch):
    fake = FakeUpstream()
    monkeypatch.setattr(http_session, 'request', fake)
    return fake


@pytest.fixture
def app_overrides(tmp_path):
    return {
        'TESTING': True,
        'DATABASE_PATH': str(tmp_path / 'mediaproxy-test.db'),
        'TMDB_API_KEY': 'tmdb-test-key',
        'RAWG_API_KEY': 'rawg-test-key',
        'GEMINI_API_KEY': 'gemini-test-key',
        'TMDB_LANGUAGE': 'pt-BR',
        'UPSTREAM_TIMEOUT': 10,
        'ADMIN_DEFAULT_PASSWORD': None,
        'CORS_ORIGIN': '*',
    }


@pytest.fixture
def app(app_overrides, clock):
    app = create_app(app_overrides)
    app.extensions[EXTENSION_KEY] = ResponseCache(clock=clock)
    return app


@pytest.fixture
def cache(app):
    return app.extensions[EXTENSION_KEY]


@pytest.fixture
def client(app):
    return app.test_client()
