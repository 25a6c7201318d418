import os
import tempfile
from datetime import datetime, timedelta, timezone

# Keep the default data directory out of the source tree during tests
os.environ.setdefault("DATA_DIR", tempfile.mkdtemp(prefix="sharelink-test-"))
os.environ.setdefault("ENV", "test")

import pytest
from fastapi.testclient import TestClient

from sharelink import config
from sharelink.api.files.repositories.files_repository import FilesRepository
from sharelink.api.ratelimit.repositories.rate_limit_repository import RateLimitRepository
from sharelink.database import Base, make_engine, make_session_factory
from sharelink.dependencies import build_services
from sharelink.main import create_app
from sharelink.storage import LocalObjectStore

import sharelink.orm  # noqa: F401

UPLOAD_LIMIT = 3
ADMIN_HEADERS = {"X-Admin-User": "admin", "X-Admin-Pass": "s3cret"}


class FakeClock:
    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs):
        self.now += timedelta(**kwargs)


@pytest.fixture
def clock():
    return FakeClock(datetime(2026, 3, 14, 12, 0, tzinfo=timezone.utc))


@pytest.fixture
def engine(tmp_path):
    engine = make_engine(f"sqlite:///{tmp_path}/test.db", timeout=30)
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return make_session_factory(engine)


@pytest.fixture
def files_repository(session_factory):
    return FilesRepository(session_factory)


@pytest.fixture
def rate_limit_repository(session_factory):
    return RateLimitRepository(session_factory)


@pytest.fixture
def store(tmp_path):
    return LocalObjectStore(tmp_path / "blobs", "http://testserver", "test-signing-secret")


@pytest.fixture
def services(session_factory, store, clock):
    return build_services(
        session_factory=session_factory,
        store=store,
        upload_limit=UPLOAD_LIMIT,
        clock=clock,
    )


@pytest.fixture
def client(services):
    return TestClient(create_app(services))


@pytest.fixture
def admin_enabled(monkeypatch):
    monkeypatch.setattr(config, "SHARELINK_ADMIN_USER", ADMIN_HEADERS["X-Admin-User"])
    monkeypatch.setattr(config, "SHARELINK_ADMIN_PASS", ADMIN_HEADERS["X-Admin-Pass"])
    monkeypatch.setattr(config, "ADMIN_ENABLED", True)


@pytest.fixture
def admin_headers():
    return dict(ADMIN_HEADERS)
