"""Shared pytest fixtures for the test suite.

The application is imported against an in-memory SQLite database; every test
gets freshly created tables.

Fixture overview
----------------
db              - SQLAlchemy session on the test database
make_profile    - factory that inserts a profile (optionally admin, with a schedule)
load_profile    - re-reads a profile after requests changed it
acting_as       - switches the profile that authenticated requests run as
client          - FastAPI TestClient with token verification bypassed
fake_storage    - in-memory stand-in for the R2 client, recording put/delete calls;
                  set ``fail_deletes`` to make removals fail
"""

from __future__ import annotations

import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["FIREBASE_PROJECT_ID"] = "test-project"
os.environ["SECURITY_HEADERS_ENABLED"] = "true"

import pytest  # noqa: E402
from botocore.exceptions import ClientError  # noqa: E402
from fastapi import Depends  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from callcenter import config, storage  # noqa: E402
from callcenter.auth import get_current_user  # noqa: E402
from callcenter.database import Base, SessionLocal, engine, get_db  # noqa: E402
from callcenter.main import app  # noqa: E402
from callcenter.models import Profile  # noqa: E402

# ── Database ──────────────────────────────────────────────────────────────────


@pytest.fixture(autouse=True)
def tables():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def make_profile(db):
    """
    Insert a profile and return its id.

    ``schedule`` is a list of ``(date, start, end)`` tuples.
    """

    def _make(
        profile_id: str,
        first_name: str = "",
        last_name: str = "",
        is_admin: bool = False,
        schedule: list[tuple[str, str, str]] | None = None,
    ) -> str:
        db.add(
            Profile(
                id=profile_id,
                email=f"{profile_id}@example.com",
                first_name=first_name,
                last_name=last_name,
                is_admin=is_admin,
                work_schedule=[
                    {"date": day, "start": start, "end": end} for day, start, end in schedule or []
                ],
            )
        )
        db.commit()
        return profile_id

    return _make


@pytest.fixture
def load_profile(db):
    """Fresh copy of a profile as stored"""

    def _load(profile_id: str) -> Profile:
        db.expire_all()
        return db.get(Profile, profile_id)

    return _load


# ── HTTP client ───────────────────────────────────────────────────────────────


@pytest.fixture
def acting_as():
    """Mutable holder for the authenticated profile id; call it to switch users"""
    state = {"id": None}

    def _switch(profile_id: str) -> None:
        state["id"] = profile_id

    _switch.state = state
    return _switch


@pytest.fixture
def client(acting_as):
    def _current_user(db=Depends(get_db)) -> Profile:
        profile = db.get(Profile, acting_as.state["id"])
        assert profile is not None, "acting_as() must name an existing profile"
        return profile

    app.dependency_overrides[get_current_user] = _current_user
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


# ── Object storage ────────────────────────────────────────────────────────────


class FakeR2Client:
    def __init__(self):
        self.objects: dict[str, dict] = {}
        self.deleted: list[str] = []
        self.fail_deletes = False

    def put_object(self, Bucket, Key, Body, ContentType):
        self.objects[Key] = {"bucket": Bucket, "body": Body, "content_type": ContentType}

    def delete_object(self, Bucket, Key):
        if self.fail_deletes:
            raise ClientError({"Error": {"Code": "AccessDenied", "Message": "denied"}}, "DeleteObject")
        self.deleted.append(Key)
        self.objects.pop(Key, None)


@pytest.fixture
def fake_storage(monkeypatch):
    fake = FakeR2Client()
    monkeypatch.setattr(storage, "get_r2_client", lambda: fake)
    monkeypatch.setattr(config, "R2_PUBLIC_URL", "https://images.example.com")
    monkeypatch.setattr(config, "R2_BUCKET_NAME", "question-images")
    return fake
