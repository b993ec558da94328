# tests/conftest.py
from __future__ import annotations

import os
from collections.abc import Callable, Generator, Iterator

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

os.environ.setdefault("DATABASE_URL", "sqlite://")

from community_engine.db.session import Base, build_engine, create_tables, drop_tables
from community_engine.db.session import get_db as app_get_session
from community_engine.main import app as fastapi_app
from community_engine.services.community import CommunityService

TEST_DB_URL = "sqlite://"

ALICE = "user:Alice"
BOB = "user:Bob"
CHARLIE = "user:Charlie"


@pytest.fixture(scope="session")
def engine() -> Generator[Engine, None, None]:
    engine = build_engine(TEST_DB_URL, poolclass=StaticPool)
    create_tables(bind=engine)
    try:
        yield engine
    finally:
        drop_tables(bind=engine)
        engine.dispose()


@pytest.fixture()
def db_session(engine: Engine) -> Iterator[Session]:
    SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()

        # Ensure each test sees a clean database even if commits occurred.
        with engine.begin() as cleanup_conn:
            for table in reversed(Base.metadata.sorted_tables):
                cleanup_conn.execute(table.delete())


@pytest.fixture()
def service(db_session: Session) -> CommunityService:
    """Community engine bound to the per-test session."""
    return CommunityService(db_session)


@pytest.fixture()
def community_id(service: CommunityService) -> str:
    """Create "Deno Fans" with Alice as its only ADMIN."""
    result = service.create_community(
        name="Deno Fans",
        description="A community for Deno enthusiasts.",
        creator=ALICE,
    )
    return result["community"]


@pytest.fixture()
def membership_id(service: CommunityService) -> Callable[[str, str], str | None]:
    """Return a helper that finds a user's membership id in a community."""

    def _lookup(user: str, community: str) -> str | None:
        for membership in service.get_memberships_by_user(user=user):
            if membership.community == community:
                return membership.id
        return None

    return _lookup


@pytest.fixture(scope="session")
def app() -> FastAPI:
    return fastapi_app


@pytest.fixture(autouse=True)
def override_session_dependency(app: FastAPI, db_session: Session) -> Iterator[None]:
    def _get_session_override() -> Generator[Session, None, None]:
        yield db_session

    app.dependency_overrides[app_get_session] = _get_session_override
    try:
        yield
    finally:
        app.dependency_overrides.pop(app_get_session, None)


@pytest.fixture()
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app, base_url="http://test") as test_client:
        yield test_client
