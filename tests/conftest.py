# tests/conftest.py
from __future__ import annotations

import os
from collections.abc import Callable, Generator, Iterator
from itertools import count

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("DATABASE_URL", "sqlite://")

from univibe.core.security import create_access_token
from univibe.db.session import Base
from univibe.db.session import get_db as app_get_session
from univibe.main import app as fastapi_app
from univibe.models import Follow, Post, Profile, User
from univibe.models.user import ROLE_ADMIN

TEST_DB_URL = "sqlite://"

_USER_COUNTER = count(1)


@pytest.fixture(scope="session")
def engine() -> Generator[Engine, None, None]:
    engine = create_engine(
        TEST_DB_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture()
def db_session(engine: Engine) -> Iterator[Session]:
    connection = engine.connect()
    transaction = connection.begin()
    SessionLocal = sessionmaker(
        bind=connection,
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
    )
    session = SessionLocal()
    session.begin_nested()

    @event.listens_for(session, "after_transaction_end")
    def restart_savepoint(sess: Session, trans) -> None:  # pragma: no cover - SQLAlchemy internals
        if trans.nested and not getattr(trans._parent, "nested", False):
            session.begin_nested()

    try:
        yield session
    finally:
        event.remove(session, "after_transaction_end", restart_savepoint)
        session.close()

        if transaction.is_active:
            transaction.rollback()
        connection.close()

        # Ensure each test sees a clean database even if commits occurred.
        with engine.begin() as cleanup_conn:
            for table in reversed(Base.metadata.sorted_tables):
                cleanup_conn.execute(table.delete())


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


@pytest.fixture()
def make_user(db_session: Session) -> Callable[..., User]:
    """Return a factory persisting a user, with a profile unless ``campus`` is False."""

    def _make_user(
        name: str = "Test User",
        *,
        campus: str | None | bool = "North Campus",
        role: str = "user",
        profile_picture: str | None = None,
    ) -> User:
        n = next(_USER_COUNTER)
        user = User(
            name=name,
            email=f"user{n}@campus.test",
            username=f"user{n}",
            role=role,
        )
        db_session.add(user)
        db_session.flush()
        if campus is not False:
            db_session.add(
                Profile(
                    user_id=user.id,
                    full_name=name,
                    username=f"user{n}",
                    campus=campus,
                    profile_picture=profile_picture,
                )
            )
            db_session.flush()
        db_session.refresh(user)
        return user

    return _make_user


@pytest.fixture()
def make_post(db_session: Session) -> Callable[..., Post]:
    """Return a factory persisting a post directly, bypassing the API."""

    def _make_post(
        author: User,
        content: str = "Test post content",
        *,
        visibility: str = "campus",
        is_anonymous: bool = False,
        campus: str | None = None,
    ) -> Post:
        if campus is None:
            profile = db_session.get(Profile, author.id)
            campus = profile.campus if profile and profile.campus else "Unknown Campus"
        post = Post(
            user_id=author.id,
            content=content,
            visibility=visibility,
            is_anonymous=is_anonymous,
            campus=campus,
            tags=[],
        )
        db_session.add(post)
        db_session.flush()
        db_session.refresh(post)
        return post

    return _make_post


@pytest.fixture()
def follow(db_session: Session) -> Callable[[User, User], None]:
    """Return a helper creating a follow edge."""

    def _follow(follower: User, followee: User) -> None:
        db_session.add(Follow(follower_id=follower.id, followee_id=followee.id))
        db_session.flush()

    return _follow


def auth_headers(user: User) -> dict[str, str]:
    """Return authorization headers for ``user``."""
    return {"Authorization": f"Bearer {create_access_token(user.id)}"}


@pytest.fixture()
def test_user(make_user: Callable[..., User]) -> User:
    """Primary test user on North Campus."""
    return make_user("Alice Author")


@pytest.fixture()
def other_user(make_user: Callable[..., User]) -> User:
    """Second user on the same campus."""
    return make_user("Bob Viewer")


@pytest.fixture()
def far_user(make_user: Callable[..., User]) -> User:
    """User on a different campus."""
    return make_user("Carol Elsewhere", campus="South Campus")


@pytest.fixture()
def moderator(make_user: Callable[..., User]) -> User:
    """Admin account allowed to unmask anonymous authors."""
    return make_user("Mod Erator", role=ROLE_ADMIN)


@pytest.fixture()
def auth_token(test_user: User) -> dict[str, str]:
    """Return authorization headers for the primary test user."""
    return auth_headers(test_user)


@pytest.fixture()
def other_auth_token(other_user: User) -> dict[str, str]:
    """Return authorization headers for the secondary test user."""
    return auth_headers(other_user)


@pytest.fixture()
def far_auth_token(far_user: User) -> dict[str, str]:
    """Return authorization headers for the off-campus user."""
    return auth_headers(far_user)


@pytest.fixture()
def moderator_token(moderator: User) -> dict[str, str]:
    """Return authorization headers for the moderator."""
    return auth_headers(moderator)


@pytest.fixture()
def headers_for() -> Callable[[User], dict[str, str]]:
    """Return the helper minting authorization headers for any user."""
    return auth_headers
