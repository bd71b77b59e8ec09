from datetime import datetime, timedelta

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from kamus.config import settings
from kamus.core.database import Base, get_db
from kamus.core.identity import issue_session_token
from kamus.main import app
from kamus.models import Definition, Role, RoleName, User

BASE_TIME = datetime(2024, 1, 1, 12, 0, 0)


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False, autocommit=False)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    # Not used as a context manager: startup hooks would touch the real database.
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(db):
    def _make_user(username: str, role: RoleName = RoleName.MEMBER) -> User:
        r = db.query(Role).filter(Role.name == role).first()
        if r is None:
            r = Role(name=role)
            db.add(r)
            db.flush()
        user = User(email=f"{username}@example.com", username=username, role=r)
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make_user


@pytest.fixture
def make_definition(db):
    counter = {"n": 0}

    def _make_definition(
        user: User,
        word: str = None,
        approved: int | None = None,
        created: int | None = None,
        deleted: bool = False,
    ) -> Definition:
        """`approved` / `created` are minute offsets from BASE_TIME."""
        counter["n"] += 1
        n = counter["n"]
        d = Definition(
            word=word or f"word{n}",
            definition=f"definition {n}",
            example=f"example {n}",
            user_id=user.id,
            created_at=BASE_TIME + timedelta(minutes=created if created is not None else n),
            approved_at=BASE_TIME + timedelta(minutes=approved) if approved is not None else None,
            deleted_at=BASE_TIME if deleted else None,
        )
        db.add(d)
        db.commit()
        db.refresh(d)
        return d

    return _make_definition


def login(client: TestClient, user: User) -> None:
    client.cookies.set(settings.session_cookie_name, issue_session_token(user.id))


@pytest.fixture
def login_as(client):
    def _login_as(user: User) -> TestClient:
        login(client, user)
        return client

    return _login_as
