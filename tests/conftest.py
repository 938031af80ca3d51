import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("SECRET_KEY", "test-secret")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.database import Base, get_db
from app.models import PendingRegistration, Task, Team, User, UserRole
from app.schemas.tokens import Identity
from app.utils.security import create_access_token, hash_password
from main import app

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

PASSWORD = "secret123"
PASSWORD_HASH = hash_password(PASSWORD)


@pytest.fixture
def db():
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def make_user(db):
    counter = {"n": 0}

    def _make(role=UserRole.EMPLOYEE, team=None, name=None, email=None):
        counter["n"] += 1
        user = User(
            name=name or f"User {counter['n']}",
            email=email or f"user{counter['n']}@company.com",
            hashed_password=PASSWORD_HASH,
            role=role,
            team_id=team.id if team else None,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make


@pytest.fixture
def make_team(db):
    def _make(name, lead=None):
        team = Team(name=name, lead_id=lead.id if lead else None)
        db.add(team)
        db.commit()
        db.refresh(team)
        return team

    return _make


@pytest.fixture
def make_task(db):
    def _make(team, creator, assignee=None, title="Task", due_date=None, **fields):
        task = Task(
            title=title,
            description=fields.pop("description", "Something to do"),
            team_id=team.id,
            assigned_by=creator.id,
            assigned_to=assignee.id if assignee else None,
            due_date=due_date,
            **fields,
        )
        db.add(task)
        db.commit()
        db.refresh(task)
        return task

    return _make


@pytest.fixture
def make_pending(db):
    def _make(name="Ann", email="ann@x.com"):
        pending = PendingRegistration(name=name, email=email, hashed_password=PASSWORD_HASH)
        db.add(pending)
        db.commit()
        db.refresh(pending)
        return pending

    return _make


def identity_of(user) -> Identity:
    return Identity(id=user.id, role=user.role)


@pytest.fixture
def client_for(db):
    """Build a TestClient, optionally logged in as the given user"""

    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db

    def _client(user=None):
        client = TestClient(app)
        if user is not None:
            client.cookies.set("access-token", create_access_token(identity_of(user)))
        return client

    yield _client
    app.dependency_overrides.clear()
