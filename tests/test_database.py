import logging

import pytest
from sqlalchemy.exc import OperationalError

from app.database import atomic
from app.models import PendingRegistration, Team, User, UserRole
from app.services.registration_service import RegistrationService
from app.utils.errors import Conflict, Internal
from conftest import PASSWORD_HASH


def failing_flush(*args, **kwargs):
    raise OperationalError("INSERT INTO teams", {}, Exception("disk I/O error"))


def test_approve_rolls_back_when_commit_hits_unique_email(db, make_pending):
    pending = make_pending(email="ann@x.com")
    # Not flushed yet, so the pre-check does not see it; the clash only shows at commit
    db.add(User(name="Other Ann", email="ann@x.com", hashed_password=PASSWORD_HASH))

    with pytest.raises(Conflict):
        RegistrationService(db).approve(pending.id)

    assert db.query(PendingRegistration).filter(PendingRegistration.id == pending.id).count() == 1
    assert db.query(User).count() == 0


def test_store_failure_inside_atomic_is_internal_and_writes_nothing(db, monkeypatch, caplog):
    monkeypatch.setattr(db, "flush", failing_flush)
    caplog.set_level(logging.ERROR, logger="app.database")

    with pytest.raises(Internal):
        with atomic(db):
            db.add(Team(name="Ops"))

    monkeypatch.undo()
    assert db.query(Team).count() == 0
    assert "Database error" in caplog.text


def test_store_failure_returns_generic_500_envelope(db, client_for, make_user, monkeypatch):
    client = client_for(make_user(role=UserRole.MANAGER))
    monkeypatch.setattr(db, "flush", failing_flush)

    response = client.post("/teams/", json={"name": "Ops"})

    monkeypatch.undo()
    assert response.status_code == 500
    assert response.json() == {"success": False, "error": "Internal server error"}
    assert db.query(Team).count() == 0
