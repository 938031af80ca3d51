import pytest

import create_tables
from app.database import Base, SessionLocal, engine
from app.models import User, UserRole


@pytest.fixture
def app_engine():
    # DATABASE_URL is an in-memory SQLite for the suite; create_tables works on that engine
    yield engine
    Base.metadata.drop_all(bind=engine)


def test_create_tables_builds_schema_and_default_admin_once(app_engine, capsys):
    create_tables.create_tables()
    create_tables.create_tables()

    db = SessionLocal()
    try:
        admins = db.query(User).filter(User.role == UserRole.ADMIN).all()
    finally:
        db.close()

    assert [admin.email for admin in admins] == [create_tables.DEFAULT_ADMIN["email"]]
    output = capsys.readouterr().out
    assert "Default admin user created!" in output
    assert "Admin user already exists" in output
