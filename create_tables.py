# create_tables.py
import os

from app.database import Base, SessionLocal, engine
from app.models import UserRole
from app.services.user_service import UserService
from app.utils.errors import Conflict

DEFAULT_ADMIN = {
    "name": "System Administrator",
    "email": os.getenv("ADMIN_EMAIL", "admin@example.com"),
    "password": os.getenv("ADMIN_PASSWORD", "admin123"),
}


def create_tables():
    """Create all tables"""
    try:
        Base.metadata.create_all(bind=engine)
        print("✅ All tables created successfully!")

        create_default_admin()

    except Exception as e:
        print(f"❌ Error creating tables: {e}")
        raise


def create_default_admin():
    """Create a default admin user"""
    db = SessionLocal()
    try:
        UserService(db).create_user(
            name=DEFAULT_ADMIN["name"],
            email=DEFAULT_ADMIN["email"],
            password=DEFAULT_ADMIN["password"],
            role=UserRole.ADMIN,
        )
        print("✅ Default admin user created!")
        print(f"   Email: {DEFAULT_ADMIN['email']}")
    except Conflict:
        print("ℹ️  Admin user already exists")
    finally:
        db.close()


if __name__ == "__main__":
    create_tables()
