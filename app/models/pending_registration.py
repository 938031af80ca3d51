# app/models/pending_registration.py
from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.sql import func
from app.database import Base


class PendingRegistration(Base):
    """A signup waiting for an admin to approve or reject it"""
    __tablename__ = "pending_registrations"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    # Not unique: only approved users are checked at registration time
    email = Column(String, index=True, nullable=False)
    hashed_password = Column(String, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
