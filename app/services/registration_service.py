# app/services/registration_service.py
"""
Two-phase onboarding: signups wait in pending_registrations until an admin
approves (promotes to a User) or rejects (discards) them.
"""

import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from app.config.security import SecurityConfig
from app.database import atomic
from app.models import PendingRegistration, User, UserRole
from app.schemas.tokens import Identity
from app.utils.errors import Conflict, Forbidden, NotFound, Unauthenticated
from app.utils.security import create_access_token, hash_password, verify_password

logger = logging.getLogger(__name__)


class RegistrationService:
    def __init__(self, db: Session):
        self.db = db

    def register(self, name: str, email: str, password: str) -> PendingRegistration:
        # Only approved users are checked; duplicate pending emails are allowed
        if self.db.query(User).filter(User.email == email).first():
            raise Conflict("Email already registered")

        pending = PendingRegistration(name=name, email=email, hashed_password=hash_password(password))
        with atomic(self.db):
            self.db.add(pending)
        self.db.refresh(pending)
        logger.info(f"Registration {pending.id} pending approval")
        return pending

    def login(self, email: str, password: str):
        """Check credentials and return (user, token)"""
        # A pending signup blocks login before the password is even looked at
        if self.db.query(PendingRegistration).filter(PendingRegistration.email == email).first():
            raise Forbidden("Account pending approval")

        user = self.db.query(User).filter(User.email == email).first()
        if not user:
            raise NotFound("User not found")
        if not verify_password(password, user.hashed_password):
            raise Unauthenticated("Invalid password")

        token = create_access_token(Identity(id=user.id, role=user.role))
        logger.info(f"User {user.id} logged in")
        return user, token

    def list_pending(self) -> List[PendingRegistration]:
        return self.db.query(PendingRegistration).order_by(PendingRegistration.id).all()

    def _get_pending(self, pending_id: int) -> PendingRegistration:
        pending = self.db.query(PendingRegistration).filter(PendingRegistration.id == pending_id).first()
        if not pending:
            raise NotFound("Pending registration not found")
        return pending

    def approve(self, pending_id: int, acting_user_id: Optional[int] = None) -> User:
        """Promote a pending registration to a User and drop the pending row, atomically"""
        pending = self._get_pending(pending_id)
        if self.db.query(User).filter(User.email == pending.email).first():
            raise Conflict("Email already registered")

        user = User(
            name=pending.name,
            email=pending.email,
            hashed_password=pending.hashed_password,
            role=UserRole(SecurityConfig.REGISTRATION['default_role']),
        )
        with atomic(self.db):
            self.db.add(user)
            self.db.delete(pending)
        self.db.refresh(user)
        logger.info(f"Registration {pending_id} approved as user {user.id} by user {acting_user_id}")
        return user

    def reject(self, pending_id: int, acting_user_id: Optional[int] = None) -> None:
        pending = self._get_pending(pending_id)
        with atomic(self.db):
            self.db.delete(pending)
        logger.info(f"Registration {pending_id} rejected by user {acting_user_id}")
