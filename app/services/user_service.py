# app/services/user_service.py
"""
User repository: constraint-checked CRUD over the users table
"""

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session, joinedload

from app.database import atomic
from app.models import Task, Team, User, UserRole
from app.utils.errors import Conflict, NotFound, ValidationError
from app.utils.security import hash_password

logger = logging.getLogger(__name__)

SELF_EDITABLE_FIELDS = ("name", "email")


class UserService:
    """Users and their credentials. Authorization happens before these calls."""

    def __init__(self, db: Session):
        self.db = db

    def list_users(self, include_admins: bool = False) -> List[User]:
        query = self.db.query(User).options(joinedload(User.team))
        if not include_admins:
            query = query.filter(User.role != UserRole.ADMIN)
        return query.order_by(User.id).all()

    def get_user(self, user_id: int) -> User:
        user = self.db.query(User).filter(User.id == user_id).first()
        if not user:
            raise NotFound("User not found")
        return user

    def get_by_email(self, email: str) -> Optional[User]:
        return self.db.query(User).filter(User.email == email).first()

    def _ensure_email_available(self, email: str, exclude_user_id: Optional[int] = None):
        query = self.db.query(User).filter(User.email == email)
        if exclude_user_id is not None:
            query = query.filter(User.id != exclude_user_id)
        if query.first():
            raise Conflict("Email already registered")

    def _ensure_team_exists(self, team_id: int):
        if not self.db.query(Team).filter(Team.id == team_id).first():
            raise NotFound("Team not found")

    def create_user(
        self,
        name: str,
        email: str,
        password: str = None,
        role: UserRole = UserRole.EMPLOYEE,
        team_id: Optional[int] = None,
        hashed_password: str = None,
        acting_user_id: Optional[int] = None,
    ) -> User:
        """Create an approved user from a plain password or an existing hash"""
        self._ensure_email_available(email)
        if team_id is not None:
            self._ensure_team_exists(team_id)
        if hashed_password is None:
            hashed_password = hash_password(password)

        user = User(
            name=name,
            email=email,
            hashed_password=hashed_password,
            role=UserRole(role),
            team_id=team_id,
        )
        with atomic(self.db):
            self.db.add(user)
        self.db.refresh(user)
        logger.info(f"User {user.id} created with role {user.role.value} by user {acting_user_id}")
        return user

    def update_self(self, user_id: int, changes: Dict[str, Any]) -> User:
        """A user editing their own profile: only name and email are kept"""
        update_data = {
            field: value for field, value in changes.items()
            if field in SELF_EDITABLE_FIELDS and value is not None
        }
        if not update_data:
            raise ValidationError("No valid fields to update")
        return self._apply_update(user_id, update_data, acting_user_id=user_id)

    def update_user(self, user_id: int, changes: Dict[str, Any], acting_user_id: Optional[int] = None) -> User:
        """Admin update: any field, with the same uniqueness and existence checks"""
        return self._apply_update(user_id, dict(changes), acting_user_id=acting_user_id)

    def _apply_update(self, user_id: int, update_data: Dict[str, Any], acting_user_id: Optional[int] = None) -> User:
        db_user = self.get_user(user_id)

        email = update_data.get("email")
        if email and email != db_user.email:
            self._ensure_email_available(email, exclude_user_id=user_id)

        if update_data.get("team_id") is not None and update_data["team_id"] != db_user.team_id:
            self._ensure_team_exists(update_data["team_id"])

        # Handle password update separately (hash it if provided)
        if "password" in update_data:
            password = update_data.pop("password")
            if password:
                db_user.hashed_password = hash_password(password)

        with atomic(self.db):
            for field, value in update_data.items():
                if value is None and field != "team_id":
                    continue
                setattr(db_user, field, value)
        self.db.refresh(db_user)
        logger.info(f"User {user_id} updated by user {acting_user_id}: {sorted(update_data)}")
        return db_user

    def delete_user(self, user_id: int, acting_user_id: Optional[int] = None) -> None:
        """Delete a user, nulling every reference to them in the same transaction"""
        db_user = self.get_user(user_id)
        with atomic(self.db):
            self.db.query(Task).filter(Task.assigned_to == user_id).update(
                {Task.assigned_to: None}, synchronize_session=False
            )
            self.db.query(Task).filter(Task.assigned_by == user_id).update(
                {Task.assigned_by: None}, synchronize_session=False
            )
            self.db.query(Team).filter(Team.lead_id == user_id).update(
                {Team.lead_id: None}, synchronize_session=False
            )
            self.db.delete(db_user)
        self.db.expire_all()
        logger.info(f"User {user_id} deleted by user {acting_user_id}")
