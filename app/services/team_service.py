# app/services/team_service.py
"""
Team repository: unique names, lead validation, membership and guarded deletion
"""

import logging
from typing import Any, Dict, Iterable, List, Optional

from sqlalchemy.orm import Session, selectinload

from app.database import atomic
from app.models import Task, Team, User
from app.utils.errors import Conflict, NotFound

logger = logging.getLogger(__name__)


class TeamService:
    def __init__(self, db: Session):
        self.db = db

    def list_teams(self) -> List[Team]:
        return (
            self.db.query(Team)
            .options(selectinload(Team.members), selectinload(Team.tasks))
            .order_by(Team.id)
            .all()
        )

    def get_team(self, team_id: int) -> Team:
        team = self.db.query(Team).filter(Team.id == team_id).first()
        if not team:
            raise NotFound("Team not found")
        return team

    def _ensure_name_available(self, name: str, exclude_team_id: Optional[int] = None):
        query = self.db.query(Team).filter(Team.name == name)
        if exclude_team_id is not None:
            query = query.filter(Team.id != exclude_team_id)
        if query.first():
            raise Conflict("Team name already exists")

    def _ensure_lead_exists(self, lead_id: int):
        # The lead only has to exist; membership is not required
        if not self.db.query(User).filter(User.id == lead_id).first():
            raise NotFound("Team lead not found")

    def _load_users(self, user_ids: Iterable[int]) -> List[User]:
        """Resolve every id or fail before anything is written"""
        wanted = set(user_ids)
        users = self.db.query(User).filter(User.id.in_(wanted)).all()
        if len(users) != len(wanted):
            raise Conflict("One or more users not found")
        return users

    def create_team(
        self,
        name: str,
        lead_id: Optional[int] = None,
        member_ids: Iterable[int] = (),
        acting_user_id: Optional[int] = None,
    ) -> Team:
        self._ensure_name_available(name)
        if lead_id is not None:
            self._ensure_lead_exists(lead_id)
        members = self._load_users(member_ids) if member_ids else []

        team = Team(name=name, lead_id=lead_id)
        with atomic(self.db):
            self.db.add(team)
            self.db.flush()
            for member in members:
                member.team_id = team.id
        self.db.refresh(team)
        logger.info(f"Team {team.id} created by user {acting_user_id} with {len(members)} member(s)")
        return team

    def update_team(self, team_id: int, changes: Dict[str, Any], acting_user_id: Optional[int] = None) -> Team:
        """Partial update: keys absent from changes keep their current value"""
        team = self.get_team(team_id)

        name = changes.get("name")
        if name and name != team.name:
            self._ensure_name_available(name, exclude_team_id=team_id)

        if "lead_id" in changes and changes["lead_id"] is not None:
            self._ensure_lead_exists(changes["lead_id"])

        with atomic(self.db):
            if name:
                team.name = name
            if "lead_id" in changes:
                team.lead_id = changes["lead_id"]
        self.db.refresh(team)
        logger.info(f"Team {team_id} updated by user {acting_user_id}: {sorted(changes)}")
        return team

    def delete_team(self, team_id: int, acting_user_id: Optional[int] = None) -> None:
        """Refuse while the team owns tasks; otherwise detach members and delete"""
        team = self.get_team(team_id)
        if self.db.query(Task).filter(Task.team_id == team_id).count() > 0:
            raise Conflict("Cannot delete team with active tasks")

        with atomic(self.db):
            self.db.query(User).filter(User.team_id == team_id).update(
                {User.team_id: None}, synchronize_session=False
            )
            self.db.delete(team)
        self.db.expire_all()
        logger.info(f"Team {team_id} deleted by user {acting_user_id}")

    def add_members(self, team_id: int, user_ids: Iterable[int], acting_user_id: Optional[int] = None) -> Team:
        """All-or-nothing: every id must resolve before anyone joins.

        A user already in another team is moved, since membership is one team per user.
        """
        team = self.get_team(team_id)
        users = self._load_users(user_ids)

        with atomic(self.db):
            for user in users:
                user.team_id = team.id
        self.db.refresh(team)
        logger.info(f"{len(users)} member(s) added to team {team_id} by user {acting_user_id}")
        return team

    def remove_members(self, team_id: int, user_ids: Iterable[int], acting_user_id: Optional[int] = None) -> Team:
        """Detach the given users; ids that are not current members are ignored"""
        team = self.get_team(team_id)
        with atomic(self.db):
            removed = self.db.query(User).filter(
                User.id.in_(set(user_ids)),
                User.team_id == team_id,
            ).update({User.team_id: None}, synchronize_session=False)
        self.db.expire_all()
        logger.info(f"{removed} member(s) removed from team {team_id} by user {acting_user_id}")
        return self.get_team(team_id)
