# app/services/task_service.py
"""
Task repository.

Field filtering by role is done by the guard (app.utils.auth.filter_task_update)
before changes reach this module; here we only check referential rules:
the team must exist and an assignee must belong to the task's team.
"""

import logging
from typing import Any, Dict, Iterable, List, Optional

from sqlalchemy.orm import Session, joinedload

from app.database import atomic
from app.models import Task, TaskPriority, TaskStatus, Team, User, UserRole
from app.schemas.tokens import Identity
from app.utils.errors import Conflict, NotFound

logger = logging.getLogger(__name__)

# Fields where an explicit null means "clear it"; for the rest null means "leave as is"
NULLABLE_FIELDS = {"due_date", "assigned_to"}


def _ordered(query):
    # Explicit null placement: undated tasks always sort after dated ones
    return query.order_by(Task.due_date.asc().nulls_last(), Task.id.asc())


class TaskService:
    def __init__(self, db: Session):
        self.db = db

    def _base_query(self):
        return self.db.query(Task).options(joinedload(Task.assignee), joinedload(Task.team))

    def get_task(self, task_id: int) -> Task:
        task = self._base_query().filter(Task.id == task_id).first()
        if not task:
            raise NotFound("Task not found")
        return task

    def list_for_caller(
        self,
        identity: Identity,
        status: Optional[TaskStatus] = None,
        priority: Optional[TaskPriority] = None,
        team_id: Optional[int] = None,
        assigned_to: Optional[int] = None,
    ) -> List[Task]:
        """Filters combine with AND; employees only ever see their own tasks"""
        if identity.role == UserRole.EMPLOYEE:
            assigned_to = identity.id

        query = self._base_query()
        if status:
            query = query.filter(Task.status == status)
        if priority:
            query = query.filter(Task.priority == priority)
        if team_id:
            query = query.filter(Task.team_id == team_id)
        if assigned_to:
            query = query.filter(Task.assigned_to == assigned_to)
        return _ordered(query).all()

    def _ensure_team_exists(self, team_id: int) -> Team:
        team = self.db.query(Team).filter(Team.id == team_id).first()
        if not team:
            raise NotFound("Team not found")
        return team

    def _ensure_assignee_in_team(self, user_id: int, team_id: int):
        assignee = self.db.query(User).filter(User.id == user_id, User.team_id == team_id).first()
        if not assignee:
            raise Conflict("Assigned user not found or not part of the team")

    def create_task(
        self,
        identity: Identity,
        title: str,
        description: str,
        team_id: int,
        assigned_to: Optional[int] = None,
        due_date=None,
        priority: TaskPriority = TaskPriority.MEDIUM,
    ) -> Task:
        self._ensure_team_exists(team_id)
        if assigned_to is not None:
            self._ensure_assignee_in_team(assigned_to, team_id)

        task = Task(
            title=title,
            description=description,
            team_id=team_id,
            assigned_to=assigned_to,
            assigned_by=identity.id,
            due_date=due_date,
            priority=priority or TaskPriority.MEDIUM,
            status=TaskStatus.PENDING,
        )
        with atomic(self.db):
            self.db.add(task)
        logger.info(f"Task {task.id} created in team {team_id} by user {identity.id}")
        return self.get_task(task.id)

    def _validate_changes(self, task: Task, changes: Dict[str, Any]) -> Dict[str, Any]:
        """Return the changes to apply to one task, or raise before anything is written"""
        update_data = {
            field: value for field, value in changes.items()
            if value is not None or field in NULLABLE_FIELDS
        }

        team_id = update_data.get("team_id", task.team_id)
        if "team_id" in update_data and update_data["team_id"] != task.team_id:
            self._ensure_team_exists(update_data["team_id"])

        assignee_id = update_data.get("assigned_to", task.assigned_to)
        assignee_changed = "assigned_to" in update_data and update_data["assigned_to"] != task.assigned_to
        team_changed = team_id != task.team_id
        if assignee_id is not None and (assignee_changed or team_changed):
            self._ensure_assignee_in_team(assignee_id, team_id)
        return update_data

    def update_task(self, task_id: int, changes: Dict[str, Any], acting_user_id: Optional[int] = None) -> Task:
        """Apply already-filtered changes to a task"""
        task = self.get_task(task_id)
        update_data = self._validate_changes(task, changes)

        with atomic(self.db):
            for field, value in update_data.items():
                setattr(task, field, value)
        logger.info(f"Task {task_id} updated by user {acting_user_id}: {sorted(update_data)}")
        return self.get_task(task_id)

    def get_tasks(self, task_ids: Iterable[int]) -> List[Task]:
        """Load every requested task or raise NotFound"""
        wanted = set(task_ids)
        tasks = self.db.query(Task).filter(Task.id.in_(wanted)).order_by(Task.id).all()
        if len(tasks) != len(wanted):
            raise NotFound("One or more tasks not found")
        return tasks

    def bulk_update(self, tasks: List[Task], changes: Dict[str, Any], acting_user_id: Optional[int] = None) -> int:
        """Apply the same changes to several tasks in one transaction"""
        planned = [(task, self._validate_changes(task, changes)) for task in tasks]
        with atomic(self.db):
            for task, update_data in planned:
                for field, value in update_data.items():
                    setattr(task, field, value)
        logger.info(f"Bulk update applied to {len(planned)} task(s) by user {acting_user_id}")
        return len(planned)

    def delete_task(self, task_id: int, acting_user_id: Optional[int] = None) -> None:
        task = self.get_task(task_id)
        with atomic(self.db):
            self.db.delete(task)
        logger.info(f"Task {task_id} deleted by user {acting_user_id}")
