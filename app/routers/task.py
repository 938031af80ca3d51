# app/routers/task.py
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List, Optional

from app.database import get_db
from app.models import TaskPriority, TaskStatus
from app.schemas import BulkUpdateResult, Envelope, Identity, TaskBulkUpdate, TaskCreate, TaskOut, TaskUpdate
from app.services.task_service import TaskService
from app.utils.auth import (
    filter_task_update, get_current_identity, require_manager_or_admin, require_self_or_privileged,
)

router = APIRouter(prefix="/tasks", tags=["Tasks"])


@router.get("/", response_model=Envelope[List[TaskOut]])
def get_all_tasks(
    status: Optional[TaskStatus] = None,
    priority: Optional[TaskPriority] = None,
    team_id: Optional[int] = None,
    assigned_to: Optional[int] = None,
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
):
    """Tasks ordered by due date (undated last); employees only see tasks assigned to them"""
    tasks = TaskService(db).list_for_caller(
        identity, status=status, priority=priority, team_id=team_id, assigned_to=assigned_to
    )
    return Envelope(data=tasks)


@router.post("/", response_model=Envelope[TaskOut], status_code=status.HTTP_201_CREATED)
def create_task(
    task: TaskCreate,
    db: Session = Depends(get_db),
    identity: Identity = Depends(require_manager_or_admin),
):
    db_task = TaskService(db).create_task(
        identity,
        title=task.title,
        description=task.description,
        team_id=task.team_id,
        assigned_to=task.assigned_to,
        due_date=task.due_date,
        priority=task.priority,
    )
    return Envelope(data=db_task, message="Task created successfully")


@router.put("/", response_model=Envelope[BulkUpdateResult])
def bulk_update_tasks(
    payload: TaskBulkUpdate,
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
):
    service = TaskService(db)
    tasks = service.get_tasks(payload.task_ids)
    for task in tasks:
        require_self_or_privileged(identity, task.assigned_to)
    changes = filter_task_update(identity, payload.updates.model_dump(exclude_unset=True))
    updated = service.bulk_update(tasks, changes, acting_user_id=identity.id)
    return Envelope(data=BulkUpdateResult(updated=updated))


@router.get("/{task_id}", response_model=Envelope[TaskOut])
def get_task(task_id: int, db: Session = Depends(get_db), identity: Identity = Depends(get_current_identity)):
    task = TaskService(db).get_task(task_id)
    require_self_or_privileged(identity, task.assigned_to)
    return Envelope(data=task)


@router.put("/{task_id}", response_model=Envelope[TaskOut])
def update_task(
    task_id: int,
    task_update: TaskUpdate,
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
):
    """Assignees may move the status; managers and admins may change anything"""
    service = TaskService(db)
    task = service.get_task(task_id)
    require_self_or_privileged(identity, task.assigned_to)
    changes = filter_task_update(identity, task_update.model_dump(exclude_unset=True))
    return Envelope(data=service.update_task(task_id, changes, acting_user_id=identity.id))


@router.delete("/{task_id}", response_model=Envelope)
def delete_task(
    task_id: int,
    db: Session = Depends(get_db),
    identity: Identity = Depends(require_manager_or_admin),
):
    TaskService(db).delete_task(task_id, acting_user_id=identity.id)
    return Envelope(message="Task deleted successfully")
