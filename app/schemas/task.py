from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime
from app.models.task import TaskStatus, TaskPriority
from .user import UserBasic, TeamBrief


class TaskCreate(BaseModel):
    title: str = Field(min_length=1)
    description: str = Field(min_length=1)
    team_id: int
    assigned_to: Optional[int] = None
    due_date: Optional[datetime] = None
    priority: TaskPriority = TaskPriority.MEDIUM


class TaskUpdate(BaseModel):
    """Partial update; only the keys the client sent are applied"""
    title: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = Field(default=None, min_length=1)
    status: Optional[TaskStatus] = None
    priority: Optional[TaskPriority] = None
    due_date: Optional[datetime] = None
    assigned_to: Optional[int] = None
    team_id: Optional[int] = None


class TaskBulkUpdate(BaseModel):
    task_ids: List[int] = Field(min_length=1)
    updates: TaskUpdate


class BulkUpdateResult(BaseModel):
    updated: int


class TaskOut(BaseModel):
    id: int
    title: str
    description: str
    status: TaskStatus
    priority: TaskPriority
    due_date: Optional[datetime] = None
    assigned_by: Optional[int] = None
    assigned_to: Optional[int] = None
    team_id: int
    assignee: Optional[UserBasic] = None
    team: TeamBrief
    created_at: datetime
    updated_at: Optional[datetime] = None

    model_config = {
        "from_attributes": True
    }
