from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime
from app.models.task import TaskStatus, TaskPriority
from .user import UserBasic


class TeamCreate(BaseModel):
    name: str = Field(min_length=1)
    lead_id: Optional[int] = None
    member_ids: List[int] = []


class TeamUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    lead_id: Optional[int] = None

    model_config = {
        "from_attributes": True
    }


class TeamMembers(BaseModel):
    user_ids: List[int] = Field(min_length=1)


class TeamTask(BaseModel):
    id: int
    title: str
    status: TaskStatus
    priority: TaskPriority
    due_date: Optional[datetime] = None
    assigned_to: Optional[int] = None

    model_config = {
        "from_attributes": True
    }


class TeamOut(BaseModel):
    id: int
    name: str
    lead_id: Optional[int] = None
    members: List[UserBasic]
    member_count: int
    task_count: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {
        "from_attributes": True
    }


class TeamDetail(TeamOut):
    tasks: List[TeamTask] = []
