from pydantic import BaseModel, EmailStr, Field
from typing import List, Optional
from datetime import datetime
from app.models.user import UserRole
from app.models.task import TaskStatus, TaskPriority


class UserRegister(BaseModel):
    name: str = Field(min_length=1)
    email: EmailStr
    password: str = Field(min_length=1)


class UserLogin(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1)


class UserCreate(BaseModel):
    name: str = Field(min_length=1)
    email: EmailStr
    password: str = Field(min_length=1)
    role: UserRole = UserRole.EMPLOYEE
    team_id: Optional[int] = None


class UserSelfUpdate(BaseModel):
    """Fields a user may change about themselves; anything else is dropped"""
    name: Optional[str] = Field(default=None, min_length=1)
    email: Optional[EmailStr] = None


class UserUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    email: Optional[EmailStr] = None
    password: Optional[str] = Field(default=None, min_length=1)
    role: Optional[UserRole] = None
    team_id: Optional[int] = None


class TeamBrief(BaseModel):
    id: int
    name: str
    lead_id: Optional[int] = None

    model_config = {
        "from_attributes": True
    }


class UserBasic(BaseModel):
    id: int
    name: str
    email: str
    role: UserRole

    model_config = {
        "from_attributes": True
    }


class UserOut(BaseModel):
    id: int
    name: str
    email: str
    role: UserRole
    team_id: Optional[int] = None
    team: Optional[TeamBrief] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {
        "from_attributes": True
    }


class AssignedTask(BaseModel):
    id: int
    title: str
    description: str
    status: TaskStatus
    priority: TaskPriority
    due_date: Optional[datetime] = None
    assigned_by: Optional[int] = None
    team_id: int

    model_config = {
        "from_attributes": True
    }


class UserProfile(UserOut):
    assigned_tasks: List[AssignedTask] = []


class PendingRegistrationOut(BaseModel):
    id: int
    name: str
    email: str
    created_at: Optional[datetime] = None

    model_config = {
        "from_attributes": True
    }


class ApprovalDecision(BaseModel):
    pending_id: int
    approve: bool
