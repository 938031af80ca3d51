from .user import User, UserRole
from .team import Team
from .task import Task, TaskStatus, TaskPriority
from .pending_registration import PendingRegistration
