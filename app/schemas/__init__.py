from .envelope import Envelope
from .tokens import Identity, LoginResult
from .user import (
    UserRegister, UserLogin, UserCreate, UserSelfUpdate, UserUpdate, UserBasic, UserOut,
    UserProfile, PendingRegistrationOut, ApprovalDecision, TeamBrief,
)
from .team import TeamCreate, TeamUpdate, TeamMembers, TeamOut, TeamDetail
from .task import TaskCreate, TaskUpdate, TaskBulkUpdate, BulkUpdateResult, TaskOut
