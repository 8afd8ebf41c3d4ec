"""
Pydantic schemas for request/response validation
"""
from portal.schemas.activity import ActivityOut
from portal.schemas.comment import TaskCommentCreate, TaskCommentOut
from portal.schemas.finance import FinanceDocumentCreate, FinanceDocumentOut
from portal.schemas.message import MessageCreate, MessageOut
from portal.schemas.project import (
    FileCreate,
    FileOut,
    PhaseCreate,
    PhaseOut,
    PhaseUpdate,
    ProjectCreate,
    ProjectOut,
    ProjectUpdate,
)
from portal.schemas.support import SupportTicketCreate, SupportTicketOut, SupportTicketUpdate
from portal.schemas.task import TaskCreate, TaskOut, TaskUpdate
from portal.schemas.user import (
    ContactOut,
    LoginResponse,
    PasswordChange,
    PasswordResetRequest,
    PasswordSet,
    RegisterRequest,
    SessionOut,
    UserAccount,
    UserCreate,
    UserLogin,
    UserOut,
    UserUpdate,
)

__all__ = [
    "ActivityOut",
    "TaskCommentCreate",
    "TaskCommentOut",
    "FinanceDocumentCreate",
    "FinanceDocumentOut",
    "MessageCreate",
    "MessageOut",
    "FileCreate",
    "FileOut",
    "PhaseCreate",
    "PhaseOut",
    "PhaseUpdate",
    "ProjectCreate",
    "ProjectOut",
    "ProjectUpdate",
    "SupportTicketCreate",
    "SupportTicketOut",
    "SupportTicketUpdate",
    "TaskCreate",
    "TaskOut",
    "TaskUpdate",
    "ContactOut",
    "LoginResponse",
    "PasswordChange",
    "PasswordResetRequest",
    "PasswordSet",
    "RegisterRequest",
    "SessionOut",
    "UserAccount",
    "UserCreate",
    "UserLogin",
    "UserOut",
    "UserUpdate",
]
