"""Client Portal Database Models"""
from portal.models.user import User
from portal.models.project import Project
from portal.models.project_phase import ProjectPhase
from portal.models.task import Task
from portal.models.task_comment import TaskComment
from portal.models.message import Message
from portal.models.activity import Activity
from portal.models.project_file import ProjectFile
from portal.models.finance_document import FinanceDocument
from portal.models.support_ticket import SupportTicket
from portal.models.user_session import UserSession

__all__ = [
    "User",
    "Project",
    "ProjectPhase",
    "Task",
    "TaskComment",
    "Message",
    "Activity",
    "ProjectFile",
    "FinanceDocument",
    "SupportTicket",
    "UserSession",
]
