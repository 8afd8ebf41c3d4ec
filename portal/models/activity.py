"""Activity model (append-only audit trail)"""
from sqlalchemy import JSON, Column, DateTime, Integer, String, Text

from portal.database import Base


class Activity(Base):
    __tablename__ = "activities"
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    user_id = Column(Integer, nullable=False, index=True)
    action_type = Column(String(50), nullable=False)  # task_created, project_updated, message_sent, ...
    resource_type = Column(String(50), nullable=False)  # task, project, message, ...
    resource_id = Column(Integer, nullable=False)
    project_id = Column(Integer, nullable=True, index=True)
    description = Column(Text, nullable=False)
    # ``metadata`` is reserved on declarative classes
    details = Column("metadata", JSON, nullable=False)
    created_at = Column(DateTime, nullable=False, index=True)
