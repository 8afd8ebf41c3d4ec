"""
Task Model
"""
from sqlalchemy import JSON, Column, DateTime, ForeignKey, Integer, String, Text

from portal.database import Base


class Task(Base):
    __tablename__ = "tasks"
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    status = Column(String(50), default="new", nullable=False)
    priority = Column(String(20), default="medium", nullable=False)  # low, medium, high
    project_id = Column(Integer, ForeignKey("projects.id"), nullable=False, index=True)
    created_by_id = Column(Integer, nullable=False)
    assigned_to_id = Column(Integer, nullable=True)
    due_date = Column(DateTime, nullable=True)
    attachments = Column(JSON, nullable=False)
    comment_count = Column(Integer, default=0, nullable=False)
    created_at = Column(DateTime, nullable=False)
