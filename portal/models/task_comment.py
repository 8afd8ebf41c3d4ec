"""Task comment model"""
from sqlalchemy import JSON, Column, DateTime, ForeignKey, Integer, Text

from portal.database import Base


class TaskComment(Base):
    __tablename__ = "task_comments"
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    task_id = Column(Integer, ForeignKey("tasks.id"), nullable=False, index=True)
    user_id = Column(Integer, nullable=False)
    content = Column(Text, nullable=False)
    attachments = Column(JSON, nullable=False)
    created_at = Column(DateTime, nullable=False)
