"""Direct message model"""
from sqlalchemy import JSON, Boolean, Column, DateTime, ForeignKey, Integer, Text

from portal.database import Base


class Message(Base):
    __tablename__ = "messages"
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    sender_id = Column(Integer, nullable=False, index=True)
    receiver_id = Column(Integer, nullable=False, index=True)
    project_id = Column(Integer, ForeignKey("projects.id"), nullable=True, index=True)
    content = Column(Text, nullable=False)
    is_read = Column(Boolean, default=False, nullable=False)
    attachments = Column(JSON, nullable=False)
    created_at = Column(DateTime, nullable=False)
