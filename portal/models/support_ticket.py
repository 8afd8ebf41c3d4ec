"""Support ticket model"""
from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text

from portal.database import Base


class SupportTicket(Base):
    __tablename__ = "support_tickets"
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    client_id = Column(Integer, nullable=False, index=True)
    project_id = Column(Integer, ForeignKey("projects.id"), nullable=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    status = Column(String(20), default="open", nullable=False)  # open, in_progress, closed
    priority = Column(String(20), default="medium", nullable=False)
    assigned_to_id = Column(Integer, nullable=True)
    created_at = Column(DateTime, nullable=False)
    updated_at = Column(DateTime, nullable=True)
    closed_at = Column(DateTime, nullable=True)
