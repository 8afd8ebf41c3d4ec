"""
Project Phase Model
"""
from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text

from portal.database import Base


class ProjectPhase(Base):
    __tablename__ = "project_phases"
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    project_id = Column(Integer, ForeignKey("projects.id"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    status = Column(String(50), default="pending", nullable=False)  # pending, in_progress, completed
    start_date = Column(DateTime, nullable=True)
    end_date = Column(DateTime, nullable=True)
    order = Column(Integer, nullable=False)
