"""Project file model (metadata only, contents live elsewhere)"""
from sqlalchemy import Column, DateTime, ForeignKey, Integer, String

from portal.database import Base


class ProjectFile(Base):
    __tablename__ = "project_files"
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    project_id = Column(Integer, ForeignKey("projects.id"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    type = Column(String(50), nullable=False)  # brief, design, mockup, ...
    path = Column(String(500), nullable=False)
    size = Column(Integer, nullable=False)
    uploaded_by_id = Column(Integer, nullable=False)
    created_at = Column(DateTime, nullable=False)
