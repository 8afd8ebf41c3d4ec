"""
Project Model
"""
from sqlalchemy import CheckConstraint, Column, DateTime, Integer, String, Text

from portal.database import Base


class Project(Base):
    __tablename__ = "projects"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    domain = Column(String(255), nullable=True)
    description = Column(Text, nullable=True)
    status = Column(String(50), default="new", nullable=False)  # new, in_progress, paused, completed, archived
    progress = Column(Integer, default=0, nullable=False)
    start_date = Column(DateTime, nullable=False)
    end_date = Column(DateTime, nullable=True)
    current_phase = Column(String(255), nullable=True)
    # Users can be deleted without cleanup, so user references carry no foreign key
    client_id = Column(Integer, nullable=False, index=True)
    manager_id = Column(Integer, nullable=True, index=True)

    __table_args__ = (
        CheckConstraint("progress >= 0 AND progress <= 100", name="ck_project_progress"),
        {"sqlite_autoincrement": True},
    )
