"""Schemas for projects, their phases and their files"""
from typing import Literal, Optional

from pydantic import BaseModel, Field

from portal.schemas.common import Timestamp

ProjectStatus = Literal["new", "in_progress", "paused", "completed", "archived"]
PhaseStatus = Literal["pending", "in_progress", "completed"]


class ProjectCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    domain: Optional[str] = None
    description: Optional[str] = None
    status: ProjectStatus = "new"
    progress: int = Field(0, ge=0, le=100)
    start_date: Timestamp
    end_date: Optional[Timestamp] = None
    current_phase: Optional[str] = None
    # Filled with the caller's id when a client creates the project
    client_id: Optional[int] = None
    manager_id: Optional[int] = None


class ProjectUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    domain: Optional[str] = None
    description: Optional[str] = None
    status: Optional[ProjectStatus] = None
    progress: Optional[int] = Field(None, ge=0, le=100)
    start_date: Optional[Timestamp] = None
    end_date: Optional[Timestamp] = None
    current_phase: Optional[str] = None
    client_id: Optional[int] = None
    manager_id: Optional[int] = None


class ProjectOut(BaseModel):
    id: int
    name: str
    domain: Optional[str] = None
    description: Optional[str] = None
    status: ProjectStatus
    progress: int = Field(..., ge=0, le=100)
    start_date: Timestamp
    end_date: Optional[Timestamp] = None
    current_phase: Optional[str] = None
    client_id: int
    manager_id: Optional[int] = None

    class Config:
        from_attributes = True


class PhaseCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    status: PhaseStatus = "pending"
    start_date: Optional[Timestamp] = None
    end_date: Optional[Timestamp] = None
    order: int = Field(..., ge=0)


class PhaseUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    status: Optional[PhaseStatus] = None
    start_date: Optional[Timestamp] = None
    end_date: Optional[Timestamp] = None
    order: Optional[int] = Field(None, ge=0)


class PhaseOut(BaseModel):
    id: int
    project_id: int
    name: str
    description: Optional[str] = None
    status: PhaseStatus
    start_date: Optional[Timestamp] = None
    end_date: Optional[Timestamp] = None
    order: int

    class Config:
        from_attributes = True


class FileCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    type: str = Field(..., min_length=1, max_length=50)
    path: str = Field(..., min_length=1, max_length=500)
    size: int = Field(..., ge=0)


class FileOut(BaseModel):
    id: int
    project_id: int
    name: str
    type: str
    path: str
    size: int
    uploaded_by_id: int
    created_at: Timestamp

    class Config:
        from_attributes = True
