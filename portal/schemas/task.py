"""Schemas for tasks"""
from typing import List, Optional

from pydantic import BaseModel, Field

from portal.schemas.common import Priority, Timestamp


class TaskCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    status: str = Field("new", min_length=1, max_length=50)
    priority: Priority = "medium"
    project_id: int
    assigned_to_id: Optional[int] = None
    due_date: Optional[Timestamp] = None
    attachments: List[str] = Field(default_factory=list)


class TaskUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    status: Optional[str] = Field(None, min_length=1, max_length=50)
    priority: Optional[Priority] = None
    assigned_to_id: Optional[int] = None
    due_date: Optional[Timestamp] = None
    attachments: Optional[List[str]] = None


class TaskOut(BaseModel):
    id: int
    title: str
    description: Optional[str] = None
    status: str
    priority: Priority
    project_id: int
    created_by_id: int
    assigned_to_id: Optional[int] = None
    due_date: Optional[Timestamp] = None
    attachments: List[str] = Field(default_factory=list)
    comment_count: int = Field(..., ge=0)
    created_at: Timestamp

    class Config:
        from_attributes = True
