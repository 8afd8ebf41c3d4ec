"""Schemas for task comments"""
from typing import List

from pydantic import BaseModel, Field

from portal.schemas.common import Timestamp


class TaskCommentCreate(BaseModel):
    content: str = Field(..., min_length=1)
    attachments: List[str] = Field(default_factory=list)


class TaskCommentOut(BaseModel):
    id: int
    task_id: int
    user_id: int
    content: str
    attachments: List[str] = Field(default_factory=list)
    created_at: Timestamp

    class Config:
        from_attributes = True
