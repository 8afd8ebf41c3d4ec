"""Schemas for direct messages"""
from typing import List, Optional

from pydantic import BaseModel, Field

from portal.schemas.common import Timestamp


class MessageCreate(BaseModel):
    receiver_id: int
    content: str = Field(..., min_length=1)
    project_id: Optional[int] = None
    attachments: List[str] = Field(default_factory=list)


class MessageOut(BaseModel):
    id: int
    sender_id: int
    receiver_id: int
    project_id: Optional[int] = None
    content: str
    is_read: bool
    attachments: List[str] = Field(default_factory=list)
    created_at: Timestamp

    class Config:
        from_attributes = True
