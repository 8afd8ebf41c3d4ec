"""Schemas for the activity feed"""
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field

from portal.schemas.common import Timestamp


class ActivityOut(BaseModel):
    id: int
    user_id: int
    action_type: str
    resource_type: str
    resource_id: int
    project_id: Optional[int] = None
    description: str
    metadata: Dict[str, Any] = Field(default_factory=dict)
    created_at: Timestamp

    class Config:
        from_attributes = True
