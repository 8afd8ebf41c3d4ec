"""Schemas for support tickets"""
from typing import Literal, Optional

from pydantic import BaseModel, Field

from portal.schemas.common import Priority, Timestamp

TicketStatus = Literal["open", "in_progress", "closed"]

# Tickets only ever move forward through these states
TICKET_STATUS_ORDER = ("open", "in_progress", "closed")


class SupportTicketCreate(BaseModel):
    project_id: Optional[int] = None
    title: str = Field(..., min_length=1, max_length=255)
    description: str = Field(..., min_length=1)
    priority: Priority = "medium"


class SupportTicketUpdate(BaseModel):
    status: Optional[TicketStatus] = None
    priority: Optional[Priority] = None
    assigned_to_id: Optional[int] = None


class SupportTicketOut(BaseModel):
    id: int
    client_id: int
    project_id: Optional[int] = None
    title: str
    description: str
    status: TicketStatus
    priority: Priority
    assigned_to_id: Optional[int] = None
    created_at: Timestamp
    updated_at: Optional[Timestamp] = None
    closed_at: Optional[Timestamp] = None

    class Config:
        from_attributes = True
