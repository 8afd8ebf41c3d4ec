"""Schemas for finance documents"""
from typing import Literal, Optional

from pydantic import BaseModel, Field

from portal.schemas.common import Timestamp

DocumentType = Literal["invoice", "receipt", "contract"]
DocumentStatus = Literal["pending", "paid", "overdue"]


class FinanceDocumentCreate(BaseModel):
    # Forced to the caller's id for clients
    client_id: Optional[int] = None
    project_id: Optional[int] = None
    type: DocumentType
    name: str = Field(..., min_length=1, max_length=255)
    path: str = Field(..., min_length=1, max_length=500)
    amount: Optional[int] = Field(None, ge=0)
    status: DocumentStatus = "pending"
    due_date: Optional[Timestamp] = None


class FinanceDocumentOut(BaseModel):
    id: int
    client_id: int
    project_id: Optional[int] = None
    type: DocumentType
    name: str
    path: str
    amount: Optional[int] = None
    status: DocumentStatus
    due_date: Optional[Timestamp] = None
    created_at: Timestamp

    class Config:
        from_attributes = True
