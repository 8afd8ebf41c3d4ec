"""Support ticket endpoints"""
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from portal.api.dependencies import get_current_user, get_repository
from portal.repository import Repository
from portal.schemas import SupportTicketCreate, SupportTicketOut, SupportTicketUpdate, UserAccount
from portal.schemas.support import TicketStatus
from portal.services import support as support_service

router = APIRouter()


@router.get("", response_model=List[SupportTicketOut])
def list_support_tickets(
    ticket_status: Optional[TicketStatus] = Query(None, alias="status"),
    current_user: UserAccount = Depends(get_current_user),
    repository: Repository = Depends(get_repository),
):
    return support_service.list_support_tickets(repository, current_user, status=ticket_status)


@router.post("", response_model=SupportTicketOut, status_code=status.HTTP_201_CREATED)
def create_support_ticket(
    payload: SupportTicketCreate,
    current_user: UserAccount = Depends(get_current_user),
    repository: Repository = Depends(get_repository),
):
    return support_service.create_support_ticket(repository, current_user, payload)


@router.get("/{ticket_id}", response_model=SupportTicketOut)
def get_support_ticket(
    ticket_id: int,
    current_user: UserAccount = Depends(get_current_user),
    repository: Repository = Depends(get_repository),
):
    return support_service.get_support_ticket(repository, current_user, ticket_id)


@router.patch("/{ticket_id}", response_model=SupportTicketOut)
def update_support_ticket(
    ticket_id: int,
    payload: SupportTicketUpdate,
    current_user: UserAccount = Depends(get_current_user),
    repository: Repository = Depends(get_repository),
):
    return support_service.update_support_ticket(repository, current_user, ticket_id, payload)
