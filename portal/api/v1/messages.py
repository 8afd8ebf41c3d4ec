"""Direct message endpoints"""
from typing import List, Optional

from fastapi import APIRouter, Depends, status

from portal.api.dependencies import get_current_user, get_repository
from portal.repository import Repository
from portal.schemas import MessageCreate, MessageOut, UserAccount
from portal.services import messages as message_service

router = APIRouter()


@router.get("", response_model=List[MessageOut])
def list_messages(
    partner_id: Optional[int] = None,
    project_id: Optional[int] = None,
    current_user: UserAccount = Depends(get_current_user),
    repository: Repository = Depends(get_repository),
):
    return message_service.list_messages(repository, current_user, partner_id=partner_id, project_id=project_id)


@router.post("", response_model=MessageOut, status_code=status.HTTP_201_CREATED)
def send_message(
    payload: MessageCreate,
    current_user: UserAccount = Depends(get_current_user),
    repository: Repository = Depends(get_repository),
):
    return message_service.send_message(repository, current_user, payload)


@router.post("/{message_id}/read", response_model=MessageOut)
def mark_read(
    message_id: int,
    current_user: UserAccount = Depends(get_current_user),
    repository: Repository = Depends(get_repository),
):
    return message_service.mark_read(repository, current_user, message_id)
