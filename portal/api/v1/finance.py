"""Finance document endpoints"""
from typing import List, Optional

from fastapi import APIRouter, Depends, status

from portal.api.dependencies import get_current_user, get_repository
from portal.repository import Repository
from portal.schemas import FinanceDocumentCreate, FinanceDocumentOut, UserAccount
from portal.services import finance as finance_service

router = APIRouter()


@router.get("", response_model=List[FinanceDocumentOut])
def list_finance_documents(
    project_id: Optional[int] = None,
    current_user: UserAccount = Depends(get_current_user),
    repository: Repository = Depends(get_repository),
):
    return finance_service.list_finance_documents(repository, current_user, project_id=project_id)


@router.post("", response_model=FinanceDocumentOut, status_code=status.HTTP_201_CREATED)
def create_finance_document(
    payload: FinanceDocumentCreate,
    current_user: UserAccount = Depends(get_current_user),
    repository: Repository = Depends(get_repository),
):
    return finance_service.create_finance_document(repository, current_user, payload)
