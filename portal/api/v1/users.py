"""User administration and contacts"""
from typing import List, Optional

from fastapi import APIRouter, Depends, Response, status

from portal.api.dependencies import get_current_user, get_repository
from portal.repository import Repository
from portal.schemas import ContactOut, PasswordSet, UserAccount, UserCreate, UserOut, UserUpdate
from portal.schemas.common import Role
from portal.services import users as user_service

router = APIRouter()


@router.get("", response_model=List[UserOut])
def list_users(
    role: Optional[Role] = None,
    current_user: UserAccount = Depends(get_current_user),
    repository: Repository = Depends(get_repository),
):
    return user_service.list_users(repository, current_user, role=role)


@router.post("", response_model=UserOut, status_code=status.HTTP_201_CREATED)
def create_user(
    payload: UserCreate,
    current_user: UserAccount = Depends(get_current_user),
    repository: Repository = Depends(get_repository),
):
    return user_service.create_user(repository, current_user, payload)


@router.get("/contacts", response_model=List[ContactOut])
def list_contacts(
    current_user: UserAccount = Depends(get_current_user),
    repository: Repository = Depends(get_repository),
):
    return user_service.list_contacts(repository, current_user)


@router.patch("/{user_id}", response_model=UserOut)
def update_user(
    user_id: int,
    payload: UserUpdate,
    current_user: UserAccount = Depends(get_current_user),
    repository: Repository = Depends(get_repository),
):
    return user_service.update_user(repository, current_user, user_id, payload)


@router.put("/{user_id}/password", response_model=UserOut)
def set_password(
    user_id: int,
    payload: PasswordSet,
    current_user: UserAccount = Depends(get_current_user),
    repository: Repository = Depends(get_repository),
):
    return user_service.set_password(repository, current_user, user_id, payload)


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_user(
    user_id: int,
    current_user: UserAccount = Depends(get_current_user),
    repository: Repository = Depends(get_repository),
):
    user_service.delete_user(repository, current_user, user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
