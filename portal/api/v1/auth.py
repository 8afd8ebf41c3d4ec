"""Authentication endpoints"""
from typing import Dict, Optional

from fastapi import APIRouter, Depends, Response, status

from portal.api.dependencies import get_current_user, get_repository, get_sessions, get_token
from portal.repository import Repository
from portal.schemas import (
    LoginResponse,
    PasswordChange,
    PasswordResetRequest,
    RegisterRequest,
    UserAccount,
    UserLogin,
    UserOut,
)
from portal.services import auth as auth_service
from portal.sessions import SessionManager

router = APIRouter()


@router.post("/register", response_model=UserOut, status_code=status.HTTP_201_CREATED)
def register(payload: RegisterRequest, repository: Repository = Depends(get_repository)):
    return auth_service.register(repository, payload)


@router.post("/login", response_model=LoginResponse)
def login(payload: UserLogin, sessions: SessionManager = Depends(get_sessions)):
    return auth_service.login(sessions, payload)


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
def logout(
    token: Optional[str] = Depends(get_token),
    sessions: SessionManager = Depends(get_sessions),
):
    auth_service.logout(sessions, token)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/me", response_model=UserOut)
def read_current_user(current_user: UserAccount = Depends(get_current_user)):
    return current_user.public()


@router.post("/password-reset", response_model=Dict[str, str])
def request_password_reset(payload: PasswordResetRequest, sessions: SessionManager = Depends(get_sessions)):
    return auth_service.request_password_reset(sessions, payload)


@router.post("/change-password", response_model=Dict[str, str])
def change_password(
    payload: PasswordChange,
    current_user: UserAccount = Depends(get_current_user),
    repository: Repository = Depends(get_repository),
):
    return auth_service.change_password(repository, current_user, payload)
