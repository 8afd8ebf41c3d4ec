"""Request-scoped dependencies shared by every router."""
from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from portal.repository import Repository
from portal.schemas import UserAccount
from portal.sessions import SessionManager

# auto_error is off so a missing header surfaces as our own 401 body
bearer = HTTPBearer(auto_error=False)


def get_repository(request: Request) -> Repository:
    return request.app.state.repository


def get_sessions(request: Request) -> SessionManager:
    return request.app.state.sessions


def get_token(credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer)) -> Optional[str]:
    return credentials.credentials if credentials else None


def get_current_user(
    token: Optional[str] = Depends(get_token),
    sessions: SessionManager = Depends(get_sessions),
) -> UserAccount:
    """Resolve the bearer token on every request; nothing is cached between calls."""
    return sessions.resolve(token)
