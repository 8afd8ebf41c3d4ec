"""Registration, login and password management for the caller."""
import logging
from typing import Dict, Optional

from portal import activity, credentials
from portal.errors import Payload, ValidationFailed, parse_payload
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
from portal.sessions import SessionManager

logger = logging.getLogger(__name__)


def register(repository: Repository, data: Payload) -> UserOut:
    """Self-service sign up; always creates a client account."""
    payload = parse_payload(RegisterRequest, data)
    user = credentials.create_user(repository, {**payload.model_dump(), "role": "client"})
    activity.record(
        repository,
        user.id,
        "user_registered",
        "user",
        user.id,
        description=f"{user.full_name} registered",
    )
    return user.public()


def login(sessions: SessionManager, data: Payload) -> LoginResponse:
    payload = parse_payload(UserLogin, data)
    token, user = sessions.login(payload.email, payload.password)
    return LoginResponse(token=token, user=user.public())


def logout(sessions: SessionManager, token: Optional[str]) -> None:
    sessions.logout(token)


def current_user(sessions: SessionManager, token: Optional[str]) -> UserAccount:
    return sessions.resolve(token)


def request_password_reset(sessions: SessionManager, data: Payload) -> Dict[str, str]:
    payload = parse_payload(PasswordResetRequest, data)
    return {"message": sessions.request_password_reset(payload.email)}


def change_password(repository: Repository, caller: UserAccount, data: Payload) -> Dict[str, str]:
    payload = parse_payload(PasswordChange, data)
    # Re-read so a hash changed by another session is honoured
    account = repository.get_user(caller.id) or caller
    if not credentials.verify_password(payload.current_password, account.password_hash):
        logger.info("Password change rejected for user %s", caller.id)
        raise ValidationFailed.for_field("current_password", "Current password is incorrect")
    credentials.check_password(payload.new_password, field="new_password")

    repository.update("user", caller.id, {"password_hash": credentials.hash_password(payload.new_password)})
    activity.record(
        repository,
        caller.id,
        "password_changed",
        "user",
        caller.id,
        description="Password changed",
    )
    return {"message": "Password updated successfully"}
