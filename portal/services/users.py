"""Administration of user accounts and the contact directory."""
import logging
from typing import List, Optional

from portal import activity, credentials
from portal.access import Role, require_role
from portal.errors import Forbidden, NotFound, Payload, parse_payload
from portal.repository import Repository
from portal.schemas import ContactOut, PasswordSet, UserCreate, UserOut, UserUpdate
from portal.sessions import SessionManager

logger = logging.getLogger(__name__)


def list_users(repository: Repository, caller: UserOut, role: Optional[str] = None) -> List[UserOut]:
    require_role(caller, Role.ADMIN)
    filters = {"role": role} if role else {}
    return [user.public() for user in repository.list_records("user", **filters)]


def create_user(repository: Repository, caller: UserOut, data: Payload) -> UserOut:
    require_role(caller, Role.ADMIN)
    user = credentials.create_user(repository, parse_payload(UserCreate, data))
    activity.record(
        repository,
        caller.id,
        "user_created",
        "user",
        user.id,
        description=f"User {user.email} was created",
        metadata={"role": user.role},
    )
    return user.public()


def update_user(repository: Repository, caller: UserOut, user_id: int, data: Payload) -> UserOut:
    """Profile edits by the user themselves, or any edit by an admin."""
    is_admin = caller.role == Role.ADMIN.value
    if user_id != caller.id and not is_admin:
        raise Forbidden()
    target = repository.get_user(user_id)
    if target is None:
        raise NotFound("User not found")

    changes = parse_payload(UserUpdate, data).model_dump(exclude_unset=True)
    if "role" in changes and changes["role"] != target.role and not is_admin:
        logger.warning("User %s tried to change their own role", caller.id)
        raise Forbidden("Only administrators can change roles")
    if not changes:
        return target.public()
    if "first_name" in changes or "last_name" in changes:
        changes["avatar_initials"] = credentials.avatar_initials(
            changes.get("first_name") or target.first_name,
            changes.get("last_name") or target.last_name,
        )

    user = repository.update("user", user_id, changes)
    activity.record(
        repository,
        caller.id,
        "user_updated",
        "user",
        user.id,
        description=f"User {user.email} was updated",
        metadata={"fields": sorted(changes)},
    )
    return user.public()


def set_password(repository: Repository, caller: UserOut, user_id: int, data: Payload) -> UserOut:
    """Admin reset of another account's password; its sessions are revoked."""
    require_role(caller, Role.ADMIN)
    payload = parse_payload(PasswordSet, data)
    credentials.check_password(payload.password)
    user = repository.update("user", user_id, {"password_hash": credentials.hash_password(payload.password)})
    SessionManager(repository).revoke_user_sessions(user_id)
    activity.record(
        repository,
        caller.id,
        "password_changed",
        "user",
        user_id,
        description=f"Password of {user.email} was reset",
    )
    return user.public()


def delete_user(repository: Repository, caller: UserOut, user_id: int) -> None:
    """Hard delete. Projects and messages that reference the user are kept."""
    require_role(caller, Role.ADMIN)
    if user_id == caller.id:
        raise Forbidden("You cannot delete your own account")
    user = repository.get_user(user_id)
    if user is None:
        raise NotFound("User not found")

    repository.delete_user(user_id)
    SessionManager(repository).revoke_user_sessions(user_id)
    activity.record(
        repository,
        caller.id,
        "user_deleted",
        "user",
        user_id,
        description=f"User {user.email} was deleted",
    )


def list_contacts(repository: Repository, caller: UserOut) -> List[ContactOut]:
    return [
        ContactOut(
            id=user.id,
            name=user.full_name,
            email=user.email,
            role=user.role,
            avatar_initials=user.avatar_initials,
        )
        for user in repository.list_records("user")
        if user.id != caller.id
    ]
