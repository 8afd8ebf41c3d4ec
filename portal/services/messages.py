"""Direct messages between users."""
from typing import List, Optional

from portal import activity
from portal.access import MESSAGE_RECEIPTS, MESSAGES, authorize
from portal.errors import NotFound, Payload, parse_payload
from portal.repository import Repository, Scope
from portal.schemas import MessageCreate, MessageOut, UserOut
from portal.services.projects import linked_project

PARTICIPANTS = ("sender_id", "receiver_id")


def list_messages(
    repository: Repository,
    caller: UserOut,
    partner_id: Optional[int] = None,
    project_id: Optional[int] = None,
) -> List[MessageOut]:
    """Conversations the caller takes part in, oldest first.

    Admins get no wider view here; a mailbox is personal.
    """
    scopes = [Scope.of(PARTICIPANTS, [caller.id])]
    filters = {}
    if partner_id == caller.id:
        # Notes to self: the caller is on both ends
        filters.update(sender_id=caller.id, receiver_id=caller.id)
    elif partner_id is not None:
        scopes.append(Scope.of(PARTICIPANTS, [partner_id]))
    if project_id is not None:
        linked_project(repository, caller, project_id)
        filters["project_id"] = project_id
    return repository.list_records("message", *scopes, **filters)


def send_message(repository: Repository, caller: UserOut, data: Payload) -> MessageOut:
    payload = parse_payload(MessageCreate, data)
    if repository.get_user(payload.receiver_id) is None:
        raise NotFound("Receiver not found")
    linked_project(repository, caller, payload.project_id)

    values = payload.model_dump()
    values.update(sender_id=caller.id, is_read=False)
    authorize(repository, caller, MESSAGES, values)
    message = repository.create("message", values)
    activity.record(
        repository,
        caller.id,
        "message_sent",
        "message",
        message.id,
        project_id=message.project_id,
        description="Message sent",
        metadata={"receiver_id": message.receiver_id},
    )
    return message


def mark_read(repository: Repository, caller: UserOut, message_id: int) -> MessageOut:
    """Mark a received message read. Repeating it changes nothing and records nothing."""
    message = repository.require("message", message_id)
    authorize(repository, caller, MESSAGE_RECEIPTS, message)
    if message.is_read:
        return message

    message = repository.mark_message_read(message_id)
    activity.record(
        repository,
        caller.id,
        "message_read",
        "message",
        message.id,
        project_id=message.project_id,
        description="Message read",
    )
    return message
