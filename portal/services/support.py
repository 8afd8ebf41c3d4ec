"""Support tickets."""
from typing import List, Optional

from portal import activity
from portal.access import SUPPORT_TICKETS, Role, authorize, require_role, scope_for
from portal.errors import Payload, parse_payload
from portal.repository import Repository
from portal.schemas import SupportTicketCreate, SupportTicketOut, SupportTicketUpdate, UserOut
from portal.schemas.common import utcnow
from portal.services.projects import linked_project


def list_support_tickets(
    repository: Repository,
    caller: UserOut,
    status: Optional[str] = None,
) -> List[SupportTicketOut]:
    filters = {"status": status} if status else {}
    return repository.list_records("support_ticket", scope_for(repository, caller, SUPPORT_TICKETS), **filters)


def get_support_ticket(repository: Repository, caller: UserOut, ticket_id: int) -> SupportTicketOut:
    ticket = repository.require("support_ticket", ticket_id)
    authorize(repository, caller, SUPPORT_TICKETS, ticket)
    return ticket


def create_support_ticket(repository: Repository, caller: UserOut, data: Payload) -> SupportTicketOut:
    values = parse_payload(SupportTicketCreate, data).model_dump()
    linked_project(repository, caller, values["project_id"])
    values["client_id"] = caller.id
    ticket = repository.create("support_ticket", values)
    activity.record(
        repository,
        caller.id,
        "support_ticket_created",
        "support_ticket",
        ticket.id,
        project_id=ticket.project_id,
        description=f'Support ticket "{ticket.title}" was created',
    )
    return ticket


def update_support_ticket(
    repository: Repository,
    caller: UserOut,
    ticket_id: int,
    data: Payload,
) -> SupportTicketOut:
    """Triage a ticket. Status only moves forward; ``closed_at`` is stamped on close."""
    require_role(caller, Role.ADMIN, Role.MANAGER)
    current = get_support_ticket(repository, caller, ticket_id)
    changes = parse_payload(SupportTicketUpdate, data).model_dump(exclude_unset=True)
    if not changes:
        return current

    changes["updated_at"] = utcnow()
    ticket = repository.update("support_ticket", ticket_id, changes)
    activity.record(
        repository,
        caller.id,
        "support_ticket_updated",
        "support_ticket",
        ticket.id,
        project_id=ticket.project_id,
        description=f'Support ticket "{ticket.title}" was updated',
        metadata={"status": ticket.status},
    )
    return ticket
