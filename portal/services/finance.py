"""Invoices, receipts and contracts."""
import logging
from typing import List, Optional

from portal import activity
from portal.access import FINANCE_DOCUMENTS, Role, authorize, scope_for
from portal.errors import Forbidden, Payload, ValidationFailed, parse_payload
from portal.repository import Repository
from portal.schemas import FinanceDocumentCreate, FinanceDocumentOut, UserOut
from portal.services.projects import linked_project

logger = logging.getLogger(__name__)


def list_finance_documents(
    repository: Repository,
    caller: UserOut,
    project_id: Optional[int] = None,
) -> List[FinanceDocumentOut]:
    filters = {}
    if project_id is not None:
        linked_project(repository, caller, project_id)
        filters["project_id"] = project_id
    return repository.list_records(
        "finance_document", scope_for(repository, caller, FINANCE_DOCUMENTS), **filters
    )


def create_finance_document(repository: Repository, caller: UserOut, data: Payload) -> FinanceDocumentOut:
    values = parse_payload(FinanceDocumentCreate, data).model_dump()
    if caller.role == Role.CLIENT.value:
        if values["client_id"] is not None and values["client_id"] != caller.id:
            logger.warning("Client %s tried to file a document for client %s", caller.id, values["client_id"])
            raise Forbidden("You can only create documents for yourself")
        values["client_id"] = caller.id
    elif values["client_id"] is None:
        raise ValidationFailed.for_field("client_id", "client_id is required")

    linked_project(repository, caller, values["project_id"])
    authorize(repository, caller, FINANCE_DOCUMENTS, values)
    document = repository.create("finance_document", values)
    activity.record(
        repository,
        caller.id,
        "finance_document_created",
        "finance_document",
        document.id,
        project_id=document.project_id,
        description=f'Finance document "{document.name}" was created',
        metadata={"type": document.type, "client_id": document.client_id},
    )
    return document
