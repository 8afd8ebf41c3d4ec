import pytest

from portal.access import (
    FINANCE_DOCUMENTS,
    MESSAGE_RECEIPTS,
    PROJECTS,
    SUPPORT_TICKETS,
    TASKS,
    Owner,
    Policy,
    Role,
    authorize,
    is_allowed,
    owned_project_ids,
    require_role,
    scope_for,
)
from portal.errors import Forbidden, NotFound
from portal.models import User
from portal.schemas.common import Role as RoleName
from portal.services import projects as project_service
from portal.services import tasks as task_service
from tests.factories import make_project, make_task


@pytest.fixture
def portfolio(repository, people):
    """Three projects: two for ``client`` (one managed by ``manager``) and one for ``other_client``."""
    return [
        make_project(repository, people.client, people.manager, name="Managed"),
        make_project(repository, people.client, name="Unmanaged"),
        make_project(repository, people.other_client, people.other_manager, name="Foreign"),
    ]


def test_client_lists_exactly_their_projects(repository, people, portfolio):
    for user in (people.client, people.other_client):
        listed = {p.id for p in project_service.list_projects(repository, user)}
        expected = {p.id for p in repository.list_projects() if p.client_id == user.id}
        assert listed == expected


def test_manager_lists_exactly_managed_projects(repository, people, portfolio):
    for user in (people.manager, people.other_manager):
        listed = {p.id for p in project_service.list_projects(repository, user)}
        expected = {p.id for p in repository.list_projects() if p.manager_id == user.id}
        assert listed == expected


def test_admin_lists_everything(repository, people, portfolio):
    assert len(project_service.list_projects(repository, people.admin)) == 3
    assert scope_for(repository, people.admin, PROJECTS) is None
    assert owned_project_ids(repository, people.admin) is None


def test_owned_project_ids(repository, people, portfolio):
    managed, unmanaged, foreign = portfolio
    assert owned_project_ids(repository, people.client) == {managed.id, unmanaged.id}
    assert owned_project_ids(repository, people.manager) == {managed.id}
    assert owned_project_ids(repository, people.other_manager) == {foreign.id}


def test_unassigned_manager_is_forbidden_admin_is_allowed(repository, people):
    project = project_service.create_project(
        repository, people.client, {"name": "P1", "start_date": "2024-01-01T00:00:00"}
    )
    assert project.client_id == people.client.id

    with pytest.raises(Forbidden):
        project_service.get_project(repository, people.manager, project.id)
    assert project_service.get_project(repository, people.admin, project.id) == project


def test_missing_project_is_not_found_foreign_is_forbidden(repository, people, portfolio):
    foreign = portfolio[2]
    # Existence is visible to callers without access
    with pytest.raises(NotFound):
        project_service.get_project(repository, people.client, 999)
    with pytest.raises(Forbidden):
        project_service.get_project(repository, people.client, foreign.id)


def test_tasks_follow_their_project(repository, people, portfolio):
    managed, unmanaged, foreign = portfolio
    tasks = {project.name: make_task(repository, project, people.admin) for project in portfolio}

    assert is_allowed(repository, people.client, TASKS, tasks["Managed"])
    assert is_allowed(repository, people.client, TASKS, tasks["Unmanaged"])
    assert not is_allowed(repository, people.client, TASKS, tasks["Foreign"])
    assert is_allowed(repository, people.manager, TASKS, tasks["Managed"])
    assert not is_allowed(repository, people.manager, TASKS, tasks["Unmanaged"])

    listed = {t.id for t in task_service.list_tasks(repository, people.manager)}
    assert listed == {tasks["Managed"].id}

    with pytest.raises(Forbidden):
        task_service.get_task(repository, people.other_client, tasks["Managed"].id)


def test_task_listing_for_foreign_project_is_forbidden_not_empty(repository, people, portfolio):
    with pytest.raises(Forbidden):
        task_service.list_tasks(repository, people.client, project_id=portfolio[2].id)


def test_finance_rules_differ_per_role(repository, people, portfolio):
    managed = portfolio[0]
    own = {"client_id": people.client.id, "project_id": None}
    linked = {"client_id": people.other_client.id, "project_id": managed.id}

    assert is_allowed(repository, people.client, FINANCE_DOCUMENTS, own)
    assert not is_allowed(repository, people.client, FINANCE_DOCUMENTS, linked)
    assert is_allowed(repository, people.manager, FINANCE_DOCUMENTS, linked)
    # A manager cannot reach documents that are not tied to one of their projects
    assert not is_allowed(repository, people.manager, FINANCE_DOCUMENTS, own)


def test_support_tickets_visible_to_every_manager(repository, people):
    ticket = {"client_id": people.client.id}
    assert is_allowed(repository, people.other_manager, SUPPORT_TICKETS, ticket)
    assert not is_allowed(repository, people.other_client, SUPPORT_TICKETS, ticket)
    assert scope_for(repository, people.manager, SUPPORT_TICKETS) is None


def test_only_receiver_holds_message_receipts(repository, people):
    message = {"sender_id": people.client.id, "receiver_id": people.manager.id}
    assert is_allowed(repository, people.manager, MESSAGE_RECEIPTS, message)
    assert not is_allowed(repository, people.client, MESSAGE_RECEIPTS, message)


def test_role_without_rule_is_denied(repository, people):
    clients_only = Policy("note", client=Owner("client_id"))
    note = {"id": 1, "client_id": people.manager.id}

    assert not is_allowed(repository, people.manager, clients_only, note)
    with pytest.raises(Forbidden):
        authorize(repository, people.manager, clients_only, note)
    assert scope_for(repository, people.manager, clients_only).values == frozenset()
    assert is_allowed(repository, people.admin, clients_only, note)


def test_require_role(people):
    require_role(people.admin, Role.ADMIN)
    require_role(people.manager, Role.ADMIN, Role.MANAGER)
    with pytest.raises(Forbidden):
        require_role(people.client, Role.ADMIN, Role.MANAGER)


def test_role_enum_matches_stored_and_validated_roles():
    assert User.__table__.c.role.default.arg == Role.CLIENT.value
    assert set(RoleName.__args__) == {role.value for role in Role}
