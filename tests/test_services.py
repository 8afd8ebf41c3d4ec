import pytest

from portal import credentials
from portal.credentials import verify_password
from portal.errors import Conflict, Forbidden, NotFound, Unauthenticated, ValidationFailed
from portal.schemas import TaskCommentCreate
from portal.services import activities as activity_service
from portal.services import auth as auth_service
from portal.services import finance as finance_service
from portal.services import messages as message_service
from portal.services import projects as project_service
from portal.services import support as support_service
from portal.services import tasks as task_service
from portal.services import users as user_service
from portal.sessions import SessionManager
from tests.factories import PASSWORD, make_project, make_task


def _actions(repository):
    return [entry.action_type for entry in repository.list_records("activity")]


# Auth


def test_register_always_creates_a_client(repository):
    user = auth_service.register(
        repository,
        {"email": "new@example.com", "password": PASSWORD, "first_name": "New", "last_name": "Person", "role": "admin"},
    )
    assert user.role == "client"
    assert not hasattr(user, "password_hash")
    assert _actions(repository) == ["user_registered"]


def test_register_reports_field_errors(repository):
    with pytest.raises(ValidationFailed) as exc:
        auth_service.register(repository, {"email": "not-an-email"})
    fields = {error["field"] for error in exc.value.errors}
    assert {"email", "password", "first_name", "last_name"} <= fields


def test_login_current_user_logout_roundtrip(repository, people):
    sessions = SessionManager(repository)
    response = auth_service.login(sessions, {"email": "client@example.com", "password": PASSWORD})
    assert response.token_type == "bearer"
    assert auth_service.current_user(sessions, response.token).id == people.client.id

    auth_service.logout(sessions, response.token)
    with pytest.raises(Unauthenticated):
        auth_service.current_user(sessions, response.token)


def test_change_password(repository, people):
    with pytest.raises(ValidationFailed) as exc:
        auth_service.change_password(
            repository, people.client, {"current_password": "wrong", "new_password": "brand-new-pass"}
        )
    assert exc.value.errors[0]["field"] == "current_password"

    auth_service.change_password(
        repository, people.client, {"current_password": PASSWORD, "new_password": "brand-new-pass"}
    )
    assert verify_password("brand-new-pass", repository.get_user(people.client.id).password_hash)
    assert _actions(repository) == ["password_changed"]



def test_register_and_change_password_use_the_configured_length(repository, people, monkeypatch):
    monkeypatch.setattr(credentials.settings, "PASSWORD_MIN_LENGTH", 3)
    user = auth_service.register(
        repository, {"email": "tiny@example.com", "password": "abc", "first_name": "T", "last_name": "Y"}
    )
    assert user.role == "client"
    auth_service.change_password(repository, people.client, {"current_password": PASSWORD, "new_password": "xyz"})
    assert verify_password("xyz", repository.get_user(people.client.id).password_hash)

    with pytest.raises(ValidationFailed) as exc:
        auth_service.change_password(repository, people.client, {"current_password": "xyz", "new_password": "no"})
    assert exc.value.errors[0]["field"] == "new_password"

# Users


def test_user_admin_operations_are_admin_only(repository, people):
    payload = {"email": "staff@example.com", "password": PASSWORD, "first_name": "S", "last_name": "T"}
    for caller in (people.client, people.manager):
        with pytest.raises(Forbidden):
            user_service.list_users(repository, caller)
        with pytest.raises(Forbidden):
            user_service.create_user(repository, caller, payload)
        with pytest.raises(Forbidden):
            user_service.delete_user(repository, caller, people.other_client.id)

    created = user_service.create_user(repository, people.admin, {**payload, "role": "manager"})
    assert created.role == "manager"
    managers = user_service.list_users(repository, people.admin, role="manager")
    assert {user.id for user in managers} == {people.manager.id, people.other_manager.id, created.id}


def test_create_user_duplicate_email_conflicts(repository, people):
    with pytest.raises(Conflict):
        user_service.create_user(
            repository,
            people.admin,
            {"email": "Client@Example.com", "password": PASSWORD, "first_name": "Dup", "last_name": "Licate"},
        )


def test_update_user_profile_and_role_rules(repository, people):
    updated = user_service.update_user(
        repository, people.client, people.client.id, {"first_name": "Zoe", "company": "Acme"}
    )
    assert (updated.first_name, updated.company, updated.avatar_initials) == ("Zoe", "Acme", "ZC")

    with pytest.raises(Forbidden):
        user_service.update_user(repository, people.client, people.client.id, {"role": "admin"})
    with pytest.raises(Forbidden):
        user_service.update_user(repository, people.client, people.other_client.id, {"bio": "hacked"})
    with pytest.raises(Conflict):
        user_service.update_user(repository, people.client, people.client.id, {"email": "admin@example.com"})

    promoted = user_service.update_user(repository, people.admin, people.client.id, {"role": "manager"})
    assert promoted.role == "manager"


def test_delete_user_rules(repository, people):
    sessions = SessionManager(repository)
    token, _ = sessions.login("client2@example.com", PASSWORD)

    with pytest.raises(Forbidden):
        user_service.delete_user(repository, people.admin, people.admin.id)
    with pytest.raises(NotFound):
        user_service.delete_user(repository, people.admin, 999)

    user_service.delete_user(repository, people.admin, people.other_client.id)
    assert repository.get_user(people.other_client.id) is None
    assert repository.get_session(token) is None
    assert _actions(repository) == ["user_deleted"]


def test_set_password_revokes_sessions(repository, people):
    sessions = SessionManager(repository)
    token, _ = sessions.login("client@example.com", PASSWORD)
    user_service.set_password(repository, people.admin, people.client.id, {"password": "reset-by-admin"})

    with pytest.raises(Unauthenticated):
        sessions.resolve(token)
    assert sessions.login("client@example.com", "reset-by-admin")[1].id == people.client.id


def test_contacts_exclude_the_caller(repository, people):
    contacts = user_service.list_contacts(repository, people.client)
    assert people.client.id not in {contact.id for contact in contacts}
    assert len(contacts) == 4
    assert {contact.name for contact in contacts} >= {"Ada Admin", "Max Manager"}


# Projects


def test_create_project_requires_a_client_for_staff(repository, people):
    with pytest.raises(ValidationFailed):
        project_service.create_project(repository, people.admin, {"name": "X", "start_date": "2024-01-01T00:00:00"})

    project = project_service.create_project(
        repository,
        people.manager,
        {"name": "X", "start_date": "2024-01-01T00:00:00", "client_id": people.client.id},
    )
    assert project.manager_id == people.manager.id
    assert _actions(repository) == ["project_created"]


def test_client_cannot_create_project_for_someone_else(repository, people):
    with pytest.raises(Forbidden):
        project_service.create_project(
            repository,
            people.client,
            {"name": "X", "start_date": "2024-01-01T00:00:00", "client_id": people.other_client.id},
        )
    assert repository.count("project") == 0


def test_project_client_and_manager_must_be_real_users(repository, people):
    base = {"name": "X", "start_date": "2024-01-01T00:00:00"}
    with pytest.raises(NotFound):
        project_service.create_project(repository, people.manager, {**base, "client_id": 9999})
    with pytest.raises(ValidationFailed) as exc:
        project_service.create_project(repository, people.manager, {**base, "client_id": people.other_manager.id})
    assert exc.value.errors[0]["field"] == "client_id"
    with pytest.raises(ValidationFailed) as exc:
        project_service.create_project(
            repository, people.admin, {**base, "client_id": people.client.id, "manager_id": people.other_client.id}
        )
    assert exc.value.errors[0]["field"] == "manager_id"
    assert repository.count("project") == 0

    project = project_service.create_project(
        repository, people.admin, {**base, "client_id": people.client.id, "manager_id": people.admin.id}
    )
    assert project.manager_id == people.admin.id


def test_update_project_cannot_point_at_missing_or_wrong_users(repository, people):
    project = make_project(repository, people.client, people.manager)
    with pytest.raises(NotFound):
        project_service.update_project(repository, people.manager, project.id, {"client_id": 8888})
    with pytest.raises(ValidationFailed):
        project_service.update_project(repository, people.manager, project.id, {"manager_id": people.client.id})
    assert repository.get_project(project.id) == project
    assert _actions(repository) == []

    moved = project_service.update_project(repository, people.manager, project.id, {"client_id": people.other_client.id})
    assert moved.client_id == people.other_client.id


def test_empty_updates_write_nothing_and_record_nothing(repository, people):
    project = make_project(repository, people.client, people.manager)
    task = make_task(repository, project, people.client)
    ticket = support_service.create_support_ticket(repository, people.client, {"title": "Help", "description": "Please"})
    before = repository.count("activity")

    assert task_service.update_task(repository, people.client, task.id, {}) == task
    assert project_service.update_project(repository, people.manager, project.id, {}) == project
    unchanged = support_service.update_support_ticket(repository, people.manager, ticket.id, {})
    assert (unchanged.status, unchanged.updated_at) == ("open", None)
    assert repository.count("activity") == before


def test_update_project_is_staff_only_and_owned(repository, people):
    project = make_project(repository, people.client, people.manager)
    with pytest.raises(Forbidden):
        project_service.update_project(repository, people.client, project.id, {"progress": 50})
    with pytest.raises(Forbidden):
        project_service.update_project(repository, people.other_manager, project.id, {"progress": 50})

    updated = project_service.update_project(repository, people.manager, project.id, {"progress": 50})
    assert updated.progress == 50
    assert updated.client_id == people.client.id
    entry = repository.list_records("activity")[0]
    assert (entry.action_type, entry.project_id, entry.metadata) == ("project_updated", project.id, {"fields": ["progress"]})


def test_phases_and_files(repository, people):
    project = make_project(repository, people.client, people.manager)

    with pytest.raises(Forbidden):
        project_service.create_phase(repository, people.client, project.id, {"name": "Design", "order": 1})
    phase = project_service.create_phase(repository, people.manager, project.id, {"name": "Design", "order": 1})
    project_service.update_phase(repository, people.manager, phase.id, {"status": "in_progress"})
    assert [p.status for p in project_service.list_phases(repository, people.client, project.id)] == ["in_progress"]

    project_file = project_service.create_file(
        repository, people.client, project.id, {"name": "brief.pdf", "type": "pdf", "path": "/files/brief.pdf", "size": 2048}
    )
    assert project_file.uploaded_by_id == people.client.id
    assert project_service.list_files(repository, people.manager) == [project_file]
    assert project_service.list_files(repository, people.other_manager) == []
    with pytest.raises(Forbidden):
        project_service.list_files(repository, people.other_client, project.id)
    assert _actions(repository) == ["file_uploaded", "phase_updated", "phase_created"]


# Tasks


def test_comment_increments_counter_and_records_one_activity(repository, people):
    project = make_project(repository, people.client, people.manager)
    task = task_service.create_task(repository, people.manager, {"title": "Logo", "project_id": project.id})
    activities_before = repository.count("activity")
    count_before = task_service.get_task(repository, people.client, task.id).comment_count

    comment = task_service.create_comment(repository, people.client, task.id, TaskCommentCreate(content="Looks good"))

    assert task_service.get_task(repository, people.client, task.id).comment_count == count_before + 1
    assert repository.count("activity") == activities_before + 1
    entry = repository.list_records("activity")[0]
    assert (entry.action_type, entry.resource_id, entry.project_id) == ("comment_added", comment.id, project.id)
    assert [c.id for c in task_service.list_comments(repository, people.manager, task.id)] == [comment.id]


def test_create_task_in_foreign_or_missing_project(repository, people):
    foreign = make_project(repository, people.other_client)
    with pytest.raises(Forbidden):
        task_service.create_task(repository, people.client, {"title": "Sneaky", "project_id": foreign.id})
    with pytest.raises(NotFound):
        task_service.create_task(repository, people.client, {"title": "Lost", "project_id": 999})
    assert repository.count("task") == 0


def test_update_task_keeps_counter_and_project(repository, people):
    project = make_project(repository, people.client)
    task = make_task(repository, project, people.client)
    repository.create_task_comment({"task_id": task.id, "user_id": people.client.id, "content": "hi"})

    updated = task_service.update_task(repository, people.client, task.id, {"status": "done", "priority": "high"})
    assert (updated.status, updated.priority, updated.comment_count, updated.project_id) == ("done", "high", 1, project.id)
    with pytest.raises(ValidationFailed):
        task_service.update_task(repository, people.client, task.id, {"priority": "urgent"})


# Messages


def test_message_read_transition(repository, people):
    message = message_service.send_message(
        repository, people.client, {"receiver_id": people.manager.id, "content": "Hello"}
    )
    assert message.is_read is False

    with pytest.raises(Forbidden):
        message_service.mark_read(repository, people.client, message.id)

    assert message_service.mark_read(repository, people.manager, message.id).is_read is True
    assert message_service.mark_read(repository, people.manager, message.id).is_read is True
    assert _actions(repository) == ["message_read", "message_sent"]


def test_message_listing_is_per_participant(repository, people):
    send = message_service.send_message
    send(repository, people.client, {"receiver_id": people.manager.id, "content": "1"})
    send(repository, people.manager, {"receiver_id": people.client.id, "content": "2"})
    send(repository, people.client, {"receiver_id": people.other_manager.id, "content": "3"})

    assert [m.content for m in message_service.list_messages(repository, people.client)] == ["1", "2", "3"]
    with_manager = message_service.list_messages(repository, people.client, partner_id=people.manager.id)
    assert [m.content for m in with_manager] == ["1", "2"]
    assert message_service.list_messages(repository, people.admin) == []


def test_listing_with_yourself_is_the_self_conversation(repository, people):
    send = message_service.send_message
    send(repository, people.client, {"receiver_id": people.manager.id, "content": "to manager"})
    send(repository, people.client, {"receiver_id": people.client.id, "content": "note to self"})

    own = message_service.list_messages(repository, people.client, partner_id=people.client.id)
    assert [m.content for m in own] == ["note to self"]
    assert message_service.list_messages(repository, people.manager, partner_id=people.manager.id) == []


def test_message_to_unknown_user_or_foreign_project(repository, people):
    with pytest.raises(NotFound):
        message_service.send_message(repository, people.client, {"receiver_id": 999, "content": "?"})
    foreign = make_project(repository, people.other_client)
    with pytest.raises(Forbidden):
        message_service.send_message(
            repository, people.client, {"receiver_id": people.manager.id, "content": "?", "project_id": foreign.id}
        )


# Activities


def test_activity_feed_is_scoped_to_projects(repository, people):
    mine = make_project(repository, people.client, people.manager)
    theirs = make_project(repository, people.other_client)
    task_service.create_task(repository, people.client, {"title": "A", "project_id": mine.id})
    task_service.create_task(repository, people.other_client, {"title": "B", "project_id": theirs.id})

    assert [a.project_id for a in activity_service.list_activities(repository, people.client)] == [mine.id]
    assert [a.project_id for a in activity_service.list_activities(repository, people.manager)] == [mine.id]
    assert len(activity_service.list_activities(repository, people.admin)) == 2
    assert len(activity_service.list_activities(repository, people.admin, limit=1)) == 1
    with pytest.raises(Forbidden):
        activity_service.list_activities(repository, people.client, project_id=theirs.id)


# Finance


def test_client_finance_documents_are_forced_to_the_caller(repository, people):
    document = finance_service.create_finance_document(
        repository, people.client, {"type": "invoice", "name": "INV-1", "path": "/inv/1.pdf", "amount": 1000}
    )
    assert document.client_id == people.client.id
    assert document.status == "pending"

    with pytest.raises(Forbidden):
        finance_service.create_finance_document(
            repository,
            people.client,
            {"client_id": people.other_client.id, "type": "invoice", "name": "INV-2", "path": "/inv/2.pdf"},
        )
    assert finance_service.list_finance_documents(repository, people.other_client) == []
    assert finance_service.list_finance_documents(repository, people.client) == [document]


def test_manager_finance_documents_need_a_managed_project(repository, people):
    project = make_project(repository, people.client, people.manager)
    base = {"client_id": people.client.id, "type": "contract", "name": "Contract", "path": "/c.pdf"}

    with pytest.raises(Forbidden):
        finance_service.create_finance_document(repository, people.manager, base)
    document = finance_service.create_finance_document(repository, people.manager, {**base, "project_id": project.id})
    assert finance_service.list_finance_documents(repository, people.manager) == [document]
    assert finance_service.list_finance_documents(repository, people.other_manager) == []


# Support


def test_support_ticket_lifecycle(repository, people):
    ticket = support_service.create_support_ticket(
        repository, people.client, {"title": "Down", "description": "Site is down", "priority": "high"}
    )
    assert (ticket.client_id, ticket.status, ticket.closed_at) == (people.client.id, "open", None)
    assert support_service.list_support_tickets(repository, people.other_client) == []
    assert support_service.list_support_tickets(repository, people.other_manager) == [ticket]

    with pytest.raises(Forbidden):
        support_service.update_support_ticket(repository, people.client, ticket.id, {"status": "closed"})

    progressed = support_service.update_support_ticket(repository, people.manager, ticket.id, {"status": "in_progress"})
    assert progressed.closed_at is None
    assert progressed.updated_at is not None

    closed = support_service.update_support_ticket(repository, people.manager, ticket.id, {"status": "closed"})
    assert closed.closed_at is not None

    with pytest.raises(ValidationFailed):
        support_service.update_support_ticket(repository, people.admin, ticket.id, {"status": "open"})
    assert repository.get("support_ticket", ticket.id).closed_at == closed.closed_at
