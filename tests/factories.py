"""Setup helpers that write straight to the repository."""
from datetime import datetime

from portal.credentials import create_user

PASSWORD = "secret123"


def make_user(repository, email, role="client", password=PASSWORD, first_name="Test", last_name="User"):
    return create_user(
        repository,
        {
            "email": email,
            "password": password,
            "first_name": first_name,
            "last_name": last_name,
            "role": role,
        },
    )


def make_project(repository, client, manager=None, name="Website"):
    return repository.create(
        "project",
        {
            "name": name,
            "start_date": datetime(2024, 1, 1),
            "client_id": client.id,
            "manager_id": manager.id if manager else None,
        },
    )


def make_task(repository, project, creator, title="Design homepage"):
    return repository.create(
        "task",
        {"title": title, "project_id": project.id, "created_by_id": creator.id},
    )
