"""Projects and the resources hanging directly off them."""
from typing import Any, Dict, List, Optional

from portal import activity
from portal.access import FILES, PHASES, PROJECTS, Role, authorize, require_role, scope_for
from portal.errors import NotFound, Payload, ValidationFailed, parse_payload
from portal.repository import Repository
from portal.schemas import (
    FileCreate,
    FileOut,
    PhaseCreate,
    PhaseOut,
    PhaseUpdate,
    ProjectCreate,
    ProjectOut,
    ProjectUpdate,
    UserOut,
)


def accessible_project(repository: Repository, caller: UserOut, project_id: int) -> ProjectOut:
    """Load a project the caller may access: missing is 404, foreign is 403."""
    project = repository.get_project(project_id)
    if project is None:
        raise NotFound("Project not found")
    authorize(repository, caller, PROJECTS, project)
    return project


def linked_project(repository: Repository, caller: UserOut, project_id: Optional[int]) -> Optional[ProjectOut]:
    """Validate an optional ``project_id`` supplied on a child resource."""
    if project_id is None:
        return None
    return accessible_project(repository, caller, project_id)


def _require_member(repository: Repository, field: str, user_id: int, *roles: Role) -> None:
    user = repository.get_user(user_id)
    if user is None:
        raise NotFound(f"User {user_id} not found")
    if user.role not in {role.value for role in roles}:
        allowed = " or ".join(role.value for role in roles)
        raise ValidationFailed.for_field(field, f"User {user_id} is not a {allowed}")


def check_members(repository: Repository, values: Dict[str, Any]) -> None:
    """``client_id`` must name a client and ``manager_id``, when set, a manager or admin."""
    if values.get("client_id") is not None:
        _require_member(repository, "client_id", values["client_id"], Role.CLIENT)
    if values.get("manager_id") is not None:
        _require_member(repository, "manager_id", values["manager_id"], Role.MANAGER, Role.ADMIN)


def list_projects(repository: Repository, caller: UserOut, status: Optional[str] = None) -> List[ProjectOut]:
    filters = {"status": status} if status else {}
    return repository.list_projects(scope_for(repository, caller, PROJECTS), **filters)


def get_project(repository: Repository, caller: UserOut, project_id: int) -> ProjectOut:
    return accessible_project(repository, caller, project_id)


def create_project(repository: Repository, caller: UserOut, data: Payload) -> ProjectOut:
    payload = parse_payload(ProjectCreate, data)
    values = payload.model_dump()
    if caller.role == Role.CLIENT.value and values["client_id"] is None:
        values["client_id"] = caller.id
    if caller.role == Role.MANAGER.value and values["manager_id"] is None:
        values["manager_id"] = caller.id
    if values["client_id"] is None:
        raise ValidationFailed.for_field("client_id", "client_id is required")

    # The new project must be one the caller could read afterwards
    authorize(repository, caller, PROJECTS, values)
    check_members(repository, values)
    project = repository.create("project", values)
    activity.record(
        repository,
        caller.id,
        "project_created",
        "project",
        project.id,
        project_id=project.id,
        description=f'Project "{project.name}" was created',
    )
    return project


def update_project(repository: Repository, caller: UserOut, project_id: int, data: Payload) -> ProjectOut:
    require_role(caller, Role.ADMIN, Role.MANAGER)
    current = accessible_project(repository, caller, project_id)
    changes = parse_payload(ProjectUpdate, data).model_dump(exclude_unset=True)
    if not changes:
        return current
    check_members(repository, changes)
    project = repository.update("project", project_id, changes)
    activity.record(
        repository,
        caller.id,
        "project_updated",
        "project",
        project.id,
        project_id=project.id,
        description=f'Project "{project.name}" was updated',
        metadata={"fields": sorted(changes)},
    )
    return project


# Phases


def list_phases(repository: Repository, caller: UserOut, project_id: int) -> List[PhaseOut]:
    accessible_project(repository, caller, project_id)
    return repository.list_records("project_phase", project_id=project_id)


def create_phase(repository: Repository, caller: UserOut, project_id: int, data: Payload) -> PhaseOut:
    require_role(caller, Role.ADMIN, Role.MANAGER)
    accessible_project(repository, caller, project_id)
    values = parse_payload(PhaseCreate, data).model_dump()
    values["project_id"] = project_id
    phase = repository.create("project_phase", values)
    activity.record(
        repository,
        caller.id,
        "phase_created",
        "project_phase",
        phase.id,
        project_id=project_id,
        description=f'Phase "{phase.name}" was created',
    )
    return phase


def update_phase(repository: Repository, caller: UserOut, phase_id: int, data: Payload) -> PhaseOut:
    require_role(caller, Role.ADMIN, Role.MANAGER)
    phase = repository.require("project_phase", phase_id)
    authorize(repository, caller, PHASES, phase)
    changes = parse_payload(PhaseUpdate, data).model_dump(exclude_unset=True)
    if not changes:
        return phase
    phase = repository.update("project_phase", phase_id, changes)
    activity.record(
        repository,
        caller.id,
        "phase_updated",
        "project_phase",
        phase.id,
        project_id=phase.project_id,
        description=f'Phase "{phase.name}" was updated',
        metadata={"fields": sorted(changes)},
    )
    return phase


# Files (metadata only, contents live elsewhere)


def list_files(repository: Repository, caller: UserOut, project_id: Optional[int] = None) -> List[FileOut]:
    if project_id is not None:
        accessible_project(repository, caller, project_id)
        return repository.list_records("project_file", project_id=project_id)
    return repository.list_records("project_file", scope_for(repository, caller, FILES))


def create_file(repository: Repository, caller: UserOut, project_id: int, data: Payload) -> FileOut:
    accessible_project(repository, caller, project_id)
    values = parse_payload(FileCreate, data).model_dump()
    values.update(project_id=project_id, uploaded_by_id=caller.id)
    project_file = repository.create("project_file", values)
    activity.record(
        repository,
        caller.id,
        "file_uploaded",
        "file",
        project_file.id,
        project_id=project_id,
        description=f'File "{project_file.name}" was uploaded',
    )
    return project_file
