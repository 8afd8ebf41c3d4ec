"""Project, phase and file endpoints"""
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from portal.api.dependencies import get_current_user, get_repository
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
    UserAccount,
)
from portal.schemas.project import ProjectStatus
from portal.services import projects as project_service

router = APIRouter()


@router.get("", response_model=List[ProjectOut])
def list_projects(
    project_status: Optional[ProjectStatus] = Query(None, alias="status"),
    current_user: UserAccount = Depends(get_current_user),
    repository: Repository = Depends(get_repository),
):
    return project_service.list_projects(repository, current_user, status=project_status)


@router.post("", response_model=ProjectOut, status_code=status.HTTP_201_CREATED)
def create_project(
    payload: ProjectCreate,
    current_user: UserAccount = Depends(get_current_user),
    repository: Repository = Depends(get_repository),
):
    return project_service.create_project(repository, current_user, payload)


# Declared before "/{project_id}" so the literal path wins
@router.get("/files", response_model=List[FileOut])
def list_all_files(
    current_user: UserAccount = Depends(get_current_user),
    repository: Repository = Depends(get_repository),
):
    return project_service.list_files(repository, current_user)


@router.get("/{project_id}", response_model=ProjectOut)
def get_project(
    project_id: int,
    current_user: UserAccount = Depends(get_current_user),
    repository: Repository = Depends(get_repository),
):
    return project_service.get_project(repository, current_user, project_id)


@router.patch("/{project_id}", response_model=ProjectOut)
def update_project(
    project_id: int,
    payload: ProjectUpdate,
    current_user: UserAccount = Depends(get_current_user),
    repository: Repository = Depends(get_repository),
):
    return project_service.update_project(repository, current_user, project_id, payload)


@router.get("/{project_id}/phases", response_model=List[PhaseOut])
def list_phases(
    project_id: int,
    current_user: UserAccount = Depends(get_current_user),
    repository: Repository = Depends(get_repository),
):
    return project_service.list_phases(repository, current_user, project_id)


@router.post("/{project_id}/phases", response_model=PhaseOut, status_code=status.HTTP_201_CREATED)
def create_phase(
    project_id: int,
    payload: PhaseCreate,
    current_user: UserAccount = Depends(get_current_user),
    repository: Repository = Depends(get_repository),
):
    return project_service.create_phase(repository, current_user, project_id, payload)


@router.patch("/phases/{phase_id}", response_model=PhaseOut)
def update_phase(
    phase_id: int,
    payload: PhaseUpdate,
    current_user: UserAccount = Depends(get_current_user),
    repository: Repository = Depends(get_repository),
):
    return project_service.update_phase(repository, current_user, phase_id, payload)


@router.get("/{project_id}/files", response_model=List[FileOut])
def list_files(
    project_id: int,
    current_user: UserAccount = Depends(get_current_user),
    repository: Repository = Depends(get_repository),
):
    return project_service.list_files(repository, current_user, project_id)


@router.post("/{project_id}/files", response_model=FileOut, status_code=status.HTTP_201_CREATED)
def create_file(
    project_id: int,
    payload: FileCreate,
    current_user: UserAccount = Depends(get_current_user),
    repository: Repository = Depends(get_repository),
):
    return project_service.create_file(repository, current_user, project_id, payload)
