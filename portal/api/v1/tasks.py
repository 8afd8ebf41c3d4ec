"""Task and task comment endpoints"""
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from portal.api.dependencies import get_current_user, get_repository
from portal.repository import Repository
from portal.schemas import TaskCommentCreate, TaskCommentOut, TaskCreate, TaskOut, TaskUpdate, UserAccount
from portal.services import tasks as task_service

router = APIRouter()


@router.get("", response_model=List[TaskOut])
def list_tasks(
    project_id: Optional[int] = None,
    task_status: Optional[str] = Query(None, alias="status"),
    current_user: UserAccount = Depends(get_current_user),
    repository: Repository = Depends(get_repository),
):
    return task_service.list_tasks(repository, current_user, project_id=project_id, status=task_status)


@router.post("", response_model=TaskOut, status_code=status.HTTP_201_CREATED)
def create_task(
    payload: TaskCreate,
    current_user: UserAccount = Depends(get_current_user),
    repository: Repository = Depends(get_repository),
):
    return task_service.create_task(repository, current_user, payload)


@router.get("/{task_id}", response_model=TaskOut)
def get_task(
    task_id: int,
    current_user: UserAccount = Depends(get_current_user),
    repository: Repository = Depends(get_repository),
):
    return task_service.get_task(repository, current_user, task_id)


@router.patch("/{task_id}", response_model=TaskOut)
def update_task(
    task_id: int,
    payload: TaskUpdate,
    current_user: UserAccount = Depends(get_current_user),
    repository: Repository = Depends(get_repository),
):
    return task_service.update_task(repository, current_user, task_id, payload)


@router.get("/{task_id}/comments", response_model=List[TaskCommentOut])
def list_comments(
    task_id: int,
    current_user: UserAccount = Depends(get_current_user),
    repository: Repository = Depends(get_repository),
):
    return task_service.list_comments(repository, current_user, task_id)


@router.post("/{task_id}/comments", response_model=TaskCommentOut, status_code=status.HTTP_201_CREATED)
def create_comment(
    task_id: int,
    payload: TaskCommentCreate,
    current_user: UserAccount = Depends(get_current_user),
    repository: Repository = Depends(get_repository),
):
    return task_service.create_comment(repository, current_user, task_id, payload)
