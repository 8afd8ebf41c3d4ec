"""Tasks and their comment threads."""
from typing import List, Optional

from portal import activity
from portal.access import TASKS, authorize, scope_for
from portal.errors import Payload, parse_payload
from portal.repository import Repository
from portal.schemas import TaskCommentCreate, TaskCommentOut, TaskCreate, TaskOut, TaskUpdate, UserOut
from portal.services.projects import accessible_project


def list_tasks(
    repository: Repository,
    caller: UserOut,
    project_id: Optional[int] = None,
    status: Optional[str] = None,
) -> List[TaskOut]:
    filters = {}
    if project_id is not None:
        accessible_project(repository, caller, project_id)
        filters["project_id"] = project_id
    if status:
        filters["status"] = status
    return repository.list_tasks(scope_for(repository, caller, TASKS), **filters)


def get_task(repository: Repository, caller: UserOut, task_id: int) -> TaskOut:
    task = repository.require("task", task_id)
    authorize(repository, caller, TASKS, task)
    return task


def create_task(repository: Repository, caller: UserOut, data: Payload) -> TaskOut:
    payload = parse_payload(TaskCreate, data)
    accessible_project(repository, caller, payload.project_id)
    values = payload.model_dump()
    values["created_by_id"] = caller.id
    task = repository.create("task", values)
    activity.record(
        repository,
        caller.id,
        "task_created",
        "task",
        task.id,
        project_id=task.project_id,
        description=f'Task "{task.title}" was created',
    )
    return task


def update_task(repository: Repository, caller: UserOut, task_id: int, data: Payload) -> TaskOut:
    current = get_task(repository, caller, task_id)
    changes = parse_payload(TaskUpdate, data).model_dump(exclude_unset=True)
    if not changes:
        return current
    task = repository.update("task", task_id, changes)
    activity.record(
        repository,
        caller.id,
        "task_updated",
        "task",
        task.id,
        project_id=task.project_id,
        description=f'Task "{task.title}" was updated',
        metadata={"fields": sorted(changes)},
    )
    return task


def list_comments(repository: Repository, caller: UserOut, task_id: int) -> List[TaskCommentOut]:
    get_task(repository, caller, task_id)
    return repository.list_records("task_comment", task_id=task_id)


def create_comment(repository: Repository, caller: UserOut, task_id: int, data: Payload) -> TaskCommentOut:
    """Add a comment; the task's ``comment_count`` moves with it."""
    task = get_task(repository, caller, task_id)
    payload = parse_payload(TaskCommentCreate, data)
    comment = repository.create_task_comment(
        {
            "task_id": task.id,
            "user_id": caller.id,
            "content": payload.content,
            "attachments": payload.attachments,
        }
    )
    activity.record(
        repository,
        caller.id,
        "comment_added",
        "task_comment",
        comment.id,
        project_id=task.project_id,
        description=f'Comment added to task "{task.title}"',
        metadata={"task_id": task.id},
    )
    return comment
