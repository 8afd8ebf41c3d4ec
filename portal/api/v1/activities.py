"""Activity feed endpoint"""
from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from portal.api.dependencies import get_current_user, get_repository
from portal.repository import Repository
from portal.schemas import ActivityOut, UserAccount
from portal.services import activities as activity_service

router = APIRouter()


@router.get("", response_model=List[ActivityOut])
def list_activities(
    project_id: Optional[int] = None,
    limit: Optional[int] = Query(None, ge=1, le=500),
    current_user: UserAccount = Depends(get_current_user),
    repository: Repository = Depends(get_repository),
):
    return activity_service.list_activities(repository, current_user, project_id=project_id, limit=limit)
