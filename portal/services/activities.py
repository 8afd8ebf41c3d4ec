"""Activity feed."""
from typing import List, Optional

from portal.access import ACTIVITIES, scope_for
from portal.repository import Repository
from portal.schemas import ActivityOut, UserOut
from portal.services.projects import accessible_project


def list_activities(
    repository: Repository,
    caller: UserOut,
    project_id: Optional[int] = None,
    limit: Optional[int] = None,
) -> List[ActivityOut]:
    """Newest first. Non-admins only see activity on projects they can access."""
    filters = {}
    if project_id is not None:
        accessible_project(repository, caller, project_id)
        filters["project_id"] = project_id
    entries = repository.list_records("activity", scope_for(repository, caller, ACTIVITIES), **filters)
    return entries[:limit] if limit else entries
