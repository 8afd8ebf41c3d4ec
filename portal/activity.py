"""Append-only audit trail."""
import logging
from typing import Any, Dict, Optional

from portal.repository import Repository
from portal.schemas import ActivityOut

logger = logging.getLogger(__name__)


def record(
    repository: Repository,
    user_id: int,
    action_type: str,
    resource_type: str,
    resource_id: int,
    project_id: Optional[int] = None,
    description: str = "",
    metadata: Optional[Dict[str, Any]] = None,
) -> ActivityOut:
    entry = repository.append_activity(
        {
            "user_id": user_id,
            "action_type": action_type,
            "resource_type": resource_type,
            "resource_id": resource_id,
            "project_id": project_id,
            "description": description,
            "metadata": metadata or {},
        }
    )
    logger.debug("Recorded %s on %s %s by user %s", action_type, resource_type, resource_id, user_id)
    return entry
