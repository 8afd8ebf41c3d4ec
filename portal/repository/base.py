"""Abstract resource repository."""
import logging
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Dict, Iterable, List, Mapping, Optional

from pydantic import BaseModel

from portal.errors import NotFound
from portal.repository.entities import Entity, Scope, entity_for
from portal.schemas import (
    ActivityOut,
    MessageOut,
    ProjectOut,
    SessionOut,
    TaskCommentOut,
    TaskOut,
    UserAccount,
)

logger = logging.getLogger(__name__)


class Repository(ABC):
    """Uniform CRUD and scoped listing over every portal entity.

    Backends implement the underscore primitives on plain dict rows. All
    defaulting, validation and update rules are applied here, once, so every
    backend observes the same behaviour.
    """

    backend_name = "abstract"

    # ------------------------------------------------------------------
    # Backend primitives
    # ------------------------------------------------------------------

    @abstractmethod
    def _insert(self, entity: Entity, values: Dict[str, Any]) -> Dict[str, Any]:
        """Persist a new row, assign its id and return it. Enforces ``entity.unique``."""

    @abstractmethod
    def _fetch(self, entity: Entity, record_id: int) -> Optional[Dict[str, Any]]:
        """Return the row or ``None``."""

    @abstractmethod
    def _modify(self, entity: Entity, record_id: int, changes: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """Merge ``changes`` into the row; ``None`` when the row is gone.

        Must apply ``entity.transition`` to the row as stored at write time,
        in the same atomic step as the write.
        """

    @abstractmethod
    def _select(self, entity: Entity, scopes: List[Scope], filters: Dict[str, Any]) -> List[Dict[str, Any]]:
        """Rows matching every scope and filter, in ``entity.order_by`` order."""

    @abstractmethod
    def _remove(self, entity: Entity, record_id: int) -> bool:
        """Delete a row, return whether it existed."""

    @abstractmethod
    def _count(self, entity: Entity) -> int:
        pass

    @abstractmethod
    def _insert_comment(self, values: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """Insert a task comment and bump its task's comment_count in one step.

        Returns ``None`` (and writes nothing) when the task does not exist.
        """

    # Sessions are keyed by an opaque token instead of a sequential id

    @abstractmethod
    def create_session(self, token: str, user_id: int, created_at: datetime, expires_at: datetime) -> SessionOut:
        pass

    @abstractmethod
    def get_session(self, token: str) -> Optional[SessionOut]:
        pass

    @abstractmethod
    def delete_session(self, token: str) -> bool:
        pass

    @abstractmethod
    def delete_sessions_for_user(self, user_id: int) -> int:
        pass

    @abstractmethod
    def purge_sessions(self, before: datetime) -> int:
        """Delete sessions that expired before ``before``; return how many."""

    # ------------------------------------------------------------------
    # Generic operations
    # ------------------------------------------------------------------

    def create(self, kind: str, data: Mapping[str, Any]) -> BaseModel:
        entity = entity_for(kind)
        values = entity.prepare(data)
        entity.validate(values)
        row = self._insert(entity, values)
        logger.debug("Created %s %s", kind, row["id"])
        return entity.to_record(row)

    def get(self, kind: str, record_id: int) -> Optional[BaseModel]:
        entity = entity_for(kind)
        return entity.to_record(self._fetch(entity, record_id))

    def require(self, kind: str, record_id: int) -> BaseModel:
        """Like ``get`` but raises ``NotFound``."""
        record = self.get(kind, record_id)
        if record is None:
            raise NotFound(f"{entity_for(kind).label} not found")
        return record

    def update(self, kind: str, record_id: int, changes: Mapping[str, Any]) -> BaseModel:
        entity = entity_for(kind)
        if entity.append_only:
            raise ValueError(f"{kind} records are append-only")
        changes = entity.clean_changes(changes)
        current = self._fetch(entity, record_id)
        if current is None:
            raise NotFound(f"{entity.label} not found")
        if not changes:
            return entity.to_record(current)

        entity.validate({**current, **changes})
        row = self._modify(entity, record_id, changes)
        if row is None:
            raise NotFound(f"{entity.label} not found")
        return entity.to_record(row)

    def list_records(self, kind: str, *scopes: Optional[Scope], **filters: Any) -> List[BaseModel]:
        """List rows of ``kind``. A ``None`` scope means unrestricted."""
        entity = entity_for(kind)
        active = [scope for scope in scopes if scope is not None]
        entity.check_fields(filters)
        for scope in active:
            entity.check_fields(scope.fields)
        return [entity.to_record(row) for row in self._select(entity, active, dict(filters))]

    def list_by_owner(self, kind: str, owner_field: str, owner_id: int) -> List[BaseModel]:
        return self.list_records(kind, Scope.of(owner_field, [owner_id]))

    def list_by_owner_set(self, kind: str, owner_field: str, owner_ids: Iterable[int]) -> List[BaseModel]:
        return self.list_records(kind, Scope.of(owner_field, owner_ids))

    def count(self, kind: str) -> int:
        return self._count(entity_for(kind))

    # ------------------------------------------------------------------
    # Entity specific helpers
    # ------------------------------------------------------------------

    def get_user(self, user_id: int) -> Optional[UserAccount]:
        return self.get("user", user_id)

    def get_user_by_email(self, email: str) -> Optional[UserAccount]:
        matches = self.list_records("user", email=email.strip().lower())
        return matches[0] if matches else None

    def delete_user(self, user_id: int) -> None:
        """Hard delete. References held by other entities are left in place."""
        entity = entity_for("user")
        if not self._remove(entity, user_id):
            raise NotFound("User not found")

    def get_project(self, project_id: int) -> Optional[ProjectOut]:
        return self.get("project", project_id)

    def list_projects(self, *scopes: Optional[Scope], **filters: Any) -> List[ProjectOut]:
        return self.list_records("project", *scopes, **filters)

    def list_tasks(self, *scopes: Optional[Scope], **filters: Any) -> List[TaskOut]:
        return self.list_records("task", *scopes, **filters)

    def create_task_comment(self, data: Mapping[str, Any]) -> TaskCommentOut:
        entity = entity_for("task_comment")
        values = entity.prepare(data)
        entity.validate(values)
        row = self._insert_comment(values)
        if row is None:
            raise NotFound("Task not found")
        return entity.to_record(row)

    def mark_message_read(self, message_id: int) -> MessageOut:
        """Flip ``is_read`` to true. Already-read messages are returned unchanged."""
        return self.update("message", message_id, {"is_read": True})

    def append_activity(self, data: Mapping[str, Any]) -> ActivityOut:
        return self.create("activity", data)
