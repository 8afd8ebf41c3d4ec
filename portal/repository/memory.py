"""Volatile in-process repository for development and tests."""
import copy
import itertools
import logging
import threading
from datetime import datetime
from typing import Any, Dict, List, Optional

from portal.errors import Conflict
from portal.repository.base import Repository
from portal.repository.entities import ENTITIES, Entity, Scope, entity_for
from portal.schemas import SessionOut

logger = logging.getLogger(__name__)


class MemoryRepository(Repository):
    """Dict-backed tables with one monotonic id sequence per entity.

    Every mutation runs under a single lock so id assignment and the
    read-modify-write steps (comment counters, unique checks) stay atomic
    with concurrent writers. Rows are deep-copied on the way in and out;
    callers never hold references into the store.
    """

    backend_name = "memory"

    def __init__(self):
        self._lock = threading.RLock()
        self._tables: Dict[str, Dict[int, Dict[str, Any]]] = {kind: {} for kind in ENTITIES}
        self._sequences = {kind: itertools.count(1) for kind in ENTITIES}
        self._sessions: Dict[str, Dict[str, Any]] = {}

    def _ensure_unique(self, entity: Entity, values: Dict[str, Any], record_id: Optional[int] = None) -> None:
        for name in entity.unique:
            if name not in values:
                continue
            for existing_id, row in self._tables[entity.kind].items():
                if existing_id != record_id and row[name] == values[name]:
                    raise Conflict(f"{entity.label} with this {name} already exists")

    def _insert(self, entity: Entity, values: Dict[str, Any]) -> Dict[str, Any]:
        with self._lock:
            self._ensure_unique(entity, values)
            row = copy.deepcopy(values)
            row["id"] = next(self._sequences[entity.kind])
            self._tables[entity.kind][row["id"]] = row
            return copy.deepcopy(row)

    def _fetch(self, entity: Entity, record_id: int) -> Optional[Dict[str, Any]]:
        with self._lock:
            row = self._tables[entity.kind].get(record_id)
            return copy.deepcopy(row) if row is not None else None

    def _modify(self, entity: Entity, record_id: int, changes: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        with self._lock:
            row = self._tables[entity.kind].get(record_id)
            if row is None:
                return None
            changes = entity.transition(row, changes)
            self._ensure_unique(entity, changes, record_id)
            row.update(copy.deepcopy(changes))
            return copy.deepcopy(row)

    def _select(self, entity: Entity, scopes: List[Scope], filters: Dict[str, Any]) -> List[Dict[str, Any]]:
        with self._lock:
            rows = [
                row
                for row in self._tables[entity.kind].values()
                if all(scope.matches(row) for scope in scopes)
                and all(row.get(name) == value for name, value in filters.items())
            ]
            rows.sort(key=lambda row: tuple(row[name] for name in entity.order_by), reverse=entity.descending)
            return copy.deepcopy(rows)

    def _remove(self, entity: Entity, record_id: int) -> bool:
        with self._lock:
            return self._tables[entity.kind].pop(record_id, None) is not None

    def _count(self, entity: Entity) -> int:
        with self._lock:
            return len(self._tables[entity.kind])

    def _insert_comment(self, values: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        with self._lock:
            task = self._tables["task"].get(values["task_id"])
            if task is None:
                return None
            row = self._insert(entity_for("task_comment"), values)
            task["comment_count"] += 1
            return row

    # Sessions

    def create_session(self, token: str, user_id: int, created_at: datetime, expires_at: datetime) -> SessionOut:
        with self._lock:
            if token in self._sessions:
                raise Conflict("Session token already issued")
            self._sessions[token] = {
                "token": token,
                "user_id": user_id,
                "created_at": created_at,
                "expires_at": expires_at,
            }
            return SessionOut(**self._sessions[token])

    def get_session(self, token: str) -> Optional[SessionOut]:
        with self._lock:
            row = self._sessions.get(token)
            return SessionOut(**row) if row is not None else None

    def delete_session(self, token: str) -> bool:
        with self._lock:
            return self._sessions.pop(token, None) is not None

    def delete_sessions_for_user(self, user_id: int) -> int:
        with self._lock:
            tokens = [token for token, row in self._sessions.items() if row["user_id"] == user_id]
            for token in tokens:
                del self._sessions[token]
            return len(tokens)

    def purge_sessions(self, before: datetime) -> int:
        with self._lock:
            stale = [token for token, row in self._sessions.items() if row["expires_at"] <= before]
            for token in stale:
                del self._sessions[token]
            if stale:
                logger.info("Purged %d expired sessions", len(stale))
            return len(stale)
