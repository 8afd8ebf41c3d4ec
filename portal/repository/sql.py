"""Durable repository backed by SQLAlchemy."""
import logging
from datetime import datetime
from typing import Any, Dict, List, Optional, Type

from sqlalchemy import delete, func, inspect, or_, select, update
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError

from portal.database import Base, get_session_factory, init_db, session_scope
from portal.errors import Conflict
from portal.models import (
    Activity,
    FinanceDocument,
    Message,
    Project,
    ProjectFile,
    ProjectPhase,
    SupportTicket,
    Task,
    TaskComment,
    User,
    UserSession,
)
from portal.repository.base import Repository
from portal.repository.entities import Entity, Scope
from portal.schemas import SessionOut

logger = logging.getLogger(__name__)

MODELS: Dict[str, Type[Base]] = {
    "user": User,
    "project": Project,
    "project_phase": ProjectPhase,
    "task": Task,
    "task_comment": TaskComment,
    "message": Message,
    "activity": Activity,
    "project_file": ProjectFile,
    "finance_document": FinanceDocument,
    "support_ticket": SupportTicket,
}


def _attribute_names(model: Type[Base]) -> Dict[str, str]:
    """Map column name -> mapped attribute name (they differ for ``metadata``)."""
    return {attr.columns[0].name: attr.key for attr in inspect(model).column_attrs}


class SqlRepository(Repository):
    """Relational store. Each primitive runs in its own transaction."""

    backend_name = "sql"

    def __init__(self, engine: Engine):
        self.engine = engine
        init_db(engine)
        self._session_factory = get_session_factory(engine)
        self._attributes = {kind: _attribute_names(model) for kind, model in MODELS.items()}

    # Row conversion

    def _to_row(self, kind: str, obj: Base) -> Dict[str, Any]:
        return {column: getattr(obj, attr) for column, attr in self._attributes[kind].items()}

    def _to_attributes(self, kind: str, values: Dict[str, Any]) -> Dict[str, Any]:
        names = self._attributes[kind]
        return {names[column]: value for column, value in values.items() if column in names}

    def _column(self, kind: str, name: str):
        return MODELS[kind].__table__.c[name]

    def _ensure_unique(self, session, entity: Entity, values: Dict[str, Any], record_id: Optional[int] = None) -> None:
        model = MODELS[entity.kind]
        for name in entity.unique:
            if name not in values:
                continue
            query = select(model.id).where(self._column(entity.kind, name) == values[name])
            if record_id is not None:
                query = query.where(model.id != record_id)
            if session.execute(query).first() is not None:
                raise Conflict(f"{entity.label} with this {name} already exists")

    # Primitives

    def _insert(self, entity: Entity, values: Dict[str, Any]) -> Dict[str, Any]:
        model = MODELS[entity.kind]
        try:
            with session_scope(self._session_factory) as session:
                self._ensure_unique(session, entity, values)
                obj = model(**self._to_attributes(entity.kind, values))
                session.add(obj)
                session.flush()
                return self._to_row(entity.kind, obj)
        except IntegrityError as exc:
            # A concurrent writer won the race past the pre-check
            logger.warning("Integrity error inserting %s: %s", entity.kind, exc.orig)
            raise Conflict(f"{entity.label} already exists") from exc

    def _fetch(self, entity: Entity, record_id: int) -> Optional[Dict[str, Any]]:
        with session_scope(self._session_factory) as session:
            obj = session.get(MODELS[entity.kind], record_id)
            return self._to_row(entity.kind, obj) if obj is not None else None

    def _modify(self, entity: Entity, record_id: int, changes: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        try:
            with session_scope(self._session_factory) as session:
                # Row lock where the dialect has one; SQLite serializes writers anyway
                obj = session.get(MODELS[entity.kind], record_id, with_for_update=True)
                if obj is None:
                    return None
                changes = entity.transition(self._to_row(entity.kind, obj), changes)
                self._ensure_unique(session, entity, changes, record_id)
                for attr, value in self._to_attributes(entity.kind, changes).items():
                    setattr(obj, attr, value)
                session.flush()
                return self._to_row(entity.kind, obj)
        except IntegrityError as exc:
            logger.warning("Integrity error updating %s %s: %s", entity.kind, record_id, exc.orig)
            raise Conflict(f"{entity.label} already exists") from exc

    def _select(self, entity: Entity, scopes: List[Scope], filters: Dict[str, Any]) -> List[Dict[str, Any]]:
        kind = entity.kind
        query = select(MODELS[kind])
        for scope in scopes:
            query = query.where(or_(*[self._column(kind, name).in_(list(scope.values)) for name in scope.fields]))
        for name, value in filters.items():
            column = self._column(kind, name)
            query = query.where(column.is_(None) if value is None else column == value)
        ordering = [self._column(kind, name) for name in entity.order_by]
        query = query.order_by(*[column.desc() if entity.descending else column.asc() for column in ordering])

        with session_scope(self._session_factory) as session:
            return [self._to_row(kind, obj) for obj in session.execute(query).scalars()]

    def _remove(self, entity: Entity, record_id: int) -> bool:
        model = MODELS[entity.kind]
        with session_scope(self._session_factory) as session:
            result = session.execute(delete(model).where(model.id == record_id))
            return result.rowcount > 0

    def _count(self, entity: Entity) -> int:
        with session_scope(self._session_factory) as session:
            return session.scalar(select(func.count()).select_from(MODELS[entity.kind]))

    def _insert_comment(self, values: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        with session_scope(self._session_factory) as session:
            bumped = session.execute(
                update(Task)
                .where(Task.id == values["task_id"])
                .values(comment_count=Task.comment_count + 1)
                .execution_options(synchronize_session=False)
            )
            if bumped.rowcount == 0:
                return None
            comment = TaskComment(**self._to_attributes("task_comment", values))
            session.add(comment)
            session.flush()
            return self._to_row("task_comment", comment)

    # Sessions

    def create_session(self, token: str, user_id: int, created_at: datetime, expires_at: datetime) -> SessionOut:
        with session_scope(self._session_factory) as session:
            if session.get(UserSession, token) is not None:
                raise Conflict("Session token already issued")
            record = UserSession(token=token, user_id=user_id, created_at=created_at, expires_at=expires_at)
            session.add(record)
            session.flush()
            return SessionOut.model_validate(record)

    def get_session(self, token: str) -> Optional[SessionOut]:
        with session_scope(self._session_factory) as session:
            record = session.get(UserSession, token)
            return SessionOut.model_validate(record) if record is not None else None

    def delete_session(self, token: str) -> bool:
        with session_scope(self._session_factory) as session:
            result = session.execute(delete(UserSession).where(UserSession.token == token))
            return result.rowcount > 0

    def delete_sessions_for_user(self, user_id: int) -> int:
        with session_scope(self._session_factory) as session:
            result = session.execute(delete(UserSession).where(UserSession.user_id == user_id))
            return result.rowcount

    def purge_sessions(self, before: datetime) -> int:
        with session_scope(self._session_factory) as session:
            result = session.execute(delete(UserSession).where(UserSession.expires_at <= before))
            if result.rowcount:
                logger.info("Purged %d expired sessions", result.rowcount)
            return result.rowcount
