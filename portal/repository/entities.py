"""Entity table shared by every repository backend.

Defaults, ordering, uniqueness and update rules live here rather than in the
backends, so the in-memory and the SQL store cannot drift apart.
"""
import copy
from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, Iterable, Mapping, Optional, Tuple, Type

from pydantic import BaseModel, ValidationError

from portal.errors import ValidationFailed, field_errors
from portal.schemas import (
    ActivityOut,
    FileOut,
    FinanceDocumentOut,
    MessageOut,
    PhaseOut,
    ProjectOut,
    SupportTicketOut,
    TaskCommentOut,
    TaskOut,
    UserAccount,
)
from portal.schemas.common import utcnow
from portal.schemas.support import TICKET_STATUS_ORDER


@dataclass(frozen=True)
class Entity:
    kind: str
    record: Type[BaseModel]
    order_by: Tuple[str, ...] = ("id",)
    descending: bool = False
    defaults: Mapping[str, Any] = field(default_factory=dict)
    timestamped: bool = True
    unique: Tuple[str, ...] = ()
    casefold: Tuple[str, ...] = ()
    # Maintained by the repository itself, never taken from callers
    managed: FrozenSet[str] = frozenset()
    # Field -> allowed values in order; updates may only move forward
    progressions: Mapping[str, Tuple[Any, ...]] = field(default_factory=dict)
    # Field -> (value, timestamp field) set once when the field first reaches the value
    stamps: Mapping[str, Tuple[Any, str]] = field(default_factory=dict)
    append_only: bool = False

    @property
    def label(self) -> str:
        return self.kind.replace("_", " ").capitalize()

    @property
    def fields(self) -> FrozenSet[str]:
        return frozenset(self.record.model_fields)

    def check_fields(self, names: Iterable[str]) -> None:
        unknown = set(names) - self.fields
        if unknown:
            raise ValueError(f"Unknown {self.kind} field(s): {', '.join(sorted(unknown))}")

    def _normalize(self, values: Dict[str, Any]) -> Dict[str, Any]:
        for name in self.casefold:
            if isinstance(values.get(name), str):
                values[name] = values[name].strip().lower()
        return values

    def prepare(self, data: Mapping[str, Any]) -> Dict[str, Any]:
        """Build a full row (without id) from caller data plus defaults."""
        self.check_fields(data)
        values: Dict[str, Any] = {name: None for name in self.fields if name != "id"}
        values.update(copy.deepcopy(dict(self.defaults)))
        for name, value in data.items():
            if name == "id" or name in self.managed:
                continue
            if value is None and name in self.defaults:
                continue
            values[name] = copy.deepcopy(value)
        if self.timestamped and values.get("created_at") is None:
            values["created_at"] = utcnow()
        return self._normalize(values)

    def clean_changes(self, changes: Mapping[str, Any]) -> Dict[str, Any]:
        """Strip identity and repository-maintained fields from a partial update."""
        self.check_fields(changes)
        cleaned = {
            name: copy.deepcopy(value)
            for name, value in changes.items()
            if name != "id" and name not in self.managed
        }
        return self._normalize(cleaned)

    def validate(self, row: Mapping[str, Any]) -> None:
        try:
            self.record.model_validate({"id": 0, **row})
        except ValidationError as exc:
            raise ValidationFailed(f"Invalid {self.label.lower()} data", field_errors(exc)) from exc

    def check_progressions(self, current: Mapping[str, Any], changes: Mapping[str, Any]) -> None:
        for name, order in self.progressions.items():
            if name not in changes or changes[name] == current.get(name):
                continue
            if order.index(changes[name]) < order.index(current[name]):
                raise ValidationFailed.for_field(
                    name, f"{name} cannot move from {current[name]!r} back to {changes[name]!r}"
                )

    def transition(self, current: Mapping[str, Any], changes: Mapping[str, Any]) -> Dict[str, Any]:
        """Check ``changes`` against the stored row and add the stamps they trigger.

        Backends call this inside their write step, against the row they are
        about to overwrite.
        """
        self.check_progressions(current, changes)
        changes = dict(changes)
        for name, (value, stamp) in self.stamps.items():
            if changes.get(name) == value and current.get(name) != value:
                changes[stamp] = utcnow()
        return changes

    def to_record(self, row: Optional[Mapping[str, Any]]) -> Optional[BaseModel]:
        if row is None:
            return None
        return self.record.model_validate(dict(row))


@dataclass(frozen=True)
class Scope:
    """Restricts a listing to rows where any of ``fields`` holds one of ``values``."""

    fields: Tuple[str, ...]
    values: FrozenSet[Any]

    @classmethod
    def of(cls, fields, values: Iterable[Any]) -> "Scope":
        if isinstance(fields, str):
            fields = (fields,)
        return cls(tuple(fields), frozenset(values))

    def matches(self, row: Mapping[str, Any]) -> bool:
        return any(row.get(name) in self.values for name in self.fields)


_FEED = {"order_by": ("created_at", "id"), "descending": True}
_CONVERSATION = {"order_by": ("created_at", "id")}

ENTITIES: Dict[str, Entity] = {
    entity.kind: entity
    for entity in (
        Entity(
            "user",
            UserAccount,
            defaults={"role": "client"},
            unique=("email",),
            casefold=("email",),
        ),
        Entity(
            "project",
            ProjectOut,
            defaults={"status": "new", "progress": 0},
            timestamped=False,
        ),
        Entity(
            "project_phase",
            PhaseOut,
            order_by=("order", "id"),
            defaults={"status": "pending"},
            timestamped=False,
        ),
        Entity(
            "task",
            TaskOut,
            defaults={"status": "new", "priority": "medium", "attachments": [], "comment_count": 0},
            managed=frozenset({"comment_count"}),
        ),
        Entity("task_comment", TaskCommentOut, defaults={"attachments": []}, **_CONVERSATION),
        Entity(
            "message",
            MessageOut,
            defaults={"is_read": False, "attachments": []},
            progressions={"is_read": (False, True)},
            **_CONVERSATION,
        ),
        Entity("activity", ActivityOut, defaults={"metadata": {}}, append_only=True, **_FEED),
        Entity("project_file", FileOut, **_FEED),
        Entity("finance_document", FinanceDocumentOut, defaults={"status": "pending"}, **_FEED),
        Entity(
            "support_ticket",
            SupportTicketOut,
            defaults={"status": "open", "priority": "medium"},
            managed=frozenset({"closed_at"}),
            progressions={"status": TICKET_STATUS_ORDER},
            stamps={"status": ("closed", "closed_at")},
            **_FEED,
        ),
    )
}


def entity_for(kind: str) -> Entity:
    try:
        return ENTITIES[kind]
    except KeyError:
        raise ValueError(f"Unknown entity kind: {kind}") from None
