"""Role and ownership based access decisions.

Each resource kind has a :class:`Policy` holding one ownership rule per
non-admin role. The same rule answers two questions:

* ``allows`` - may this caller touch this particular instance?
* ``scope`` - which rows of this kind may the caller list?

Children of a project (tasks, phases, files, activities, ...) delegate to
the project policy through :class:`ViaProject`, which resolves the caller's
project ids once and filters by ``project_id`` membership. Admins are always
allowed; a role without a rule is denied.
"""
import enum
import logging
from typing import Any, FrozenSet, Mapping, Optional

from portal.errors import Forbidden
from portal.repository import Repository, Scope
from portal.schemas import UserOut

logger = logging.getLogger(__name__)


class Role(str, enum.Enum):
    CLIENT = "client"
    MANAGER = "manager"
    ADMIN = "admin"


def _value(resource: Any, field: str) -> Any:
    if isinstance(resource, Mapping):
        return resource.get(field)
    return getattr(resource, field, None)


def require_role(caller: UserOut, *roles: Role) -> None:
    if caller.role not in {Role(role).value for role in roles}:
        logger.warning("Denied user %s (%s): requires role %s", caller.id, caller.role, "/".join(roles))
        raise Forbidden()


class Rule:
    def allows(self, repository: Repository, caller: UserOut, resource: Any) -> bool:
        raise NotImplementedError

    def scope(self, repository: Repository, caller: UserOut) -> Optional[Scope]:
        """Listing filter for the caller; ``None`` means every row."""
        raise NotImplementedError


class Owner(Rule):
    """The caller's id appears in one of ``fields``."""

    def __init__(self, *fields: str):
        self.fields = fields

    def allows(self, repository, caller, resource):
        return any(_value(resource, field) == caller.id for field in self.fields)

    def scope(self, repository, caller):
        return Scope.of(self.fields, [caller.id])

    def __repr__(self):
        return f"Owner{self.fields!r}"


class ViaProject(Rule):
    """The resource's parent project passes the project policy."""

    def __init__(self, field: str = "project_id"):
        self.field = field

    def allows(self, repository, caller, resource):
        project_id = _value(resource, self.field)
        if project_id is None:
            return False
        project = repository.get_project(project_id)
        return project is not None and is_allowed(repository, caller, PROJECTS, project)

    def scope(self, repository, caller):
        project_ids = owned_project_ids(repository, caller)
        if project_ids is None:
            return None
        return Scope.of(self.field, project_ids)

    def __repr__(self):
        return f"ViaProject({self.field!r})"


class Everyone(Rule):
    def allows(self, repository, caller, resource):
        return True

    def scope(self, repository, caller):
        return None


class Policy:
    def __init__(self, kind: str, client: Optional[Rule] = None, manager: Optional[Rule] = None):
        self.kind = kind
        self.rules = {Role.CLIENT.value: client, Role.MANAGER.value: manager}

    def rule_for(self, role: str) -> Optional[Rule]:
        return self.rules.get(role)

    def __repr__(self):
        return f"Policy({self.kind!r})"


PROJECTS = Policy("project", client=Owner("client_id"), manager=Owner("manager_id"))
TASKS = Policy("task", client=ViaProject(), manager=ViaProject())
PHASES = Policy("project_phase", client=ViaProject(), manager=ViaProject())
FILES = Policy("project_file", client=ViaProject(), manager=ViaProject())
ACTIVITIES = Policy("activity", client=ViaProject(), manager=ViaProject())
MESSAGES = Policy("message", client=Owner("sender_id", "receiver_id"), manager=Owner("sender_id", "receiver_id"))
# Only the receiver may mark a message read
MESSAGE_RECEIPTS = Policy("message", client=Owner("receiver_id"), manager=Owner("receiver_id"))
FINANCE_DOCUMENTS = Policy("finance_document", client=Owner("client_id"), manager=ViaProject())
SUPPORT_TICKETS = Policy("support_ticket", client=Owner("client_id"), manager=Everyone())


def is_allowed(repository: Repository, caller: UserOut, policy: Policy, resource: Any) -> bool:
    if caller.role == Role.ADMIN.value:
        return True
    rule = policy.rule_for(caller.role)
    if rule is None:
        return False
    return rule.allows(repository, caller, resource)


def authorize(repository: Repository, caller: UserOut, policy: Policy, resource: Any) -> None:
    """Raise ``Forbidden`` unless ``caller`` may access ``resource``."""
    if not is_allowed(repository, caller, policy, resource):
        logger.warning(
            "Denied user %s (%s) access to %s %s",
            caller.id,
            caller.role,
            policy.kind,
            _value(resource, "id"),
        )
        raise Forbidden()


def scope_for(repository: Repository, caller: UserOut, policy: Policy) -> Optional[Scope]:
    """Listing filter for ``policy``; ``None`` when the caller sees everything."""
    if caller.role == Role.ADMIN.value:
        return None
    rule = policy.rule_for(caller.role)
    if rule is None:
        return Scope.of("id", [])
    return rule.scope(repository, caller)


def owned_project_ids(repository: Repository, caller: UserOut) -> Optional[FrozenSet[int]]:
    """Ids of the projects the caller may access; ``None`` when unrestricted."""
    scope = scope_for(repository, caller, PROJECTS)
    if scope is None:
        return None
    return frozenset(project.id for project in repository.list_projects(scope))
