"""Error taxonomy shared by the access engine, the repository and the services.

Every failure a caller can observe is one of the classes below. The HTTP
layer maps them to responses through ``status_code``/``detail``; nothing in
the core raises ``HTTPException`` directly.
"""
from typing import Any, Dict, List, Mapping, Optional, Type, TypeVar, Union

from pydantic import BaseModel, ValidationError

ModelT = TypeVar("ModelT", bound=BaseModel)
# Service payloads arrive either validated or as raw request data
Payload = Union[BaseModel, Mapping[str, Any]]


class PortalError(Exception):
    status_code = 500
    default_detail = "Internal server error"

    def __init__(self, detail: Optional[str] = None):
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


class Unauthenticated(PortalError):
    """No valid session. Expired, revoked and missing sessions look the same."""

    status_code = 401
    default_detail = "Not authenticated"


class Forbidden(PortalError):
    status_code = 403
    default_detail = "Access denied"


class NotFound(PortalError):
    status_code = 404
    default_detail = "Resource not found"


class Conflict(PortalError):
    status_code = 409
    default_detail = "Resource already exists"


class ValidationFailed(PortalError):
    """Malformed or missing fields; ``errors`` lists one entry per field."""

    status_code = 422
    default_detail = "Invalid data"

    def __init__(self, detail: Optional[str] = None, errors: Optional[List[Dict[str, str]]] = None):
        super().__init__(detail)
        self.errors = errors or []

    @classmethod
    def for_field(cls, field: str, message: str) -> "ValidationFailed":
        return cls(message, [{"field": field, "message": message}])


def field_errors(exc) -> List[Dict[str, str]]:
    """Flatten a pydantic (or FastAPI request) validation error into ``{"field", "message"}`` pairs."""

    errors = []
    for error in exc.errors():
        location = [str(part) for part in error.get("loc", ()) if part != "body"]
        errors.append({"field": ".".join(location) or "__root__", "message": error.get("msg", "invalid")})
    return errors


def parse_payload(model: Type[ModelT], data: Union[ModelT, Mapping[str, Any]]) -> ModelT:
    """Accept either a schema instance or a raw mapping and return the schema."""

    if isinstance(data, model):
        return data
    try:
        return model.model_validate(data)
    except ValidationError as exc:
        raise ValidationFailed(errors=field_errors(exc)) from exc
