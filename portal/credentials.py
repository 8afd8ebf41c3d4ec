"""Password hashing and user identity creation."""
import hashlib
import hmac
import logging
import secrets
from typing import Any, Mapping, Union

from portal.config import settings
from portal.errors import Conflict, Unauthenticated, ValidationFailed, parse_payload
from portal.repository import Repository
from portal.schemas import UserAccount, UserCreate

logger = logging.getLogger(__name__)

# Stored hashes carry only the salt, so these work factors are fixed
SCRYPT_N = 16384
SCRYPT_R = 8
SCRYPT_P = 1
KEY_LENGTH = 64
SALT_BYTES = 16

INVALID_CREDENTIALS = "Invalid email or password"


def _derive(plain: str, salt: str) -> bytes:
    return hashlib.scrypt(
        plain.encode("utf-8"),
        salt=salt.encode("utf-8"),
        n=SCRYPT_N,
        r=SCRYPT_R,
        p=SCRYPT_P,
        dklen=KEY_LENGTH,
        maxmem=64 * 1024 * 1024,
    )


def hash_password(plain: str) -> str:
    """Return ``"<hex key>.<hex salt>"`` for ``plain``."""
    salt = secrets.token_hex(SALT_BYTES)
    return f"{_derive(plain, salt).hex()}.{salt}"


def verify_password(plain: str, stored: str) -> bool:
    try:
        hashed, salt = stored.split(".")
        expected = bytes.fromhex(hashed)
    except (AttributeError, ValueError):
        return False
    if not salt or len(expected) != KEY_LENGTH:
        return False
    return hmac.compare_digest(_derive(plain, salt), expected)


# Compared against when the email is unknown so both failure paths cost one scrypt
_DUMMY_HASH = hash_password(secrets.token_hex(8))


def check_password(plain: str, field: str = "password") -> None:
    if len(plain) < settings.PASSWORD_MIN_LENGTH:
        raise ValidationFailed.for_field(
            field, f"Password must be at least {settings.PASSWORD_MIN_LENGTH} characters"
        )


def avatar_initials(first_name: str, last_name: str) -> str:
    return f"{first_name[:1]}{last_name[:1]}".upper()


def create_user(repository: Repository, data: Union[UserCreate, Mapping[str, Any]]) -> UserAccount:
    """Register a new identity. Duplicate emails are a ``Conflict``."""
    payload = parse_payload(UserCreate, data)
    check_password(payload.password)
    email = payload.email.strip().lower()
    if repository.get_user_by_email(email) is not None:
        raise Conflict("Email already registered")

    values = payload.model_dump(exclude={"password"})
    values["email"] = email
    values["avatar_initials"] = payload.avatar_initials or avatar_initials(payload.first_name, payload.last_name)
    values["password_hash"] = hash_password(payload.password)
    user = repository.create("user", values)
    logger.info("Created %s account %s", user.role, user.email)
    return user


def authenticate(repository: Repository, email: str, password: str) -> UserAccount:
    user = repository.get_user_by_email(email or "")
    if user is None:
        verify_password(password or "", _DUMMY_HASH)
        logger.info("Failed login for unknown email %s", email)
        raise Unauthenticated(INVALID_CREDENTIALS)
    if not verify_password(password or "", user.password_hash):
        logger.info("Failed login for %s", user.email)
        raise Unauthenticated(INVALID_CREDENTIALS)
    return user
