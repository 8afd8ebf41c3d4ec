"""Opaque-token sessions persisted through the repository."""
import logging
import secrets
from datetime import datetime, timedelta
from typing import Callable, Optional, Tuple

from portal.credentials import authenticate
from portal.errors import Unauthenticated
from portal.repository import Repository
from portal.schemas import UserAccount
from portal.schemas.common import utcnow

logger = logging.getLogger(__name__)

DEFAULT_TTL = timedelta(days=7)
PASSWORD_RESET_MESSAGE = "If the email exists, a reset link has been sent"


class SessionManager:
    """Issues, resolves and revokes session tokens.

    Nothing is cached: every ``resolve`` reads the session row and the user
    row again, so revocation and user deletion take effect immediately.
    """

    def __init__(
        self,
        repository: Repository,
        ttl: timedelta = DEFAULT_TTL,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.repository = repository
        self.ttl = ttl
        self.clock = clock

    def login(self, email: str, password: str) -> Tuple[str, UserAccount]:
        user = authenticate(self.repository, email, password)
        now = self.clock()
        token = secrets.token_urlsafe(32)
        self.repository.create_session(token, user.id, now, now + self.ttl)
        logger.info("User %s logged in", user.email)
        return token, user

    def resolve(self, token: Optional[str]) -> UserAccount:
        """Map a token to its user; unknown, expired and orphaned tokens all fail alike."""
        if not token:
            raise Unauthenticated()
        session = self.repository.get_session(token)
        if session is None:
            raise Unauthenticated()
        if session.expires_at <= self.clock():
            self.repository.delete_session(token)
            logger.info("Session for user %s expired", session.user_id)
            raise Unauthenticated()
        user = self.repository.get_user(session.user_id)
        if user is None:
            self.repository.delete_session(token)
            raise Unauthenticated()
        return user

    def logout(self, token: Optional[str]) -> None:
        if not token or not self.repository.delete_session(token):
            raise Unauthenticated()
        logger.info("Session revoked")

    def revoke_user_sessions(self, user_id: int) -> int:
        revoked = self.repository.delete_sessions_for_user(user_id)
        if revoked:
            logger.info("Revoked %d sessions of user %s", revoked, user_id)
        return revoked

    def purge_expired(self) -> int:
        return self.repository.purge_sessions(self.clock())

    def request_password_reset(self, email: str) -> str:
        # No token is issued and nothing is sent; the answer never depends on the email
        logger.debug("Password reset requested")
        return PASSWORD_RESET_MESSAGE
