# src/task_tracker/auth/service.py

"""
Credential checks and stateless session tokens.

Tokens are HS256 JWTs carrying {username, role, iat, exp}. Nothing is stored
server-side: a token is valid if its signature checks out under the configured
key and it has not expired. There is no revocation.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

import jwt

from ..errors import AuthenticationError, ConfigError, InvalidTokenError, PermissionDeniedError
from ..users.user_models import Account, Role
from ..users.user_store import UserStore
from .passwords import PasswordHasher

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"


@dataclass(frozen=True, slots=True)
class Claims:
    username: str
    role: Role
    expires_at: datetime

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN


class AuthService:
    def __init__(
        self,
        users: UserStore,
        hasher: PasswordHasher,
        *,
        signing_key: str | None,
        token_ttl: timedelta = timedelta(hours=1),
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        if not signing_key:
            raise ConfigError("A token signing key is required.")
        self._users = users
        self._hasher = hasher
        self._key = signing_key
        self._ttl = token_ttl
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    def authenticate(self, username: str, password: str) -> Account:
        account = self._users.find(username)
        ok = self._hasher.verify(password, account.password_hash if account else None)
        if account is None or not ok:
            # Same message either way; the log keeps the detail.
            reason = "unknown user" if account is None else "bad password"
            logger.info("Authentication failed for %r (%s)", username, reason)
            raise AuthenticationError()
        logger.debug("Authenticated %r", username)
        return account

    def issue_token(self, account: Account) -> str:
        now = self._clock()
        payload = {
            "username": account.username,
            "role": account.role.value,
            "iat": now,
            "exp": now + self._ttl,
        }
        return jwt.encode(payload, self._key, algorithm=ALGORITHM)

    def verify_token(self, token: str) -> Claims:
        try:
            payload = jwt.decode(
                token,
                self._key,
                algorithms=[ALGORITHM],
                options={"require": ["exp", "username", "role"]},
            )
        except jwt.PyJWTError as exc:
            logger.info("Token rejected: %s", exc.__class__.__name__)
            raise InvalidTokenError() from exc

        username = payload.get("username")
        role = Role.parse(payload.get("role"))
        if not isinstance(username, str) or not username or role is None:
            logger.info("Token rejected: bad claims")
            raise InvalidTokenError()

        return Claims(
            username=username,
            role=role,
            expires_at=datetime.fromtimestamp(int(payload["exp"]), tz=timezone.utc),
        )

    @staticmethod
    def require_admin(principal: Claims | Account) -> None:
        if principal.role != Role.ADMIN:
            logger.warning("Admin action denied for %r", principal.username)
            raise PermissionDeniedError()
