"""
Admin credentials and bearer tokens.

Passwords are stored as bcrypt hashes; tokens are HS256 JWTs carrying the
admin id and a fixed lifetime.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Optional

from jose import JWTError, jwt
from jose.exceptions import ExpiredSignatureError
from passlib.context import CryptContext

from school_cms.db import DbClient
from school_cms.errors import (
    ExpiredTokenError,
    InvalidCredentialsError,
    InvalidTokenError,
    MissingTokenError,
)

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


@dataclass
class TokenService:
    secret_key: str
    ttl_seconds: int = 3600
    algorithm: str = "HS256"

    def issue(self, admin_id: int, now: Optional[int] = None) -> str:
        issued_at = int(time.time()) if now is None else now
        payload = {
            "id": admin_id,
            "iat": issued_at,
            "exp": issued_at + self.ttl_seconds,
        }
        return jwt.encode(payload, self.secret_key, algorithm=self.algorithm)

    def verify(self, token: str) -> dict:
        """Return the decoded claims or raise Invalid/ExpiredTokenError."""
        try:
            claims = jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
        except ExpiredSignatureError as exc:
            raise ExpiredTokenError() from exc
        except JWTError as exc:
            raise InvalidTokenError() from exc

        exp = claims.get("exp")
        if exp is None or "id" not in claims:
            raise InvalidTokenError()
        if exp < time.time():
            raise ExpiredTokenError()
        return claims


def bearer_token(authorization: Optional[str]) -> str:
    """Extract the token from an ``Authorization: Bearer <token>`` header."""
    parts = (authorization or "").split(" ")
    if len(parts) < 2 or not parts[1]:
        raise MissingTokenError()
    return parts[1]


def login(db: DbClient, tokens: TokenService, username: str, password: str) -> str:
    admin = db.get_admin_by_username(username)
    if not admin or not verify_password(password, admin.password_hash):
        # Same error for unknown user and wrong password.
        logger.info("Rejected login for %r", username)
        raise InvalidCredentialsError()
    return tokens.issue(admin.id)
