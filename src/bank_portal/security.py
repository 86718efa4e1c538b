"""
Password hashing and bearer-token helpers.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

import bcrypt
import jwt

from .config import Settings, get_settings
from .errors import Unauthorized

ROLES = ("user", "employee", "admin")


@dataclass(frozen=True)
class Principal:
    principal_id: str
    role: str


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, password_hash: Optional[str]) -> bool:
    if not password or not password_hash:
        return False
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # stored value is not a bcrypt hash
        return False


def issue_token(principal_id, role: str, settings: Optional[Settings] = None) -> str:
    """
    Sign a bearer token for the given principal.
    """
    if role not in ROLES:
        raise ValueError(f"unknown role: {role}")
    settings = settings or get_settings()
    now = datetime.now(timezone.utc)
    payload = {
        "sub": str(principal_id),
        "role": role,
        "iat": now,
        "exp": now + timedelta(minutes=settings.jwt_expires_minutes),
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_token(token: Optional[str], settings: Optional[Settings] = None) -> Principal:
    """
    Verify signature and expiry and resolve the token to a Principal.

    Raises Unauthorized for a missing, malformed, expired or forged token.
    """
    if not token:
        raise Unauthorized("No token, authorization denied")
    settings = settings or get_settings()
    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[settings.jwt_algorithm],
            options={"require": ["sub", "exp"]},
        )
    except jwt.ExpiredSignatureError:
        raise Unauthorized("Token expired")
    except jwt.InvalidTokenError:
        raise Unauthorized("Invalid token")

    role = payload.get("role")
    if role not in ROLES:
        raise Unauthorized("Invalid token")
    return Principal(principal_id=str(payload["sub"]), role=role)


def extract_bearer(authorization: Optional[str]) -> Optional[str]:
    """
    Pull the token out of an ``Authorization: Bearer <token>`` header value.
    """
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()
