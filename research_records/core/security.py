"""Password hashing and the signed access tokens behind cookie and Bearer auth.

A token carries the user id, email and the role resolved at sign-in. The role
is re-read from the user row on every request, so a token issued before a
role change never grants the old role.
"""

from datetime import datetime, timedelta, timezone
from typing import Any
from uuid import UUID

import bcrypt
from jose import JWTError, jwt
from pydantic import BaseModel, ValidationError

from research_records.core.config import get_settings
from research_records.models.enums import UserRole

settings = get_settings()

ALGORITHM = "HS256"
TOKEN_ISSUER = "research-records"

# httpOnly cookie carrying the access token
AUTH_COOKIE_NAME = "rr_token"

# bcrypt ignores input past this length
BCRYPT_MAX_BYTES = 72


class TokenData(BaseModel):
    user_id: UUID
    email: str
    role: UserRole = UserRole.STUDENT
    exp: datetime


def _password_bytes(password: str) -> bytes:
    return password.encode("utf-8")[:BCRYPT_MAX_BYTES]


def hash_password(password: str) -> str:
    salt = bcrypt.gensalt(rounds=settings.bcrypt_rounds)
    return bcrypt.hashpw(_password_bytes(password), salt).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """False for a wrong password and for a stored value that is not a bcrypt hash."""
    try:
        return bcrypt.checkpw(_password_bytes(plain_password), hashed_password.encode("utf-8"))
    except ValueError:
        return False


def create_access_token(
    user_id: UUID,
    email: str,
    role: UserRole,
    expires_delta: timedelta | None = None,
) -> str:
    issued_at = datetime.now(timezone.utc)
    lifetime = expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    claims: dict[str, Any] = {
        "sub": str(user_id),
        "email": email,
        "role": role.value,
        "iss": TOKEN_ISSUER,
        "iat": issued_at,
        "exp": issued_at + lifetime,
    }
    return jwt.encode(claims, settings.secret_key, algorithm=ALGORITHM)


def decode_access_token(token: str) -> TokenData | None:
    """Claims of a valid, unexpired token; None for anything else."""
    try:
        claims = jwt.decode(
            token,
            settings.secret_key,
            algorithms=[ALGORITHM],
            issuer=TOKEN_ISSUER,
        )
        return TokenData(
            user_id=claims.get("sub"),
            email=claims.get("email"),
            role=claims.get("role", UserRole.STUDENT.value),
            exp=datetime.fromtimestamp(claims["exp"], tz=timezone.utc),
        )
    except (JWTError, ValidationError, KeyError, ValueError, TypeError):
        return None


def create_cookie_token(user_id: UUID, email: str, role: UserRole) -> tuple[str, int]:
    """The access token plus the cookie max-age in seconds."""
    token = create_access_token(user_id, email, role)
    return token, settings.access_token_expire_minutes * 60
