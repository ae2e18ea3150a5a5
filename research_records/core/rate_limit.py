"""Rate limiting with slowapi.

Signed-in callers are limited per user, anonymous callers per client IP.
Counters live in Redis by default (``RATE_LIMIT_STORAGE_URI`` may point at
``memory://`` for single-process runs and tests).
"""

from slowapi import Limiter
from slowapi.util import get_remote_address
from starlette.requests import Request

from research_records.core.config import get_settings
from research_records.core.security import AUTH_COOKIE_NAME, decode_access_token

settings = get_settings()

RATE_LIMIT_DEFAULT = "1000/hour"

# Uploading a record is a deliberate, infrequent action
RATE_LIMIT_CREATE_RECORD = "60/hour"

# Credentials login and OAuth hand-offs
RATE_LIMIT_AUTH = "20/minute"

RATE_LIMIT_API = "100/minute"

# Exports read every matching record in scope
RATE_LIMIT_EXPORT = "10/minute"


def get_real_client_ip(request: Request) -> str:
    """Client IP, honouring X-Forwarded-For and X-Real-IP from the proxy."""
    forwarded_for = request.headers.get("X-Forwarded-For")
    if forwarded_for:
        # client, proxy1, proxy2
        return forwarded_for.split(",")[0].strip()

    real_ip = request.headers.get("X-Real-IP")
    if real_ip:
        return real_ip

    return get_remote_address(request)


def _bearer_token(request: Request) -> str | None:
    token = request.cookies.get(AUTH_COOKIE_NAME)
    if token:
        return token
    authorization = request.headers.get("Authorization", "")
    if authorization.lower().startswith("bearer "):
        return authorization[7:].strip() or None
    return None


def rate_limit_key(request: Request) -> str:
    """``user:<id>`` for a valid token, otherwise ``ip:<address>``."""
    token = _bearer_token(request)
    if token:
        token_data = decode_access_token(token)
        if token_data is not None:
            return f"user:{token_data.user_id}"
    return f"ip:{get_real_client_ip(request)}"


limiter = Limiter(
    key_func=rate_limit_key,
    default_limits=[RATE_LIMIT_DEFAULT],
    storage_uri=settings.limiter_storage_uri,
    strategy="fixed-window",
)
