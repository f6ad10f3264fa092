"""Caller identity resolution.

The identity provider hands the browser a signed token carrying the opaque
user id. The only fact the rest of the application consumes is "the current
caller's user id, or none".
"""

from typing import Optional

from fastapi import Cookie, Header
from itsdangerous import BadSignature, SignatureExpired, URLSafeTimedSerializer

from cse_whiteboard.common.exceptions import UnauthorizedError

COOKIE_NAME = "whiteboard_session"
_SALT = "whiteboard-identity"


def _get_serializer() -> URLSafeTimedSerializer:
    from cse_whiteboard.common.config import get_settings
    return URLSafeTimedSerializer(get_settings().secret_key, salt=_SALT)


def create_identity_token(user_id: str) -> str:
    """Sign a user id and return the token value."""
    s = _get_serializer()
    return s.dumps({"sub": user_id})


def verify_identity_token(token: str) -> str | None:
    """Verify and decode a token. Returns the user id or None."""
    from cse_whiteboard.common.config import get_settings

    s = _get_serializer()
    try:
        payload = s.loads(token, max_age=get_settings().session_max_age)
    except (BadSignature, SignatureExpired):
        return None
    if not isinstance(payload, dict):
        return None
    user_id = payload.get("sub")
    return user_id if isinstance(user_id, str) and user_id else None


async def resolve_caller(
    authorization: Optional[str] = Header(None),
    whiteboard_session: Optional[str] = Cookie(None),
) -> str | None:
    """FastAPI dependency yielding the caller's user id, or None if anonymous."""
    token = None
    if authorization and authorization.lower().startswith("bearer "):
        token = authorization[7:].strip()
    elif whiteboard_session:
        token = whiteboard_session
    if not token:
        return None
    return verify_identity_token(token)


def require_user(user_id: str | None) -> str:
    """Return the caller id or raise UnauthorizedError."""
    if not user_id:
        raise UnauthorizedError()
    return user_id
