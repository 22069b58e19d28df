"""Password checks and JWT handling for the web login."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any, Optional

from jose import JWTError, jwt
from werkzeug.security import check_password_hash, generate_password_hash

from callcal.config.settings import settings
from callcal.core.exceptions import AuthenticationError


def hash_password(password: str) -> str:
    """Hash a password for storage as a member credential."""
    return generate_password_hash(password)


def verify_password(password: str, credential: Optional[str]) -> bool:
    """Check ``password`` against a stored credential; no credential never matches."""
    if not credential:
        return False
    try:
        return check_password_hash(credential, password)
    except ValueError:
        # Unknown hash format
        return False


# JWT Token handling
def create_access_token(
    member_id: int,
    expires_delta: Optional[timedelta] = None,
) -> str:
    """Create a JWT access token for a member."""
    expire = datetime.now(timezone.utc) + (
        expires_delta
        or timedelta(minutes=settings.jwt_access_token_expire_minutes)
    )
    to_encode = {"sub": str(member_id), "exp": expire, "type": "access"}
    return jwt.encode(
        to_encode,
        settings.jwt_secret_key.get_secret_value(),
        algorithm=settings.jwt_algorithm,
    )


def decode_token(token: str) -> dict[str, Any]:
    """Decode and validate a JWT token."""
    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret_key.get_secret_value(),
            algorithms=[settings.jwt_algorithm],
        )
        return payload
    except JWTError as e:
        raise AuthenticationError(f"Invalid token: {e}") from e


def verify_access_token(token: str) -> int:
    """Verify an access token and return the member id it was issued for."""
    payload = decode_token(token)
    if payload.get("type") != "access":
        raise AuthenticationError("Invalid token type")
    try:
        return int(payload["sub"])
    except (KeyError, TypeError, ValueError) as e:
        raise AuthenticationError("Invalid token subject") from e
