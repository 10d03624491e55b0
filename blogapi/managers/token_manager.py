"""Token manager for signed session tokens carrying identity and role claims."""

from collections.abc import Iterable
from datetime import UTC, datetime, timedelta
from uuid import UUID, uuid4

from jose import JWTError, jwt

from blogapi.auth.identity import Identity, Role
from blogapi.configs import settings

TOKEN_TYPE = "session"


def create_session_token(
    user_id: UUID,
    email: str,
    roles: Iterable[Role],
    *,
    elevated: bool = False,
    expires_delta: timedelta | None = None,
) -> str:
    """
    Create a signed session token.

    Args:
        user_id: User's UUID
        email: User's email
        roles: Role memberships to embed as claims
        elevated: Stamp the elevated-session marker (admin login flow)
        expires_delta: Optional expiration time delta

    Returns:
        str: Encoded JWT
    """
    now = datetime.now(UTC)
    expire = now + (expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES))

    to_encode = {
        "sub": str(user_id),
        "email": email,
        "roles": sorted(str(role) for role in roles),
        "jti": str(uuid4()),
        "iat": now,
        "exp": expire,
        "iss": settings.JWT_ISSUER,
        "aud": settings.JWT_AUDIENCE,
        "type": TOKEN_TYPE,
    }
    if elevated:
        to_encode["elevated"] = True

    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_session_token(token: str) -> Identity | None:
    """
    Decode and validate a session token.

    Signature, issuer, audience and expiry are all checked.

    Args:
        token: JWT token string

    Returns:
        Identity | None: Decoded caller or None if the token is invalid
    """
    try:
        payload = jwt.decode(
            token,
            settings.SECRET_KEY,
            algorithms=[settings.ALGORITHM],
            audience=settings.JWT_AUDIENCE,
            issuer=settings.JWT_ISSUER,
        )
    except JWTError:
        return None

    subject: str | None = payload.get("sub")
    email: str | None = payload.get("email")
    jti: str | None = payload.get("jti")
    raw_roles = payload.get("roles", [])

    if not subject or not email or not jti or payload.get("type") != TOKEN_TYPE:
        return None
    if not isinstance(raw_roles, list):
        return None

    try:
        user_id = UUID(subject)
        roles = frozenset(Role(role) for role in raw_roles)
    except ValueError:
        return None

    return Identity(
        user_id=user_id,
        email=email,
        roles=roles,
        elevated=payload.get("elevated") is True,
        token_id=jti,
    )

