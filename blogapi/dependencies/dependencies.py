"""Application dependencies: sessions, services and the caller identity."""

from typing import Annotated

from fastapi import Depends, HTTPException, Request
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.status import HTTP_401_UNAUTHORIZED

from blogapi.auth.identity import Identity
from blogapi.configs import settings
from blogapi.db import get_session
from blogapi.managers.token_manager import decode_session_token
from blogapi.services import AuthService, PostService

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/login", auto_error=False)

SessionDep = Annotated[AsyncSession, Depends(get_session)]


def get_auth_service(session: SessionDep) -> AuthService:
    return AuthService(session)


def get_post_service(session: SessionDep) -> PostService:
    return PostService(session)


AuthServiceDep = Annotated[AuthService, Depends(get_auth_service)]
PostServiceDep = Annotated[PostService, Depends(get_post_service)]


async def get_optional_identity(
    request: Request,
    bearer: Annotated[str | None, Depends(oauth2_scheme)],
) -> Identity | None:
    """
    Decode the caller identity, if any.

    The session cookie is read first. An ``Authorization: Bearer`` header
    is used when the cookie is absent or does not decode.

    Parameters
    ----------
    request : Request
        Current request context.
    bearer : str | None
        Token from the Authorization header.

    Returns
    -------
    Identity | None
        The caller, or None for anonymous or invalid credentials.
    """
    for token in (request.cookies.get(settings.SESSION_COOKIE_NAME), bearer):
        if token and (identity := decode_session_token(token)) is not None:
            return identity
    return None


async def get_current_identity(
    identity: Annotated[Identity | None, Depends(get_optional_identity)],
) -> Identity:
    """
    Require an authenticated caller.

    Raises
    ------
    HTTPException
        401 when no valid session token is presented.
    """
    if identity is None:
        raise HTTPException(
            status_code=HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return identity


CurrentIdentity = Annotated[Identity, Depends(get_current_identity)]
