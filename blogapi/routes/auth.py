"""Authentication routes: registration, logins, sessions and role elevation."""

from typing import Annotated

from fastapi import APIRouter, File, Form, Request, UploadFile
from fastapi.responses import ORJSONResponse
from pydantic import EmailStr
from starlette.responses import Response

from blogapi.auth.identity import Identity, Role
from blogapi.auth.permissions import ElevatedSessionDep, RoleGranterDep
from blogapi.configs import settings
from blogapi.configs.settings import (
    LOGIN_RATE_LIMIT,
    MAX_USERNAME_LENGTH,
    MIN_PASSWORD_LENGTH,
    REGISTER_RATE_LIMIT,
)
from blogapi.dependencies import AuthServiceDep, CurrentIdentity
from blogapi.errors import ValidationError
from blogapi.managers import limiter
from blogapi.monitoring import get_logger
from blogapi.schemas.auth import LoginRequest, MessageResponse, RoleGrantRequest, UserProfile
from blogapi.services.images import ImageUpload

logger = get_logger(__name__)

router = APIRouter(prefix="/auth", tags=["🔐 Auth"])

RATE_LIMITED = {
    "description": "Rate limit exceeded",
    "content": {"application/json": {"example": {"detail": "Rate limit exceeded"}}},
}
INVALID_ENTRY = {
    "description": "Unauthorized",
    "content": {"application/json": {"example": {"detail": "Invalid entry"}}},
}


def set_session_cookie(response: Response, token: str) -> None:
    """Attach the session token as an HTTP-only cookie."""
    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=token,
        max_age=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        httponly=True,
        secure=settings.COOKIE_SECURE,
        samesite=settings.COOKIE_SAMESITE,
    )


@router.post(
    "/register",
    response_class=ORJSONResponse,
    response_model=UserProfile,
    summary="Register a new user",
    description="Create an account from a multipart form, with an optional profile picture.",
    responses={
        400: {
            "description": "Bad Request",
            "content": {
                "application/json": {
                    "example": {
                        "detail": "Validation failed",
                        "errors": [
                            {
                                "field": "confirmPassword",
                                "message": "Passwords don't match",
                                "type": "value_error",
                            },
                        ],
                    },
                },
            },
        },
        429: RATE_LIMITED,
    },
    operation_id="auth_register",
)
@limiter.limit(REGISTER_RATE_LIMIT)
async def register(
    request: Request,
    response: Response,
    auth_service: AuthServiceDep,
    username: Annotated[str, Form(min_length=1, max_length=MAX_USERNAME_LENGTH)],
    email: Annotated[EmailStr, Form()],
    password: Annotated[str, Form(min_length=MIN_PASSWORD_LENGTH)],
    confirm_password: Annotated[str, Form(alias="confirmPassword")],
    profile_pic: Annotated[UploadFile | None, File(alias="profilePic")] = None,
) -> UserProfile:
    """
    Register a new user.

    Parameters
    ----------
    request : Request
        Current request context.
    response : Response
        Response object for middleware/decorators.
    auth_service : AuthService
        Authentication service dependency.
    username, email, password, confirm_password : str
        Registration form fields.
    profile_pic : UploadFile | None
        Optional profile picture.

    Returns
    -------
    UserProfile
        The created account.

    Raises
    ------
    ValidationError
        If the passwords differ or the email is taken.
    """
    if password != confirm_password:
        raise ValidationError.for_field("confirmPassword", "Passwords don't match")

    return await auth_service.register(
        username=username,
        email=str(email),
        password=password,
        profile_picture=await ImageUpload.from_upload(profile_pic),
    )


@router.post(
    "/login",
    response_class=ORJSONResponse,
    response_model=MessageResponse,
    summary="Log in",
    description="Authenticate with email and password and receive the session cookie.",
    responses={
        200: {"content": {"application/json": {"example": {"message": "Logged in"}}}},
        401: INVALID_ENTRY,
        429: RATE_LIMITED,
    },
    operation_id="auth_login",
)
@limiter.limit(LOGIN_RATE_LIMIT)
async def login(
    request: Request,
    response: Response,
    credentials: LoginRequest,
    auth_service: AuthServiceDep,
) -> MessageResponse:
    """
    Log in with email and password.

    Parameters
    ----------
    request : Request
        Current request context.
    response : Response
        Response the session cookie is attached to.
    credentials : LoginRequest
        Email and password.
    auth_service : AuthService
        Authentication service dependency.

    Returns
    -------
    MessageResponse
        Confirmation message.

    Raises
    ------
    InvalidCredentialsError
        If authentication fails, whatever the reason.
    """
    token = await auth_service.login(str(credentials.email), credentials.password)
    set_session_cookie(response, token)
    return MessageResponse(message="Logged in")


@router.post(
    "/logout",
    response_class=ORJSONResponse,
    response_model=MessageResponse,
    summary="Log out",
    description="Clear the session cookie.",
    operation_id="auth_logout",
)
async def logout(
    request: Request,
    response: Response,
    identity: CurrentIdentity,
) -> MessageResponse:
    """
    Log out the current caller.

    Returns
    -------
    MessageResponse
        Confirmation message.
    """
    response.delete_cookie(
        key=settings.SESSION_COOKIE_NAME,
        httponly=True,
        secure=settings.COOKIE_SECURE,
        samesite=settings.COOKIE_SAMESITE,
    )
    logger.info(f"User {identity.user_id} logged out")
    return MessageResponse(message="Logged out")


@router.post(
    "/admin",
    response_class=ORJSONResponse,
    response_model=MessageResponse,
    summary="Admin log in",
    description="Elevated login. Requires the ADMIN role and marks the session as elevated.",
    responses={
        401: INVALID_ENTRY,
        403: {
            "description": "Forbidden",
            "content": {"application/json": {"example": {"detail": "Admin role required"}}},
        },
        429: RATE_LIMITED,
    },
    operation_id="auth_admin_login",
)
@limiter.limit(LOGIN_RATE_LIMIT)
async def admin_login(
    request: Request,
    response: Response,
    credentials: LoginRequest,
    auth_service: AuthServiceDep,
) -> MessageResponse:
    """
    Log in through the elevated admin flow.

    Raises
    ------
    InvalidCredentialsError
        If authentication fails.
    AdminRoleRequiredError
        If the user does not hold the ADMIN role.
    """
    token = await auth_service.admin_login(str(credentials.email), credentials.password)
    set_session_cookie(response, token)
    return MessageResponse(message="Logged in as admin")


@router.get(
    "/admin-session",
    response_class=ORJSONResponse,
    response_model=MessageResponse,
    summary="Check elevated session",
    description="Succeeds only for sessions opened through the admin login.",
    operation_id="auth_admin_session",
)
async def admin_session(identity: ElevatedSessionDep) -> MessageResponse:
    """Report whether the caller is in an elevated session."""
    return MessageResponse(message="Admin session active")


@router.get(
    "",
    response_class=ORJSONResponse,
    response_model=UserProfile,
    summary="Current user",
    description="Profile of the authenticated caller.",
    operation_id="auth_current_user",
)
async def current_user(identity: CurrentIdentity, auth_service: AuthServiceDep) -> UserProfile:
    """Return the profile of the authenticated caller."""
    return await auth_service.profile(identity)


async def _grant(auth_service: AuthServiceDep, granter: Identity, email: str, role: Role) -> MessageResponse:
    await auth_service.grant_role(email, role)
    logger.info(f"User {granter.user_id} granted {role}")
    return MessageResponse(message=f"{role} role granted")


@router.post(
    "/make-admin",
    response_class=ORJSONResponse,
    response_model=MessageResponse,
    summary="Grant ADMIN",
    description="Grant the ADMIN role to an account. Requires the OWNER role.",
    responses={
        400: {
            "description": "Bad Request",
            "content": {"application/json": {"example": {"detail": "Invalid credentials"}}},
        },
    },
    operation_id="auth_make_admin",
)
async def make_admin(
    body: RoleGrantRequest,
    granter: RoleGranterDep,
    auth_service: AuthServiceDep,
) -> MessageResponse:
    """Grant the ADMIN role to the account behind ``body.email``."""
    return await _grant(auth_service, granter, str(body.email), Role.ADMIN)


@router.post(
    "/make-owner",
    response_class=ORJSONResponse,
    response_model=MessageResponse,
    summary="Grant OWNER",
    description="Grant the OWNER role to an account. Requires the OWNER role.",
    responses={
        400: {
            "description": "Bad Request",
            "content": {"application/json": {"example": {"detail": "Invalid credentials"}}},
        },
    },
    operation_id="auth_make_owner",
)
async def make_owner(
    body: RoleGrantRequest,
    granter: RoleGranterDep,
    auth_service: AuthServiceDep,
) -> MessageResponse:
    """Grant the OWNER role to the account behind ``body.email``."""
    return await _grant(auth_service, granter, str(body.email), Role.OWNER)
