"""Authentication service: registration, logins and role elevation."""

from asyncio import gather

from sqlalchemy.ext.asyncio import AsyncSession

from blogapi.auth.identity import Identity, Role
from blogapi.configs import settings
from blogapi.db.database import atomic
from blogapi.errors import (
    AdminRoleRequiredError,
    DuplicateEntryError,
    InvalidCredentialsError,
    RecordNotFoundError,
    RoleAssignmentError,
    ValidationError,
)
from blogapi.managers.token_manager import create_session_token
from blogapi.models.user import UserDB
from blogapi.monitoring import get_logger
from blogapi.repositories.user import UserRepository
from blogapi.schemas.auth import UserProfile
from blogapi.services.images import ImageService, ImageUpload

logger = get_logger(__name__)

EMAIL_TAKEN = "User with this email already exists"
USERNAME_TAKEN = "This username is already taken"


class AuthService:
    """Service for handling user authentication."""

    def __init__(
        self,
        session: AsyncSession,
        images: ImageService | None = None,
        users: UserRepository | None = None,
    ) -> None:
        """
        Initialize the auth service.

        Args:
            session: Session shared by the repositories of one request
            images: Optional image service for profile pictures
            users: Optional user repository
        """
        self.session = session
        self.images = images or ImageService()
        self.users = users or UserRepository(session)

    async def register(
        self,
        username: str,
        email: str,
        password: str,
        profile_picture: ImageUpload | None = None,
    ) -> UserProfile:
        """
        Register a new account holding the USER role.

        The profile picture upload runs alongside the email check; both
        finish before the outcome is decided.

        Args:
            username: Display name
            email: Account email
            password: Plaintext password, already validated
            profile_picture: Optional uploaded picture

        Returns:
            UserProfile: The new account

        Raises:
            ValidationError: If the email is already registered
            UploadError: If the picture is rejected or cannot be stored
        """
        email = email.lower()
        upload_result, taken = await gather(
            self._upload(profile_picture),
            self.users.email_exists(email),
            return_exceptions=True,
        )
        picture = upload_result if isinstance(upload_result, str) else None

        if isinstance(upload_result, BaseException) or isinstance(taken, BaseException) or taken:
            await self.images.discard(picture)
            if isinstance(upload_result, BaseException):
                raise upload_result
            if isinstance(taken, BaseException):
                raise taken
            raise ValidationError.for_field("email", EMAIL_TAKEN, "value_error.duplicate")

        try:
            async with atomic(self.session):
                user = await self.users.create(
                    username=username,
                    email=email,
                    password=password,
                    profile_picture=picture or settings.DEFAULT_PROFILE_PICTURE,
                )
                await self.users.assign_role(user.uuid, Role.USER)
        except DuplicateEntryError as e:
            await self.images.discard(picture)
            if await self.users.email_exists(email):
                raise ValidationError.for_field("email", EMAIL_TAKEN, "value_error.duplicate") from e
            raise ValidationError.for_field("username", USERNAME_TAKEN, "value_error.duplicate") from e
        except Exception:
            await self.images.discard(picture)
            raise

        logger.info(f"Registered user {user.uuid}")
        return self._profile(user, {Role.USER})

    async def authenticate(self, email: str, password: str) -> UserDB:
        """
        Check credentials.

        Unknown emails and wrong passwords fail identically.

        Raises:
            InvalidCredentialsError: If the credentials do not match
        """
        user = await self.users.get_by_email(email.lower())
        if not await self.users.verify(user, password) or user is None:
            logger.warning("Failed login attempt")
            raise InvalidCredentialsError
        return user

    async def login(self, email: str, password: str) -> str:
        """
        Standard login.

        Returns:
            str: Session token carrying identity and role claims
        """
        user = await self.authenticate(email, password)
        roles = await self.users.list_roles(user.uuid)
        return create_session_token(user.uuid, user.email, roles)

    async def admin_login(self, email: str, password: str) -> str:
        """
        Elevated login for administrators.

        Returns:
            str: Session token with the elevated-session marker

        Raises:
            InvalidCredentialsError: If the credentials do not match
            AdminRoleRequiredError: If the user does not hold ADMIN
        """
        user = await self.authenticate(email, password)
        roles = await self.users.list_roles(user.uuid)
        if Role.ADMIN not in roles:
            logger.warning(f"Admin login refused for user {user.uuid}")
            raise AdminRoleRequiredError
        return create_session_token(user.uuid, user.email, roles, elevated=True)

    async def grant_role(self, email: str, role: Role) -> None:
        """
        Grant a role to the account registered under ``email``.

        Raises:
            RoleAssignmentError: If no account uses that email
        """
        async with atomic(self.session):
            user = await self.users.get_by_email(email.lower())
            if user is None:
                raise RoleAssignmentError
            await self.users.assign_role(user.uuid, role)
        logger.info(f"Granted {role} to user {user.uuid}")

    async def profile(self, identity: Identity) -> UserProfile:
        """
        Current account details.

        Raises:
            RecordNotFoundError: If the account no longer exists
        """
        user = await self.users.get_by_id(identity.user_id)
        if user is None:
            raise RecordNotFoundError(detail="User not found")
        return self._profile(user, await self.users.list_roles(user.uuid))

    async def _upload(self, image: ImageUpload | None) -> str | None:
        if image is None:
            return None
        return await self.images.store(image)

    @staticmethod
    def _profile(user: UserDB, roles: set[Role]) -> UserProfile:
        return UserProfile(
            user_id=user.uuid,
            username=user.username,
            email=user.email,
            profile_picture=user.profile_picture,
            roles=sorted(roles),
        )
