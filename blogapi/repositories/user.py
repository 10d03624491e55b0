"""User repository: the credential store."""

from uuid import UUID

from sqlalchemy import select

from blogapi.auth.identity import Role
from blogapi.managers.password_manager import hash_password, verify_password
from blogapi.models.user import UserDB, UserRoleDB
from blogapi.repositories.base import BaseRepository


class UserRepository(BaseRepository[UserDB]):
    """
    Repository for User database operations.

    Stores accounts, their password hashes and their role memberships.
    """

    model = UserDB
    id_field = "uuid"

    async def get_by_email(self, email: str) -> UserDB | None:
        """
        Get a user by email address.

        Args:
            email: Account email

        Returns:
            UserDB | None: User if found, None otherwise
        """
        return await self.get_by_field("email", email)

    async def email_exists(self, email: str) -> bool:
        return await self.get_by_email(email) is not None

    async def create(
        self,
        username: str,
        email: str,
        password: str,
        profile_picture: str | None = None,
    ) -> UserDB:
        """
        Create a user with a freshly hashed password.

        Args:
            username: Display name
            email: Account email
            password: Plaintext password
            profile_picture: Stored profile picture name

        Returns:
            UserDB: Created user

        Raises:
            DuplicateEntryError: If username or email already exists
        """
        user = UserDB(
            username=username,
            email=email,
            password_hash=await hash_password(password),
            profile_picture=profile_picture,
        )
        return await self._add_and_refresh(user, duplicate_detail="Username or email already exists")

    async def verify(self, user: UserDB | None, password: str) -> bool:
        """
        Check a password against a user's stored hash.

        Args:
            user: User looked up by email, or None when none matched
            password: Plaintext password

        Returns:
            bool: True if the user exists and the password matches
        """
        return await verify_password(password, user.password_hash if user else None)

    async def assign_role(self, user_id: UUID, role: Role) -> None:
        """
        Grant a role. Granting a role the user already holds is a no-op.

        Args:
            user_id: User receiving the role
            role: Role to grant
        """
        if role in await self.list_roles(user_id):
            return
        self.session.add(UserRoleDB(user_id=user_id, role=role.value))
        await self.session.flush()

    async def list_roles(self, user_id: UUID) -> set[Role]:
        """
        Get the roles a user holds.

        Args:
            user_id: User to look up

        Returns:
            set[Role]: Role memberships
        """
        result = await self.session.execute(
            select(UserRoleDB.role).where(UserRoleDB.user_id == user_id),
        )
        return {Role(role) for role in result.scalars().all()}
