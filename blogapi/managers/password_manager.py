"""
Password hashing module using Argon2 with passlib's CryptContext.

Hashing and verification run in a thread pool so the event loop is
never blocked by the key derivation.
"""

from asyncio import get_running_loop
from concurrent.futures import ThreadPoolExecutor

from passlib.context import CryptContext
from passlib.exc import InternalBackendError

from blogapi.configs import settings
from blogapi.decorators.with_retry import with_retry
from blogapi.errors import PasswordHashingError
from blogapi.monitoring import get_logger

executor = ThreadPoolExecutor(max_workers=4)
logger = get_logger(__name__)


class PasswordHasher:
    """
    Password hashing and verification manager using Argon2id.

    pbkdf2_sha256 hashes are still accepted and flagged for upgrade.
    """

    def __init__(self) -> None:
        self.pwd_context = CryptContext(
            schemes=["argon2", "pbkdf2_sha256"],
            deprecated="pbkdf2_sha256",
            argon2__memory_cost=settings.ARGON2_MEMORY_COST,
            argon2__time_cost=settings.ARGON2_TIME_COST,
            argon2__parallelism=settings.ARGON2_PARALLELISM,
        )

    def hash(self, password: str) -> str:
        """
        Hash a plaintext password using Argon2id.

        Args:
            password: The plaintext password to hash

        Returns:
            str: The hashed password in Argon2id format

        Raises:
            ValueError: If password is empty
            PasswordHashingError: If hashing fails
        """
        if not password:
            msg = "Password cannot be empty"
            raise ValueError(msg)

        try:
            return self.pwd_context.hash(password)
        except (ValueError, InternalBackendError, UnicodeError) as e:
            logger.exception("Error hashing password")
            mssg = "Failed to hash password"
            raise PasswordHashingError(mssg) from e

    def verify(self, password: str, hashed_password: str) -> bool:
        """
        Verify a plaintext password against a hashed password.

        Args:
            password: The plaintext password to verify
            hashed_password: The hashed password to verify against

        Returns:
            bool: True if password matches, False otherwise
        """
        if not hashed_password.strip():
            logger.warning("Invalid hash format provided")
            return False

        try:
            return self.pwd_context.verify(password, hashed_password)
        except ValueError:
            logger.exception("Stored hash is corrupted or invalid format")
            return False

    def dummy_verify(self) -> bool:
        """Spend the same time as a real verification, for unknown accounts."""
        return self.pwd_context.dummy_verify()


_default_hasher = PasswordHasher()


def get_password_hasher() -> PasswordHasher:
    """Return the shared password hasher instance."""
    return _default_hasher


@with_retry(base_delay=1, max_delay=10, exec_retry=PasswordHashingError)
async def hash_password(password: str) -> str:
    """
    Hash a password using the default hasher.

    Args:
        password: The plaintext password to hash

    Returns:
        str: The hashed password
    """
    return await get_running_loop().run_in_executor(
        executor,
        get_password_hasher().hash,
        password,
    )


async def verify_password(password: str, hashed_password: str | None) -> bool:
    """
    Verify a password using the default hasher.

    A missing hash still costs one verification so that unknown
    accounts cannot be told apart by response time.

    Args:
        password: The plaintext password to verify
        hashed_password: The stored hash, or None when no account matched

    Returns:
        bool: True if password matches, False otherwise
    """
    hasher = get_password_hasher()
    if hashed_password is None:
        await get_running_loop().run_in_executor(executor, hasher.dummy_verify)
        return False
    return await get_running_loop().run_in_executor(
        executor,
        hasher.verify,
        password,
        hashed_password,
    )
