"""Authentication and authorization errors."""

from starlette.status import (
    HTTP_400_BAD_REQUEST,
    HTTP_401_UNAUTHORIZED,
    HTTP_403_FORBIDDEN,
)

from blogapi.configs.settings import INVALID_ENTRY_MESSAGE
from blogapi.errors.base import BaseAppError, create_exception_handler
from blogapi.monitoring import get_logger

logger = get_logger(__name__)


class UserAuthenticationError(BaseAppError):
    """Base class for authentication errors."""

    def __init__(
        self,
        detail: str = "Authentication failed",
        status_code: int = HTTP_401_UNAUTHORIZED,
    ) -> None:
        super().__init__(detail, status_code)


class InvalidCredentialsError(UserAuthenticationError):
    """Raised for an unknown email and for a wrong password alike."""

    def __init__(self) -> None:
        super().__init__(INVALID_ENTRY_MESSAGE, HTTP_401_UNAUTHORIZED)


class AuthorizationError(BaseAppError):
    """Base class for authorization errors."""

    def __init__(
        self,
        detail: str = "Not enough permissions",
        status_code: int = HTTP_403_FORBIDDEN,
    ) -> None:
        super().__init__(detail, status_code)


class AdminRoleRequiredError(AuthorizationError):
    """Raised when the elevated login is attempted without the ADMIN role."""

    def __init__(self) -> None:
        super().__init__("Admin role required", HTTP_403_FORBIDDEN)


class RoleAssignmentError(AuthorizationError):
    """Raised when a role is granted to an email with no account."""

    def __init__(self) -> None:
        super().__init__("Invalid credentials", HTTP_400_BAD_REQUEST)


auth_exception_handler = create_exception_handler(logger)
