from blogapi.errors.auth import (
    AdminRoleRequiredError,
    AuthorizationError,
    InvalidCredentialsError,
    RoleAssignmentError,
    UserAuthenticationError,
    auth_exception_handler,
)
from blogapi.errors.base import BaseAppError, create_exception_handler
from blogapi.errors.database import (
    DatabaseError,
    DuplicateEntryError,
    PostNotFoundError,
    RecordNotFoundError,
    database_exception_handler,
)
from blogapi.errors.password_hasher import (
    PasswordHashingError,
    password_hashing_exception_handler,
)
from blogapi.errors.upload import (
    ImageTooLargeError,
    InvalidImageError,
    StorageError,
    UnsupportedImageTypeError,
    UploadError,
    upload_exception_handler,
)
from blogapi.errors.validation import (
    ValidationError,
    field_error_handler,
    validation_exception_handler,
)

__all__ = [
    "AdminRoleRequiredError",
    "AuthorizationError",
    "BaseAppError",
    "DatabaseError",
    "DuplicateEntryError",
    "ImageTooLargeError",
    "InvalidCredentialsError",
    "InvalidImageError",
    "PasswordHashingError",
    "PostNotFoundError",
    "RecordNotFoundError",
    "RoleAssignmentError",
    "StorageError",
    "UnsupportedImageTypeError",
    "UploadError",
    "UserAuthenticationError",
    "ValidationError",
    "auth_exception_handler",
    "create_exception_handler",
    "database_exception_handler",
    "field_error_handler",
    "password_hashing_exception_handler",
    "upload_exception_handler",
    "validation_exception_handler",
]
