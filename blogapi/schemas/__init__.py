from blogapi.schemas.auth import LoginRequest, MessageResponse, RoleGrantRequest, UserProfile
from blogapi.schemas.health import HealthCheckResponse
from blogapi.schemas.post import PostDraft, PostFields, PostResponse

__all__ = [
    "HealthCheckResponse",
    "LoginRequest",
    "MessageResponse",
    "PostDraft",
    "PostFields",
    "PostResponse",
    "RoleGrantRequest",
    "UserProfile",
]
