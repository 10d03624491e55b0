from blogapi.dependencies.dependencies import (
    AuthServiceDep,
    CurrentIdentity,
    PostServiceDep,
    SessionDep,
    get_auth_service,
    get_current_identity,
    get_optional_identity,
    get_post_service,
)

__all__ = [
    "AuthServiceDep",
    "CurrentIdentity",
    "PostServiceDep",
    "SessionDep",
    "get_auth_service",
    "get_current_identity",
    "get_optional_identity",
    "get_post_service",
]
