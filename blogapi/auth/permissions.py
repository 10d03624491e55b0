"""Route dependencies enforcing the access policy."""

from collections.abc import Awaitable, Callable
from typing import Annotated

from fastapi import Depends, HTTPException
from starlette.status import HTTP_403_FORBIDDEN

from blogapi.auth.identity import Identity
from blogapi.auth.policy import Operation, is_allowed
from blogapi.dependencies.dependencies import get_current_identity


def require_operation(operation: Operation) -> Callable[..., Awaitable[Identity]]:
    """
    Create a dependency that requires the caller to be allowed ``operation``.

    Args:
        operation: Operation the route performs

    Returns:
        Callable: Dependency function

    Example:
        @router.delete("/admin/{post_id}")
        async def delete_any(identity: Annotated[Identity, Depends(require_operation(Operation.DELETE_ANY_POST))]):
            ...
    """

    async def operation_checker(
        identity: Annotated[Identity, Depends(get_current_identity)],
    ) -> Identity:
        if not is_allowed(identity, operation):
            raise HTTPException(
                status_code=HTTP_403_FORBIDDEN,
                detail="Not enough permissions",
            )
        return identity

    return operation_checker


async def require_elevated_session(
    identity: Annotated[Identity, Depends(get_current_identity)],
) -> Identity:
    """
    Dependency that requires a session opened through the admin login.

    Parameters
    ----------
    identity : Identity
        Current caller.

    Returns
    -------
    Identity
        The caller if the session is elevated.

    Raises
    ------
    HTTPException
        403 if the session did not come from the admin login.
    """
    if not identity.elevated:
        raise HTTPException(
            status_code=HTTP_403_FORBIDDEN,
            detail="User is not a admin",
        )
    return identity


CreatorDep = Annotated[Identity, Depends(require_operation(Operation.CREATE_POST))]
PostAdminUpdateDep = Annotated[Identity, Depends(require_operation(Operation.UPDATE_ANY_POST))]
PostAdminDeleteDep = Annotated[Identity, Depends(require_operation(Operation.DELETE_ANY_POST))]
RoleGranterDep = Annotated[Identity, Depends(require_operation(Operation.GRANT_ROLE))]
ElevatedSessionDep = Annotated[Identity, Depends(require_elevated_session)]
