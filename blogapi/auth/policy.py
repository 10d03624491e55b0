"""Access policy: which identity may perform which operation."""

from enum import StrEnum
from uuid import UUID

from blogapi.auth.identity import Identity, Role


class Operation(StrEnum):
    """Operations gated by the access policy."""

    READ_POST = "read_post"
    CREATE_POST = "create_post"
    UPDATE_OWN_POST = "update_own_post"
    DELETE_OWN_POST = "delete_own_post"
    UPDATE_ANY_POST = "update_any_post"
    DELETE_ANY_POST = "delete_any_post"
    VIEW_PROFILE = "view_profile"
    GRANT_ROLE = "grant_role"


PUBLIC_OPERATIONS: frozenset[Operation] = frozenset({Operation.READ_POST})

AUTHENTICATED_OPERATIONS: frozenset[Operation] = frozenset(
    {Operation.CREATE_POST, Operation.VIEW_PROFILE},
)

OWNER_SCOPED_OPERATIONS: frozenset[Operation] = frozenset(
    {Operation.UPDATE_OWN_POST, Operation.DELETE_OWN_POST},
)

# Operations unlocked by holding a role, regardless of resource ownership
ROLE_OPERATIONS: dict[Role, frozenset[Operation]] = {
    Role.USER: frozenset(),
    Role.ADMIN: frozenset({Operation.UPDATE_ANY_POST, Operation.DELETE_ANY_POST}),
    Role.OWNER: frozenset({Operation.GRANT_ROLE}),
}


def is_allowed(
    identity: Identity | None,
    operation: Operation,
    resource_owner: UUID | None = None,
) -> bool:
    """
    Decide whether ``identity`` may perform ``operation``.

    Args:
        identity: Authenticated caller, or None for anonymous requests
        operation: Operation being attempted
        resource_owner: Owner of the targeted resource, for owner-scoped operations

    Returns:
        bool: True when the operation is allowed
    """
    if operation in PUBLIC_OPERATIONS:
        return True
    if identity is None:
        return False
    if operation in AUTHENTICATED_OPERATIONS:
        return True
    if operation in OWNER_SCOPED_OPERATIONS:
        return resource_owner is not None and resource_owner == identity.user_id
    return any(operation in ROLE_OPERATIONS[role] for role in identity.roles)
