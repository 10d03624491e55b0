"""Roles and the authenticated caller identity."""

from dataclasses import dataclass, field
from enum import StrEnum
from uuid import UUID


class Role(StrEnum):
    """Closed set of role memberships a user can hold."""

    USER = "USER"
    ADMIN = "ADMIN"
    OWNER = "OWNER"


@dataclass(frozen=True, slots=True)
class Identity:
    """
    Authenticated caller, decoded from a session token.

    Attributes
    ----------
    user_id : UUID
        Account identifier.
    email : str
        Account email.
    roles : frozenset[Role]
        Role memberships at the time the token was issued.
    elevated : bool
        True when the session came from the admin login flow.
    token_id : str | None
        The token's ``jti`` claim.
    """

    user_id: UUID
    email: str
    roles: frozenset[Role] = field(default_factory=frozenset)
    elevated: bool = False
    token_id: str | None = None
