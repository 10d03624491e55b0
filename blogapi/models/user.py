"""User and role membership database models using SQLModel."""

from datetime import UTC, datetime
from typing import cast
from uuid import UUID, uuid4

from pydantic import ConfigDict
from sqlalchemy import DateTime, Uuid
from sqlalchemy.orm import declared_attr
from sqlmodel import Column, Field, ForeignKey, SQLModel, String


class UserDB(SQLModel, table=True):
    """
    User database model.

    Holds the identity and credential of a registered account. Role
    memberships live in ``user_roles``.
    """

    __tablename__ = cast("declared_attr[str]", "users")

    uuid: UUID = Field(
        default_factory=uuid4,
        primary_key=True,
        nullable=False,
        description="User ID",
    )

    username: str = Field(
        sa_column=Column(String(20), unique=True, nullable=False, index=True),
        description="Username (unique)",
    )
    email: str = Field(
        sa_column=Column(String(255), unique=True, nullable=False, index=True),
        description="Email address (unique)",
    )
    password_hash: str = Field(
        sa_column=Column(String(255), nullable=False),
        description="Argon2 password hash",
    )
    profile_picture: str | None = Field(
        default=None,
        sa_column=Column(String(300)),
        description="Stored name of the profile picture",
    )

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(tz=UTC),
        sa_column=Column(DateTime(timezone=True), nullable=False),
        description="Creation timestamp",
    )
    updated_at: datetime | None = Field(
        default=None,
        sa_column=Column(DateTime(timezone=True)),
        description="Last update timestamp",
    )

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "uuid": "123e4567-e89b-12d3-a456-426614174000",
                "username": "ada",
                "email": "ada@example.com",
                "profile_picture": "defaultProfilePic876543211234.png",
            },
        },
    )


class UserRoleDB(SQLModel, table=True):
    """Role membership of a user, one row per (user, role) pair."""

    __tablename__ = cast("declared_attr[str]", "user_roles")

    user_id: UUID = Field(
        sa_column=Column(
            "user_id",
            Uuid,
            ForeignKey("users.uuid", ondelete="CASCADE"),
            primary_key=True,
        ),
        description="Member user ID",
    )
    role: str = Field(
        sa_column=Column("role", String(20), primary_key=True),
        description="Role name",
    )
