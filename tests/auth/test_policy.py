"""Tests for the access policy."""

from uuid import uuid4

import pytest

from blogapi.auth import Identity, Operation, Role, is_allowed


def make_identity(*roles: Role) -> Identity:
    return Identity(user_id=uuid4(), email="someone@example.com", roles=frozenset(roles))


class TestPublicOperations:
    def test_anonymous_can_read(self) -> None:
        assert is_allowed(None, Operation.READ_POST)

    @pytest.mark.parametrize(
        "operation",
        [
            Operation.CREATE_POST,
            Operation.UPDATE_OWN_POST,
            Operation.DELETE_OWN_POST,
            Operation.UPDATE_ANY_POST,
            Operation.DELETE_ANY_POST,
            Operation.VIEW_PROFILE,
            Operation.GRANT_ROLE,
        ],
    )
    def test_anonymous_denied_everything_else(self, operation: Operation) -> None:
        assert not is_allowed(None, operation)


class TestOwnerScopedOperations:
    def test_owner_may_change_own_post(self) -> None:
        identity = make_identity(Role.USER)
        assert is_allowed(identity, Operation.UPDATE_OWN_POST, identity.user_id)
        assert is_allowed(identity, Operation.DELETE_OWN_POST, identity.user_id)

    def test_other_user_may_not_change_post(self) -> None:
        identity = make_identity(Role.USER)
        assert not is_allowed(identity, Operation.UPDATE_OWN_POST, uuid4())
        assert not is_allowed(identity, Operation.DELETE_OWN_POST, uuid4())

    def test_admin_role_does_not_widen_owner_path(self) -> None:
        """The owner path stays owner-only even for administrators."""
        identity = make_identity(Role.USER, Role.ADMIN)
        assert not is_allowed(identity, Operation.DELETE_OWN_POST, uuid4())

    def test_missing_owner_is_denied(self) -> None:
        assert not is_allowed(make_identity(Role.USER), Operation.UPDATE_OWN_POST)


class TestRoleOperations:
    def test_user_cannot_use_admin_path(self) -> None:
        identity = make_identity(Role.USER)
        assert not is_allowed(identity, Operation.UPDATE_ANY_POST)
        assert not is_allowed(identity, Operation.DELETE_ANY_POST)

    def test_admin_can_use_admin_path(self) -> None:
        identity = make_identity(Role.USER, Role.ADMIN)
        assert is_allowed(identity, Operation.UPDATE_ANY_POST)
        assert is_allowed(identity, Operation.DELETE_ANY_POST)

    def test_only_owner_grants_roles(self) -> None:
        assert not is_allowed(make_identity(Role.USER, Role.ADMIN), Operation.GRANT_ROLE)
        assert is_allowed(make_identity(Role.OWNER), Operation.GRANT_ROLE)

    def test_owner_role_alone_does_not_moderate_posts(self) -> None:
        assert not is_allowed(make_identity(Role.OWNER), Operation.DELETE_ANY_POST)

    def test_any_authenticated_user_may_create(self) -> None:
        assert is_allowed(make_identity(), Operation.CREATE_POST)
        assert is_allowed(make_identity(), Operation.VIEW_PROFILE)
