"""Tests for the authentication routes."""

from collections.abc import Callable

import pytest
from httpx import AsyncClient

from blogapi.auth import Role
from blogapi.configs import settings
from blogapi.models import UserDB

PASSWORD = "correct-horse-battery"


def session_cookie(set_cookie: str) -> str:
    """Extract the session token from a Set-Cookie header."""
    name, _, value = set_cookie.split(";", 1)[0].partition("=")
    assert name == settings.SESSION_COOKIE_NAME
    return value


def registration(**overrides: str) -> dict[str, str]:
    form = {
        "username": "ada",
        "email": "Ada@Example.com",
        "password": PASSWORD,
        "confirmPassword": PASSWORD,
    }
    form.update(overrides)
    return form


class TestRegister:
    @pytest.mark.asyncio
    async def test_register_creates_user_role_account(self, client: AsyncClient) -> None:
        response = await client.post("/auth/register", data=registration())

        assert response.status_code == 200
        body = response.json()
        assert body["username"] == "ada"
        assert body["email"] == "ada@example.com"
        assert body["roles"] == ["USER"]
        assert body["profilePicture"] == settings.DEFAULT_PROFILE_PICTURE

    @pytest.mark.asyncio
    async def test_register_stores_profile_picture(
        self,
        client: AsyncClient,
        valid_png_bytes: bytes,
    ) -> None:
        response = await client.post(
            "/auth/register",
            data=registration(),
            files={"profilePic": ("me.png", valid_png_bytes, "image/png")},
        )

        assert response.status_code == 200
        picture = response.json()["profilePicture"]
        assert picture.endswith("me.png")
        assert (settings.UPLOADS_DIR / picture).exists()

    @pytest.mark.asyncio
    async def test_password_mismatch(self, client: AsyncClient) -> None:
        response = await client.post(
            "/auth/register",
            data=registration(confirmPassword="something-else"),
        )

        assert response.status_code == 400
        errors = response.json()["errors"]
        assert errors[0]["field"] == "confirmPassword"
        assert errors[0]["message"] == "Passwords don't match"

    @pytest.mark.asyncio
    async def test_short_password(self, client: AsyncClient) -> None:
        response = await client.post(
            "/auth/register",
            data=registration(password="short", confirmPassword="short"),
        )

        assert response.status_code == 400
        assert response.json()["detail"] == "Validation failed"
        assert "password" in [error["field"] for error in response.json()["errors"]]

    @pytest.mark.asyncio
    async def test_duplicate_email_is_case_insensitive(
        self,
        client: AsyncClient,
        alice: UserDB,
    ) -> None:
        response = await client.post(
            "/auth/register",
            data=registration(username="alice2", email="ALICE@example.com"),
        )

        assert response.status_code == 400
        assert response.json()["errors"][0]["field"] == "email"

    @pytest.mark.asyncio
    async def test_duplicate_username(self, client: AsyncClient, alice: UserDB) -> None:
        response = await client.post(
            "/auth/register",
            data=registration(username="alice", email="other@example.com"),
        )

        assert response.status_code == 400
        assert response.json()["errors"][0]["field"] == "username"


class TestLogin:
    @pytest.mark.asyncio
    async def test_login_sets_session_cookie(self, client: AsyncClient, alice: UserDB) -> None:
        response = await client.post(
            "/auth/login",
            json={"email": "alice@example.com", "password": PASSWORD},
        )

        assert response.status_code == 200
        assert response.json() == {"message": "Logged in"}
        set_cookie = response.headers["set-cookie"]
        assert "httponly" in set_cookie.lower()
        assert "secure" in set_cookie.lower()
        assert "samesite=none" in set_cookie.lower()

    @pytest.mark.asyncio
    async def test_session_cookie_authenticates(self, client: AsyncClient, alice: UserDB) -> None:
        login = await client.post(
            "/auth/login",
            json={"email": "alice@example.com", "password": PASSWORD},
        )
        token = session_cookie(login.headers["set-cookie"])

        response = await client.get(
            "/auth",
            headers={"Cookie": f"{settings.SESSION_COOKIE_NAME}={token}"},
        )

        assert response.status_code == 200
        assert response.json()["username"] == "alice"
        assert response.json()["userId"] == str(alice.uuid)

    @pytest.mark.asyncio
    async def test_stale_cookie_falls_back_to_bearer_token(
        self,
        client: AsyncClient,
        alice: UserDB,
        auth_headers: Callable[..., dict[str, str]],
    ) -> None:
        response = await client.get(
            "/auth",
            headers={
                **auth_headers(alice),
                "Cookie": f"{settings.SESSION_COOKIE_NAME}=expired.or.tampered",
            },
        )

        assert response.status_code == 200
        assert response.json()["userId"] == str(alice.uuid)

    @pytest.mark.asyncio
    async def test_failures_do_not_reveal_which_part_was_wrong(
        self,
        client: AsyncClient,
        alice: UserDB,
    ) -> None:
        wrong_password = await client.post(
            "/auth/login",
            json={"email": "alice@example.com", "password": "not-the-password"},
        )
        unknown_email = await client.post(
            "/auth/login",
            json={"email": "nobody@example.com", "password": PASSWORD},
        )

        assert wrong_password.status_code == unknown_email.status_code == 401
        assert wrong_password.json() == unknown_email.json() == {"detail": "Invalid entry"}

    @pytest.mark.asyncio
    async def test_current_user_requires_session(self, client: AsyncClient) -> None:
        response = await client.get("/auth")
        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_logout_clears_cookie(
        self,
        client: AsyncClient,
        alice: UserDB,
        auth_headers: Callable[..., dict[str, str]],
    ) -> None:
        response = await client.post("/auth/logout", headers=auth_headers(alice))

        assert response.status_code == 200
        assert response.json() == {"message": "Logged out"}
        assert f'{settings.SESSION_COOKIE_NAME}=""' in response.headers["set-cookie"]


class TestAdminLogin:
    @pytest.mark.asyncio
    async def test_requires_admin_role(self, client: AsyncClient, alice: UserDB) -> None:
        response = await client.post(
            "/auth/admin",
            json={"email": "alice@example.com", "password": PASSWORD},
        )

        assert response.status_code == 403
        assert response.json()["detail"] == "Admin role required"

    @pytest.mark.asyncio
    async def test_admin_login_opens_elevated_session(
        self,
        client: AsyncClient,
        admin_user: UserDB,
    ) -> None:
        login = await client.post(
            "/auth/admin",
            json={"email": "admin@example.com", "password": PASSWORD},
        )
        assert login.status_code == 200
        token = session_cookie(login.headers["set-cookie"])

        response = await client.get(
            "/auth/admin-session",
            headers={"Authorization": f"Bearer {token}"},
        )

        assert response.status_code == 200

    @pytest.mark.asyncio
    async def test_standard_session_is_not_elevated(
        self,
        client: AsyncClient,
        admin_user: UserDB,
        auth_headers: Callable[..., dict[str, str]],
    ) -> None:
        response = await client.get(
            "/auth/admin-session",
            headers=auth_headers(admin_user, Role.USER, Role.ADMIN),
        )

        assert response.status_code == 403


class TestRoleGrants:
    @pytest.mark.asyncio
    async def test_owner_grants_admin(
        self,
        client: AsyncClient,
        owner_user: UserDB,
        alice: UserDB,
        auth_headers: Callable[..., dict[str, str]],
    ) -> None:
        response = await client.post(
            "/auth/make-admin",
            json={"email": "alice@example.com"},
            headers=auth_headers(owner_user, Role.USER, Role.OWNER),
        )
        assert response.status_code == 200

        login = await client.post(
            "/auth/admin",
            json={"email": "alice@example.com", "password": PASSWORD},
        )
        assert login.status_code == 200

    @pytest.mark.asyncio
    async def test_owner_grants_owner(
        self,
        client: AsyncClient,
        owner_user: UserDB,
        alice: UserDB,
        auth_headers: Callable[..., dict[str, str]],
    ) -> None:
        grant = await client.post(
            "/auth/make-owner",
            json={"email": "alice@example.com"},
            headers=auth_headers(owner_user, Role.USER, Role.OWNER),
        )
        assert grant.status_code == 200

        login = await client.post(
            "/auth/login",
            json={"email": "alice@example.com", "password": PASSWORD},
        )
        token = session_cookie(login.headers["set-cookie"])
        profile = await client.get("/auth", headers={"Authorization": f"Bearer {token}"})
        assert profile.json()["roles"] == ["OWNER", "USER"]

    @pytest.mark.asyncio
    async def test_admin_cannot_grant(
        self,
        client: AsyncClient,
        admin_user: UserDB,
        alice: UserDB,
        auth_headers: Callable[..., dict[str, str]],
    ) -> None:
        response = await client.post(
            "/auth/make-admin",
            json={"email": "alice@example.com"},
            headers=auth_headers(admin_user, Role.USER, Role.ADMIN),
        )

        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_unknown_email(
        self,
        client: AsyncClient,
        owner_user: UserDB,
        auth_headers: Callable[..., dict[str, str]],
    ) -> None:
        response = await client.post(
            "/auth/make-admin",
            json={"email": "ghost@example.com"},
            headers=auth_headers(owner_user, Role.OWNER),
        )

        assert response.status_code == 400
        assert response.json()["detail"] == "Invalid credentials"
