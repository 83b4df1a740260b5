"""Account screens behind their feature flags."""

import pytest
from fastapi import status
from httpx import AsyncClient
from sqlalchemy import select

from app.constants.features import (
    ACCOUNT_UPDATED_NOTICE,
    CAPTCHA_FAILED_ALERT,
    CAPTCHA_FALLBACK_ALERT,
    REGISTRATION_NOTICE,
    FeatureFlagName,
)
from app.models.feature_flag import FeatureFlag
from app.models.user import User
from app.services.account_gate import CaptchaVariant
from app.services.jwt_service import JWTService
from tests.conftest import TEST_PASSWORD, auth_headers_for

pytestmark = [pytest.mark.integration, pytest.mark.asyncio]


def registration_data(**overrides):
    data = {
        "username": "newbie",
        "email": "newbie@example.com",
        "password": TEST_PASSWORD,
        "display_name": "New Person",
    }
    data.update(overrides)
    return data


async def find_user(session_local, username: str) -> User | None:
    async with session_local() as session:
        result = await session.execute(select(User).where(User.username == username))
        return result.scalar_one_or_none()


class TestRegistration:
    async def test_disabled_registration_redirects_home(self, async_client: AsyncClient, enable_features):
        await enable_features()

        response = await async_client.get("/account/register")

        assert response.status_code == status.HTTP_303_SEE_OTHER
        assert response.headers["location"] == "/"
        data = response.json()
        assert data["alert"] == "User registrations are not enabled"
        assert data["error_code"] == "FEATURE_DISABLED"

    async def test_missing_flag_row_counts_as_disabled(self, async_client: AsyncClient):
        response = await async_client.post("/account/register", json=registration_data())

        assert response.status_code == status.HTTP_303_SEE_OTHER
        assert response.json()["alert"] == "User registrations are not enabled"

    async def test_form_without_captcha(self, async_client: AsyncClient, enable_features):
        await enable_features(FeatureFlagName.USER_REGISTRATION)

        response = await async_client.get("/account/register")

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["form"] == "registration"
        assert data["captcha"] is None

    async def test_form_offers_highest_priority_captcha(self, async_client: AsyncClient, enable_features, captcha):
        await enable_features(FeatureFlagName.USER_REGISTRATION)
        captcha.configure(CaptchaVariant.V3, CaptchaVariant.V2_INVISIBLE, CaptchaVariant.CHECKBOX)

        response = await async_client.get("/account/register")

        assert response.json()["captcha"] == {"variant": "v3", "site_key": "v3-site-key"}

    async def test_form_after_fallback(self, async_client: AsyncClient, enable_features, captcha):
        await enable_features(FeatureFlagName.USER_REGISTRATION)
        captcha.configure(CaptchaVariant.V3, CaptchaVariant.CHECKBOX)
        marker = JWTService().create_captcha_fallback_token("checkbox")

        response = await async_client.get("/account/register", params={"captcha_fallback": marker})

        data = response.json()
        assert data["captcha"]["variant"] == "checkbox"
        assert data["captcha_fallback"] == marker

    @pytest.mark.parametrize(
        "params",
        [
            {"captcha_variant": "checkbox"},
            {"captcha_fallback": "checkbox"},
            {"captcha_fallback": JWTService().create_confirmation_token(1, "someone@example.com")},
        ],
    )
    async def test_client_cannot_choose_later_variant(
        self, async_client: AsyncClient, enable_features, captcha, params
    ):
        await enable_features(FeatureFlagName.USER_REGISTRATION)
        captcha.configure(CaptchaVariant.V3, CaptchaVariant.CHECKBOX)

        response = await async_client.get("/account/register", params=params)

        data = response.json()
        assert data["captcha"] == {"variant": "v3", "site_key": "v3-site-key"}
        assert data["captcha_fallback"] is None

    async def test_register_without_captcha(self, async_client: AsyncClient, enable_features, session_local):
        await enable_features(FeatureFlagName.USER_REGISTRATION)

        response = await async_client.post("/account/register", json=registration_data())

        assert response.status_code == status.HTTP_303_SEE_OTHER
        assert response.headers["location"] == "/"
        data = response.json()
        assert data["notice"] == REGISTRATION_NOTICE
        assert "confirmation link has been sent to your email address" in data["notice"]

        user = await find_user(session_local, "newbie")
        assert user is not None
        assert user.confirmed_at is None

    @pytest.mark.parametrize(
        "variant",
        [CaptchaVariant.V3, CaptchaVariant.V2_INVISIBLE, CaptchaVariant.CHECKBOX],
    )
    async def test_register_with_passing_captcha(
        self, async_client: AsyncClient, enable_features, captcha, session_local, variant
    ):
        await enable_features(FeatureFlagName.USER_REGISTRATION)
        captcha.configure(variant)

        response = await async_client.post(
            "/account/register",
            json=registration_data(captcha_token="good-token"),
        )

        assert response.json()["notice"] == REGISTRATION_NOTICE
        assert captcha.verifier.calls == [(variant, f"{variant.value}-secret-key", "good-token")]
        assert await find_user(session_local, "newbie") is not None

    async def test_failed_v3_falls_back_then_checkbox_succeeds(
        self, async_client: AsyncClient, enable_features, captcha, session_local
    ):
        await enable_features(FeatureFlagName.USER_REGISTRATION)
        captcha.configure(CaptchaVariant.V3, CaptchaVariant.CHECKBOX)
        captcha.reject(CaptchaVariant.V3)

        response = await async_client.post(
            "/account/register",
            json=registration_data(captcha_token="low-score"),
        )

        assert response.status_code == status.HTTP_303_SEE_OTHER
        data = response.json()
        assert data["alert"] == CAPTCHA_FALLBACK_ALERT
        assert data["captcha"] == {"variant": "checkbox", "site_key": "checkbox-site-key"}
        assert response.headers["location"] == f"/account/register?captcha_fallback={data['captcha_fallback']}"
        assert await find_user(session_local, "newbie") is None

        form = await async_client.get(response.headers["location"])
        assert form.json()["captcha"] == data["captcha"]

        response = await async_client.post(
            "/account/register",
            json=registration_data(captcha_fallback=form.json()["captcha_fallback"], captcha_token="ticked"),
        )

        assert response.json()["notice"] == REGISTRATION_NOTICE
        assert captcha.verifier.calls[-1] == (CaptchaVariant.CHECKBOX, "checkbox-secret-key", "ticked")
        assert await find_user(session_local, "newbie") is not None

    async def test_forged_fallback_is_checked_against_first_variant(
        self, async_client: AsyncClient, enable_features, captcha, session_local
    ):
        await enable_features(FeatureFlagName.USER_REGISTRATION)
        captcha.configure(CaptchaVariant.V3, CaptchaVariant.CHECKBOX)
        captcha.reject(CaptchaVariant.V3)

        response = await async_client.post(
            "/account/register",
            json=registration_data(captcha_fallback="checkbox", captcha_token="ticked"),
        )

        assert response.json()["alert"] == CAPTCHA_FALLBACK_ALERT
        assert captcha.verifier.calls == [(CaptchaVariant.V3, "v3-secret-key", "ticked")]
        assert await find_user(session_local, "newbie") is None

    async def test_failed_v3_without_later_variant_shows_no_captcha(
        self, async_client: AsyncClient, enable_features, captcha, session_local
    ):
        await enable_features(FeatureFlagName.USER_REGISTRATION)
        captcha.configure(CaptchaVariant.V3)
        captcha.reject(CaptchaVariant.V3)

        response = await async_client.post(
            "/account/register",
            json=registration_data(captcha_token="low-score"),
        )

        assert response.status_code == status.HTTP_303_SEE_OTHER
        data = response.json()
        assert data["alert"] == CAPTCHA_FAILED_ALERT
        assert data["captcha"] is None

        form = await async_client.get(response.headers["location"])
        assert form.status_code == status.HTTP_200_OK
        assert form.json()["captcha"] is None

        # Resubmitting from the bare form is still checked against v3
        response = await async_client.post(
            "/account/register",
            json=registration_data(captcha_fallback=form.json()["captcha_fallback"]),
        )

        assert response.json()["alert"] == CAPTCHA_FAILED_ALERT
        assert [call[0] for call in captcha.verifier.calls] == [CaptchaVariant.V3, CaptchaVariant.V3]
        assert await find_user(session_local, "newbie") is None

    async def test_failed_checkbox_shows_form_again(
        self, async_client: AsyncClient, enable_features, captcha, session_local
    ):
        await enable_features(FeatureFlagName.USER_REGISTRATION)
        captcha.configure(CaptchaVariant.CHECKBOX)
        captcha.reject(CaptchaVariant.CHECKBOX)

        response = await async_client.post(
            "/account/register",
            json=registration_data(captcha_token="bad"),
        )

        assert response.json()["alert"] == CAPTCHA_FAILED_ALERT
        assert response.json()["captcha"]["variant"] == "checkbox"
        assert await find_user(session_local, "newbie") is None

    async def test_duplicate_username(self, async_client: AsyncClient, enable_features, make_user):
        await enable_features(FeatureFlagName.USER_REGISTRATION)
        await make_user(username="newbie", email="other@example.com")

        response = await async_client.post("/account/register", json=registration_data())

        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.json()["error_code"] == "USERNAME_EXISTS"

    async def test_weak_password_rejected(self, async_client: AsyncClient, enable_features):
        await enable_features(FeatureFlagName.USER_REGISTRATION)

        response = await async_client.post("/account/register", json=registration_data(password="short"))

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY

    async def test_confirmation_link_confirms_account(
        self, async_client: AsyncClient, make_user, session_local
    ):
        user = await make_user(username="pending", confirmed=False)
        token = JWTService().create_confirmation_token(user.id, user.email)

        response = await async_client.get("/account/confirm", params={"token": token})

        assert response.status_code == status.HTTP_303_SEE_OTHER
        assert response.headers["location"] == "/login"
        assert (await find_user(session_local, "pending")).confirmed_at is not None

    async def test_access_token_is_not_a_confirmation_token(self, async_client: AsyncClient, make_user):
        user = await make_user(username="pending", confirmed=False)

        response = await async_client.get(
            "/account/confirm", params={"token": JWTService().create_access_token(user.id, user.username)}
        )

        assert response.status_code == status.HTTP_401_UNAUTHORIZED


class TestLogin:
    async def test_disabled_login_redirects_home(self, async_client: AsyncClient, enable_features):
        await enable_features(FeatureFlagName.USER_REGISTRATION)

        response = await async_client.get("/login")

        assert response.status_code == status.HTTP_303_SEE_OTHER
        assert response.headers["location"] == "/"
        assert response.json()["alert"] == "User logins are not enabled"

    async def test_renamed_flag_keeps_login_closed(
        self, async_client: AsyncClient, enable_features, session_local, make_user
    ):
        await enable_features(FeatureFlagName.USER_LOGIN)
        async with session_local() as session:
            flag = (await session.execute(select(FeatureFlag).where(FeatureFlag.name == "user_login"))).scalar_one()
            flag.name = "user_logins"
            await session.commit()

        user = await make_user()
        response = await async_client.post("/login", json={"login": user.username, "password": TEST_PASSWORD})

        assert response.json()["alert"] == "User logins are not enabled"

    async def test_login_form(self, async_client: AsyncClient, enable_features):
        await enable_features(FeatureFlagName.USER_LOGIN)

        response = await async_client.get("/login")

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["form"] == "login"

    @pytest.mark.parametrize("login_field", ["username", "email"])
    async def test_login_by_username_or_email(
        self, async_client: AsyncClient, enable_features, make_user, login_field
    ):
        await enable_features(FeatureFlagName.USER_LOGIN)
        user = await make_user(username="reader")

        response = await async_client.post(
            "/login", json={"login": getattr(user, login_field), "password": TEST_PASSWORD}
        )

        assert response.status_code == status.HTTP_303_SEE_OTHER
        assert response.headers["location"] == "/profile/reader"
        token = response.json()["token"]
        assert token["token_type"] == "Bearer"
        assert JWTService().get_user_id_from_token(token["access_token"]) == user.id

    async def test_login_returns_to_referring_page(self, async_client: AsyncClient, enable_features, make_user):
        await enable_features(FeatureFlagName.USER_LOGIN)
        user = await make_user()

        response = await async_client.post(
            "/login",
            json={"login": user.username, "password": TEST_PASSWORD},
            headers={"Referer": "http://test/blog/some-post?page=2"},
        )

        assert response.headers["location"] == "/blog/some-post?page=2"

    async def test_login_ignores_foreign_referer(self, async_client: AsyncClient, enable_features, make_user):
        await enable_features(FeatureFlagName.USER_LOGIN)
        user = await make_user(username="reader")

        response = await async_client.post(
            "/login",
            json={"login": user.username, "password": TEST_PASSWORD},
            headers={"Referer": "https://elsewhere.example/phish"},
        )

        assert response.headers["location"] == "/profile/reader"

    @pytest.mark.parametrize(
        "referer",
        ["/\\elsewhere.example/phish", "//elsewhere.example/phish", "http://test//elsewhere.example/phish"],
    )
    async def test_login_ignores_protocol_relative_referer(
        self, async_client: AsyncClient, enable_features, make_user, referer
    ):
        await enable_features(FeatureFlagName.USER_LOGIN)
        user = await make_user(username="reader")

        response = await async_client.post(
            "/login",
            json={"login": user.username, "password": TEST_PASSWORD},
            headers={"Referer": referer},
        )

        assert response.headers["location"] == "/profile/reader"

    async def test_wrong_password(self, async_client: AsyncClient, enable_features, make_user):
        await enable_features(FeatureFlagName.USER_LOGIN)
        user = await make_user()

        response = await async_client.post("/login", json={"login": user.email, "password": "wrong-password"})

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    async def test_unconfirmed_user_cannot_login(self, async_client: AsyncClient, enable_features, make_user):
        await enable_features(FeatureFlagName.USER_LOGIN)
        user = await make_user(confirmed=False)

        response = await async_client.post("/login", json={"login": user.email, "password": TEST_PASSWORD})

        assert response.status_code == status.HTTP_401_UNAUTHORIZED


class TestProfile:
    async def test_disabled_profiles_redirect_home(self, async_client: AsyncClient, enable_features, make_user):
        await enable_features(FeatureFlagName.USER_LOGIN)
        await make_user(username="reader")

        response = await async_client.get("/profile/reader")

        assert response.status_code == status.HTTP_303_SEE_OTHER
        assert response.json()["alert"] == "User profiles are not enabled"

    async def test_profile(self, async_client: AsyncClient, enable_features, make_user):
        await enable_features(FeatureFlagName.USER_PROFILES)
        await make_user(username="reader", display_name="Avid Reader", profile_text="Hello!")

        response = await async_client.get("/profile/reader")

        assert response.status_code == status.HTTP_200_OK
        profile = response.json()["profile"]
        assert profile["username"] == "reader"
        assert profile["name"] == "Avid Reader"
        assert profile["profile_text"] == "Hello!"
        assert "email" not in profile

    async def test_unknown_profile(self, async_client: AsyncClient, enable_features):
        await enable_features(FeatureFlagName.USER_PROFILES)

        response = await async_client.get("/profile/nobody")

        assert response.status_code == status.HTTP_404_NOT_FOUND


class TestAccountEditing:
    async def test_requires_authentication(self, async_client: AsyncClient):
        response = await async_client.get("/account/edit")
        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    async def test_edit_form(self, async_client: AsyncClient, make_user):
        user = await make_user(username="reader")

        response = await async_client.get("/account/edit", headers=auth_headers_for(user))

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["form"] == "edit_account"
        assert data["account"]["username"] == "reader"

    async def test_update(self, async_client: AsyncClient, make_user, session_local):
        user = await make_user(username="reader")

        response = await async_client.put(
            "/account/update",
            json={"current_password": TEST_PASSWORD, "display_name": "Renamed", "profile_text": "New bio"},
            headers=auth_headers_for(user),
        )

        assert response.status_code == status.HTTP_303_SEE_OTHER
        assert response.headers["location"] == "/account/edit"
        assert response.json()["notice"] == ACCOUNT_UPDATED_NOTICE

        updated = await find_user(session_local, "reader")
        assert updated.display_name == "Renamed"
        assert updated.profile_text == "New bio"

    async def test_update_needs_current_password(self, async_client: AsyncClient, make_user):
        user = await make_user()

        response = await async_client.put(
            "/account/update",
            json={"current_password": "not-my-password", "display_name": "Renamed"},
            headers=auth_headers_for(user),
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
