"""HTTP tests for the ``/api/v1/users`` blueprint."""

from __future__ import annotations

import io
import os
from datetime import timedelta

import pytest

from tests.factories.subscription import SubscriptionFactory
from tests.factories.user import DEFAULT_PASSWORD, UserFactory
from tests.factories.video import VideoFactory, WatchHistoryEntryFactory
from tests.helpers.assertions import assert_error, assert_success
from tests.helpers.auth import USERS_URL, bearer, cookie_names, login
from vidtube.infra.jwt.pyjwt_token_provider import PyJWTTokenProvider


@pytest.fixture()
def anon(app, session, media_uploader):
    """Client that never stores or resends cookies."""
    return app.test_client(use_cookies=False)


def _register_form(**overrides):
    data = {
        "fullName": "Ada Lovelace",
        "email": "ada@example.com",
        "username": "ada",
        "password": "analytical1",
        "avatar": (io.BytesIO(b"avatar-bytes"), "me.png"),
    }
    data.update(overrides)
    return {k: v for k, v in data.items() if v is not None}


# --------------------------------------------------------------------------- #
# Registration
# --------------------------------------------------------------------------- #


class TestRegister:
    def test_register_creates_user(self, app, client, media_uploader):
        resp = client.post(
            f"{USERS_URL}/register",
            data=_register_form(coverImage=(io.BytesIO(b"cover"), "cover.jpg")),
            content_type="multipart/form-data",
        )

        data = assert_success(resp, 201)
        assert resp.get_json()["message"] == "User registered successfully"
        assert data["username"] == "ada"
        assert data["fullName"] == "Ada Lovelace"
        assert data["avatar"].endswith("me.png")
        assert data["coverImage"].endswith("cover.jpg")
        assert "password" not in data and "passwordHash" not in data
        assert "refreshToken" not in data
        assert len(media_uploader.uploaded) == 2
        assert os.listdir(app.config["UPLOAD_TMP_DIR"]) == []

    def test_avatar_required(self, client, media_uploader):
        resp = client.post(
            f"{USERS_URL}/register",
            data=_register_form(avatar=None),
            content_type="multipart/form-data",
        )
        assert_error(resp, 400, "Avatar file is required")

    def test_validation_failure_discards_staged_files(self, app, client, media_uploader):
        resp = client.post(
            f"{USERS_URL}/register",
            data=_register_form(password="short"),
            content_type="multipart/form-data",
        )

        body = assert_error(resp, 400, "Validation failed")
        assert body["errors"][0]["field"] == "password"
        assert media_uploader.uploaded == []
        assert os.listdir(app.config["UPLOAD_TMP_DIR"]) == []

    def test_duplicate_user(self, client):
        UserFactory(username="ada")
        resp = client.post(
            f"{USERS_URL}/register",
            data=_register_form(),
            content_type="multipart/form-data",
        )
        assert_error(resp, 409, "User with email or username already exists")

    def test_failed_avatar_upload(self, client, media_uploader):
        media_uploader.fail_all = True
        resp = client.post(
            f"{USERS_URL}/register",
            data=_register_form(),
            content_type="multipart/form-data",
        )
        assert_error(resp, 500, "Error while uploading avatar")


# --------------------------------------------------------------------------- #
# Session lifecycle
# --------------------------------------------------------------------------- #


class TestLogin:
    def test_login_returns_tokens_and_sets_cookies(self, client):
        user = UserFactory(username="neo")

        resp = client.post(
            f"{USERS_URL}/login", json={"username": "neo", "password": DEFAULT_PASSWORD}
        )

        data = assert_success(resp)
        assert data["user"]["id"] == user.id
        assert data["accessToken"] and data["refreshToken"]
        cookies = cookie_names(resp)
        assert "HttpOnly" in cookies["accessToken"]
        assert "HttpOnly" in cookies["refreshToken"]
        assert data["refreshToken"] in cookies["refreshToken"]

    def test_login_by_email(self, client):
        UserFactory(email="trinity@example.com")
        resp = client.post(
            f"{USERS_URL}/login",
            json={"email": "trinity@example.com", "password": DEFAULT_PASSWORD},
        )
        assert_success(resp)

    def test_wrong_password(self, client):
        UserFactory(username="neo")
        resp = client.post(f"{USERS_URL}/login", json={"username": "neo", "password": "nope"})
        assert_error(resp, 401, "Invalid user credentials")

    def test_unknown_user(self, client):
        resp = client.post(f"{USERS_URL}/login", json={"username": "ghost", "password": "x"})
        assert_error(resp, 404, "User does not exist")

    def test_identifier_required(self, client):
        resp = client.post(f"{USERS_URL}/login", json={"password": "x"})
        assert_error(resp, 400, "Validation failed")

    def test_missing_token_secret_is_server_error(self, app, client, monkeypatch):
        UserFactory(username="neo")
        monkeypatch.setitem(app.config, "ACCESS_TOKEN_SECRET", None)
        monkeypatch.setitem(app.config, "REFRESH_TOKEN_SECRET", None)

        resp = client.post(
            f"{USERS_URL}/login", json={"username": "neo", "password": DEFAULT_PASSWORD}
        )

        assert_error(resp, 500)
        assert "refreshToken" not in cookie_names(resp)


class TestRefresh:
    def test_refresh_from_cookie_rotates(self, client):
        user = UserFactory()
        first = login(client, user.username)

        resp = client.post(f"{USERS_URL}/refresh-token")

        data = assert_success(resp)
        assert data["refreshToken"] != first["refreshToken"]
        assert data["refreshToken"] in cookie_names(resp)["refreshToken"]

    def test_refresh_from_body(self, client, anon):
        user = UserFactory()
        first = login(client, user.username)

        resp = anon.post(f"{USERS_URL}/refresh-token", json={"refreshToken": first["refreshToken"]})
        assert_success(resp)

        # Replaying the rotated token is refused
        replay = anon.post(
            f"{USERS_URL}/refresh-token", json={"refreshToken": first["refreshToken"]}
        )
        assert_error(replay, 401, "Refresh token is expired or used")

    def test_body_token_wins_over_stale_cookie(self, client, anon):
        user = UserFactory()
        first = login(client, user.username)
        rotated = assert_success(
            anon.post(f"{USERS_URL}/refresh-token", json={"refreshToken": first["refreshToken"]})
        )

        # client still holds the first refresh token in its cookie jar
        resp = client.post(
            f"{USERS_URL}/refresh-token", json={"refreshToken": rotated["refreshToken"]}
        )

        assert_success(resp)

    def test_refresh_without_token(self, anon):
        assert_error(anon.post(f"{USERS_URL}/refresh-token"), 401, "Unauthorized request")

    def test_refresh_with_access_token(self, client, anon):
        user = UserFactory()
        tokens = login(client, user.username)
        resp = anon.post(f"{USERS_URL}/refresh-token", json={"refreshToken": tokens["accessToken"]})
        assert_error(resp, 401, "Invalid refresh token")


class TestLogout:
    def test_logout_revokes_both_tokens(self, client, anon):
        user = UserFactory()
        tokens = login(client, user.username)

        resp = client.post(f"{USERS_URL}/logout", headers=bearer(tokens["accessToken"]))

        assert_success(resp)
        cookies = cookie_names(resp)
        assert "Expires=Thu, 01 Jan 1970" in cookies["accessToken"]
        assert "Expires=Thu, 01 Jan 1970" in cookies["refreshToken"]

        again = anon.get(f"{USERS_URL}/current-user", headers=bearer(tokens["accessToken"]))
        assert_error(again, 401, "Access token revoked")

        refresh = anon.post(
            f"{USERS_URL}/refresh-token", json={"refreshToken": tokens["refreshToken"]}
        )
        assert_error(refresh, 401, "Refresh token is expired or used")

    def test_logout_requires_auth(self, anon):
        assert_error(anon.post(f"{USERS_URL}/logout"), 401, "Unauthorized request")


# --------------------------------------------------------------------------- #
# Access token verification
# --------------------------------------------------------------------------- #


class TestAccessToken:
    def test_current_user_with_bearer(self, anon, client):
        user = UserFactory(username="morpheus")
        tokens = login(client, "morpheus")

        data = assert_success(anon.get(f"{USERS_URL}/current-user", headers=bearer(tokens["accessToken"])))
        assert data["id"] == user.id
        assert data["username"] == "morpheus"

    def test_current_user_with_cookie(self, client):
        user = UserFactory()
        login(client, user.username)

        data = assert_success(client.get(f"{USERS_URL}/current-user"))
        assert data["id"] == user.id

    def test_missing_token(self, anon):
        assert_error(anon.get(f"{USERS_URL}/current-user"), 401, "Unauthorized request")

    def test_expired_token(self, app, anon):
        user = UserFactory()
        stale = PyJWTTokenProvider(
            access_secret=app.config["ACCESS_TOKEN_SECRET"],
            refresh_secret=app.config["REFRESH_TOKEN_SECRET"],
            access_expires=timedelta(seconds=-30),
        ).create_access_token(user.id)

        resp = anon.get(f"{USERS_URL}/current-user", headers=bearer(stale))
        assert_error(resp, 401, "Access token expired")

    def test_refresh_token_is_not_an_access_token(self, anon, token_provider):
        user = UserFactory()
        resp = anon.get(
            f"{USERS_URL}/current-user",
            headers=bearer(token_provider.create_refresh_token(user.id)),
        )
        assert_error(resp, 401, "Invalid access token")


# --------------------------------------------------------------------------- #
# Account
# --------------------------------------------------------------------------- #


class TestAccount:
    def test_change_password(self, client):
        user = UserFactory()
        login(client, user.username)

        resp = client.post(
            f"{USERS_URL}/change-password",
            json={
                "oldPassword": DEFAULT_PASSWORD,
                "newPassword": "a-better-one",
                "confirmPassword": "a-better-one",
            },
        )

        assert_success(resp)
        login(client, user.username, "a-better-one")

    def test_change_password_mismatch(self, client):
        user = UserFactory()
        login(client, user.username)

        resp = client.post(
            f"{USERS_URL}/change-password",
            json={
                "oldPassword": DEFAULT_PASSWORD,
                "newPassword": "a-better-one",
                "confirmPassword": "another-one",
            },
        )
        assert_error(resp, 400, "New password and confirm password do not match")
        login(client, user.username)

    def test_change_password_wrong_old(self, client):
        user = UserFactory()
        login(client, user.username)

        resp = client.post(
            f"{USERS_URL}/change-password",
            json={"oldPassword": "nope", "newPassword": "a-better-one", "confirmPassword": "a-better-one"},
        )
        assert_error(resp, 401, "Invalid old password")

    def test_update_account(self, client):
        user = UserFactory()
        login(client, user.username)

        resp = client.patch(
            f"{USERS_URL}/update-account",
            json={"fullName": "New Name", "email": "new@example.com"},
        )

        data = assert_success(resp)
        assert data["fullName"] == "New Name"
        assert data["email"] == "new@example.com"

    def test_update_account_email_taken(self, client):
        UserFactory(email="taken@example.com")
        user = UserFactory()
        login(client, user.username)

        resp = client.patch(
            f"{USERS_URL}/update-account",
            json={"fullName": "X", "email": "taken@example.com"},
        )
        assert_error(resp, 409, "Email is already in use")

    def test_update_avatar(self, client, media_uploader):
        user = UserFactory()
        login(client, user.username)

        resp = client.patch(
            f"{USERS_URL}/avatar",
            data={"avatar": (io.BytesIO(b"new"), "fresh.png")},
            content_type="multipart/form-data",
        )

        data = assert_success(resp)
        assert data["avatar"].endswith("fresh.png")

    def test_update_avatar_without_file(self, client):
        user = UserFactory()
        login(client, user.username)

        resp = client.patch(f"{USERS_URL}/avatar", data={}, content_type="multipart/form-data")
        assert_error(resp, 400, "Avatar file is missing")

    def test_update_cover_image(self, client, media_uploader):
        user = UserFactory()
        login(client, user.username)

        resp = client.patch(
            f"{USERS_URL}/cover-image",
            data={"coverImage": (io.BytesIO(b"new"), "banner.jpg")},
            content_type="multipart/form-data",
        )

        assert assert_success(resp)["coverImage"].endswith("banner.jpg")


# --------------------------------------------------------------------------- #
# Channel read models
# --------------------------------------------------------------------------- #


class TestChannel:
    def test_channel_profile(self, client):
        channel = UserFactory(username="chai", full_name="Chai Code")
        viewer = UserFactory()
        SubscriptionFactory(subscriber=viewer, channel=channel)
        SubscriptionFactory(channel=channel)
        login(client, viewer.username)

        data = assert_success(client.get(f"{USERS_URL}/c/Chai"))

        assert data == {
            "fullName": "Chai Code",
            "username": "chai",
            "subscribersCount": 2,
            "channelsSubscribedToCount": 0,
            "isSubscribed": True,
            "avatar": channel.avatar_url,
            "coverImage": None,
            "email": channel.email,
        }

    def test_unknown_channel(self, client):
        user = UserFactory()
        login(client, user.username)
        assert_error(client.get(f"{USERS_URL}/c/ghost"), 404, "channel does not exist")

    def test_channel_requires_auth(self, anon):
        UserFactory(username="chai")
        assert_error(anon.get(f"{USERS_URL}/c/chai"), 401)

    def test_watch_history(self, client):
        viewer = UserFactory()
        owner = UserFactory(full_name="Owner")
        watched = VideoFactory(owner=owner, title="Intro")
        orphan = VideoFactory(owner=None, title="Orphan")
        WatchHistoryEntryFactory(user=viewer, video=watched, position=0)
        WatchHistoryEntryFactory(user=viewer, video=orphan, position=1)
        login(client, viewer.username)

        data = assert_success(client.get(f"{USERS_URL}/history"))

        assert [item["title"] for item in data] == ["Intro", "Orphan"]
        assert data[0]["owner"] == {
            "fullName": "Owner",
            "username": owner.username,
            "avatar": owner.avatar_url,
        }
        assert data[0]["videoFile"] == watched.video_file_url
        assert data[0]["isPublished"] is True
        assert data[1]["owner"] is None
