"""
Tests for user account API endpoints
"""

from httpx import AsyncClient
from sqlalchemy import select, func

from vidtube.models.subscription import Subscription
from vidtube.models.user import User
from vidtube.models.watch_history import WatchHistoryEntry

TEST_PASSWORD = "password123"


def registration_form(**overrides):
    form = {
        "fullname": "Dana Scully",
        "email": "dana@example.com",
        "username": "DanaS",
        "password": "trustno1!",
    }
    form.update(overrides)
    return form


class TestRegistration:

    async def test_register_success(self, client: AsyncClient, media, image_file):
        response = await client.post(
            "/api/v1/users/register",
            data=registration_form(),
            files={"avatar": image_file},
        )

        assert response.status_code == 201
        body = response.json()
        assert body["success"] is True
        assert body["statusCode"] == 201
        user = body["data"]
        assert user["username"] == "danas"
        assert user["email"] == "dana@example.com"
        assert user["avatar"]["url"].startswith("https://media.test/image/")
        assert user["cover_image"] is None
        assert "password_hash" not in user
        assert "refresh_token" not in user
        assert len(media.uploaded) == 1

    async def test_register_with_cover_image(self, client: AsyncClient, media, image_file):
        response = await client.post(
            "/api/v1/users/register",
            data=registration_form(),
            files={"avatar": image_file, "coverImage": ("cover.jpg", b"jpeg-bytes", "image/jpeg")},
        )

        assert response.status_code == 201
        assert response.json()["data"]["cover_image"]["asset_id"].startswith("image/")
        assert len(media.uploaded) == 2

    async def test_duplicate_username_rejected(self, client: AsyncClient, test_db, media, test_user, image_file):
        response = await client.post(
            "/api/v1/users/register",
            data=registration_form(username="ALICE", email="new@example.com"),
            files={"avatar": image_file},
        )

        assert response.status_code == 400
        body = response.json()
        assert body["success"] is False
        assert body["data"] is None
        assert "already exists" in body["message"]
        assert await test_db.scalar(select(func.count()).select_from(User)) == 1
        assert media.uploaded == {}

    async def test_duplicate_email_rejected(self, client: AsyncClient, test_db, test_user, image_file):
        response = await client.post(
            "/api/v1/users/register",
            data=registration_form(email="ALICE@example.com"),
            files={"avatar": image_file},
        )

        assert response.status_code == 400
        assert await test_db.scalar(select(func.count()).select_from(User)) == 1

    async def test_avatar_required(self, client: AsyncClient):
        response = await client.post("/api/v1/users/register", data=registration_form())

        assert response.status_code == 400
        assert response.json()["message"] == "Avatar file is required"

    async def test_short_password_rejected(self, client: AsyncClient, image_file):
        response = await client.post(
            "/api/v1/users/register",
            data=registration_form(password="short"),
            files={"avatar": image_file},
        )

        assert response.status_code == 400
        assert response.json()["errors"][0]["field"] == "password"

    async def test_blank_fullname_rejected(self, client: AsyncClient, image_file):
        response = await client.post(
            "/api/v1/users/register",
            data=registration_form(fullname="   "),
            files={"avatar": image_file},
        )

        assert response.status_code == 400
        assert response.json()["message"] == "fullname is required"

    async def test_malformed_email_rejected(self, client: AsyncClient, test_db, media, image_file):
        for email in ("not an email@@", "x@y", "@@@a", "dana@"):
            response = await client.post(
                "/api/v1/users/register",
                data=registration_form(email=email),
                files={"avatar": image_file},
            )

            assert response.status_code == 400, email
            assert response.json()["errors"][0]["field"] == "email"

        assert await test_db.scalar(select(func.count()).select_from(User)) == 0
        assert media.uploaded == {}

    async def test_overlong_fields_rejected(self, client: AsyncClient, test_db, media, image_file):
        for field, value in (("username", "u" * 51), ("fullname", "F" * 101)):
            response = await client.post(
                "/api/v1/users/register",
                data=registration_form(**{field: value}),
                files={"avatar": image_file},
            )

            assert response.status_code == 400
            assert response.json()["errors"][0]["field"] == field

        assert await test_db.scalar(select(func.count()).select_from(User)) == 0
        assert media.uploaded == {}

    async def test_disallowed_avatar_type(self, client: AsyncClient, media):
        response = await client.post(
            "/api/v1/users/register",
            data=registration_form(),
            files={"avatar": ("avatar.txt", b"text", "text/plain")},
        )

        assert response.status_code == 400
        assert media.uploaded == {}


class TestSessions:

    async def test_login_by_username(self, client: AsyncClient, test_user):
        response = await client.post("/api/v1/users/login", json={"username": "alice", "password": TEST_PASSWORD})

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["user"]["id"] == str(test_user.id)
        assert data["accessToken"]
        assert data["refreshToken"]
        cookies = " ".join(response.headers.get_list("set-cookie"))
        assert "accessToken=" in cookies
        assert "refreshToken=" in cookies
        assert "HttpOnly" in cookies

    async def test_login_by_email(self, client: AsyncClient, test_user):
        response = await client.post(
            "/api/v1/users/login", json={"email": "ALICE@example.com", "password": TEST_PASSWORD}
        )
        assert response.status_code == 200

    async def test_login_wrong_password(self, client: AsyncClient, test_user):
        response = await client.post("/api/v1/users/login", json={"username": "alice", "password": "wrong-password"})

        assert response.status_code == 401
        assert response.json()["message"] == "Invalid user credentials"

    async def test_login_unknown_user(self, client: AsyncClient):
        response = await client.post("/api/v1/users/login", json={"username": "nobody", "password": TEST_PASSWORD})
        assert response.status_code == 404

    async def test_login_requires_identifier(self, client: AsyncClient):
        response = await client.post("/api/v1/users/login", json={"password": TEST_PASSWORD})
        assert response.status_code == 400

    async def test_refresh_rotates_and_rejects_reuse(self, client: AsyncClient, test_user):
        login = await client.post("/api/v1/users/login", json={"username": "alice", "password": TEST_PASSWORD})
        original = login.json()["data"]["refreshToken"]
        client.cookies.clear()

        refreshed = await client.post("/api/v1/users/refresh-token", json={"refreshToken": original})
        assert refreshed.status_code == 200
        rotated = refreshed.json()["data"]["refreshToken"]
        assert rotated != original
        client.cookies.clear()

        reused = await client.post("/api/v1/users/refresh-token", json={"refreshToken": original})
        assert reused.status_code == 401
        assert reused.json()["message"] == "Refresh token is expired or used"

    async def test_refresh_without_token(self, client: AsyncClient):
        response = await client.post("/api/v1/users/refresh-token")

        assert response.status_code == 401
        assert response.json()["message"] == "Unauthorized request"

    async def test_logout_invalidates_refresh_token(self, client: AsyncClient, test_user):
        login = await client.post("/api/v1/users/login", json={"username": "alice", "password": TEST_PASSWORD})
        tokens = login.json()["data"]
        client.cookies.clear()

        logout = await client.post(
            "/api/v1/users/logout", headers={"Authorization": f"Bearer {tokens['accessToken']}"}
        )
        assert logout.status_code == 200
        assert logout.json()["data"] == {}

        response = await client.post("/api/v1/users/refresh-token", json={"refreshToken": tokens["refreshToken"]})
        assert response.status_code == 401

    async def test_protected_route_requires_token(self, client: AsyncClient):
        response = await client.get("/api/v1/users/current-user")

        assert response.status_code == 401
        assert response.json() == {
            "statusCode": 401,
            "data": None,
            "message": "Unauthorized request",
            "success": False,
            "errors": [],
        }

    async def test_current_user(self, client: AsyncClient, test_user, auth_headers):
        response = await client.get("/api/v1/users/current-user", headers=auth_headers)

        assert response.status_code == 200
        assert response.json()["data"]["username"] == "alice"


class TestProfile:

    async def test_change_password(self, client: AsyncClient, test_user, auth_headers):
        wrong = await client.patch(
            "/api/v1/users/change-password",
            json={"oldPassword": "not-it-at-all", "newPassword": "brand-new-pass"},
            headers=auth_headers,
        )
        assert wrong.status_code == 400
        assert wrong.json()["message"] == "Invalid old password"

        changed = await client.patch(
            "/api/v1/users/change-password",
            json={"oldPassword": TEST_PASSWORD, "newPassword": "brand-new-pass"},
            headers=auth_headers,
        )
        assert changed.status_code == 200

        login = await client.post("/api/v1/users/login", json={"username": "alice", "password": "brand-new-pass"})
        assert login.status_code == 200

    async def test_update_details(self, client: AsyncClient, test_user, auth_headers):
        response = await client.patch(
            "/api/v1/users/update-user-details",
            json={"fullname": "  Alice Liddell ", "email": "Liddell@Example.com"},
            headers=auth_headers,
        )

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["fullname"] == "Alice Liddell"
        assert data["email"] == "liddell@example.com"

    async def test_update_details_email_taken(self, client: AsyncClient, test_user, other_user, auth_headers):
        response = await client.patch(
            "/api/v1/users/update-user-details",
            json={"email": "bob@example.com"},
            headers=auth_headers,
        )
        assert response.status_code == 400

    async def test_update_details_malformed_email(self, client: AsyncClient, test_user, auth_headers):
        response = await client.patch(
            "/api/v1/users/update-user-details",
            json={"email": "x@y"},
            headers=auth_headers,
        )

        assert response.status_code == 400
        current = await client.get("/api/v1/users/current-user", headers=auth_headers)
        assert current.json()["data"]["email"] == "alice@example.com"

    async def test_update_details_empty_patch(self, client: AsyncClient, test_user, auth_headers):
        response = await client.patch("/api/v1/users/update-user-details", json={}, headers=auth_headers)
        assert response.status_code == 400

    async def test_replace_avatar_deletes_old_asset(self, client: AsyncClient, media, test_user, auth_headers, image_file):
        response = await client.patch(
            "/api/v1/users/update-user-avatar",
            files={"avatar": image_file},
            headers=auth_headers,
        )

        assert response.status_code == 200
        new_asset = response.json()["data"]["avatar"]["asset_id"]
        assert new_asset in media.uploaded
        assert media.deleted == ["image/alice.png"]

    async def test_replace_cover_image(self, client: AsyncClient, media, test_user, auth_headers, image_file):
        response = await client.patch(
            "/api/v1/users/update-user-coverImage",
            files={"coverImage": image_file},
            headers=auth_headers,
        )

        assert response.status_code == 200
        assert response.json()["data"]["cover_image"]["url"].startswith("https://media.test/")
        assert media.deleted == []

    async def test_replace_avatar_upload_failure_keeps_old(self, client: AsyncClient, media, test_user, auth_headers, image_file):
        media.fail_uploads = True
        response = await client.patch(
            "/api/v1/users/update-user-avatar",
            files={"avatar": image_file},
            headers=auth_headers,
        )

        assert response.status_code == 400
        assert media.deleted == []
        current = await client.get("/api/v1/users/current-user", headers=auth_headers)
        assert current.json()["data"]["avatar"]["asset_id"] == "image/alice.png"


class TestChannel:

    async def test_channel_profile(self, client: AsyncClient, test_db, make_user, test_user, other_user, auth_headers):
        carol = await make_user("carol")
        test_db.add_all([
            Subscription(subscriber_id=test_user.id, channel_id=other_user.id),
            Subscription(subscriber_id=carol.id, channel_id=other_user.id),
            Subscription(subscriber_id=other_user.id, channel_id=carol.id),
        ])
        await test_db.commit()

        response = await client.get("/api/v1/users/channel/BOB", headers=auth_headers)

        assert response.status_code == 200
        profile = response.json()["data"]
        assert profile["username"] == "bob"
        assert profile["subscribers_count"] == 2
        assert profile["channels_subscribed_to_count"] == 1
        assert profile["is_subscribed"] is True

    async def test_channel_profile_unknown(self, client: AsyncClient, test_user, auth_headers):
        response = await client.get("/api/v1/users/channel/ghost", headers=auth_headers)
        assert response.status_code == 404

    async def test_watch_history_in_viewing_order(
        self, client: AsyncClient, test_db, test_user, other_user, make_video, auth_headers
    ):
        first = await make_video(other_user, "First")
        second = await make_video(other_user, "Second")

        for video in (first, second, first):
            response = await client.get(f"/api/v1/videos/{video.id}", headers=auth_headers)
            assert response.status_code == 200

        history = await client.get("/api/v1/users/watchHistory", headers=auth_headers)

        assert history.status_code == 200
        entries = history.json()["data"]
        assert [entry["title"] for entry in entries] == ["First", "Second", "First"]
        assert entries[0]["owner"] == {
            "id": str(other_user.id),
            "username": "bob",
            "fullname": "Bob",
            "avatar": {"url": "https://media.test/image/bob.png", "asset_id": "image/bob.png"},
        }
        assert await test_db.scalar(select(func.count()).select_from(WatchHistoryEntry)) == 3

    async def test_hyphenated_route_aliases(self, client: AsyncClient, test_user, auth_headers, image_file):
        history = await client.get("/api/v1/users/watch-history", headers=auth_headers)
        cover = await client.patch(
            "/api/v1/users/update-user-cover-image",
            files={"coverImage": image_file},
            headers=auth_headers,
        )

        assert history.status_code == 200
        assert history.json()["data"] == []
        assert cover.status_code == 200
