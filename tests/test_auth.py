"""Register/login/logout/refresh flows and the refresh-token list they maintain."""

from bson import ObjectId

from models import storage
from models.user import User


def _stored_tokens(user_id):
    return storage.get(User, ObjectId(user_id)).refresh_tokens


class TestRegister:

    def test_register_returns_user_and_tokens(self, client):
        res = client.post(
            "/auth/register",
            json={"username": "testuser", "email": "Test@Example.com ", "password": "password123"},
        )

        assert res.status_code == 201
        body = res.get_json()
        assert set(body) == {"_id", "username", "email", "accessToken", "refreshToken"}
        assert body["email"] == "test@example.com"
        assert _stored_tokens(body["_id"]) == [body["refreshToken"]]

    def test_password_is_hashed(self, register):
        body = register()
        user = storage.get(User, ObjectId(body["_id"]))
        assert user.password_hash != "password123"
        assert user.password_hash.startswith("$argon2")

    def test_duplicate_email_is_a_conflict(self, client, register):
        register(username="user1", email="test@example.com")

        res = client.post(
            "/auth/register",
            json={"username": "user2", "email": "test@example.com", "password": "password123"},
        )

        assert res.status_code == 400
        assert res.get_json()["message"] == "User already exists"
        assert storage.count(User) == 1

    def test_duplicate_username_is_a_conflict(self, client, register):
        register(username="same", email="a@example.com")

        res = client.post(
            "/auth/register",
            json={"username": "same", "email": "b@example.com", "password": "password123"},
        )

        assert res.status_code == 400

    def test_missing_fields(self, client):
        res = client.post("/auth/register", json={"username": "testuser"})

        assert res.status_code == 400
        body = res.get_json()
        assert "email" in body["details"]
        assert "password" in body["details"]

    def test_bio_too_long(self, client):
        res = client.post(
            "/auth/register",
            json={"username": "testuser", "email": "t@example.com", "password": "password123", "bio": "x" * 501},
        )

        assert res.status_code == 400


class TestLogin:

    def test_login_existing_user(self, client, register):
        registered = register()

        res = client.post("/auth/login", json={"email": "test@example.com", "password": "password123"})

        assert res.status_code == 200
        body = res.get_json()
        assert body["_id"] == registered["_id"]
        assert body["accessToken"]
        assert body["refreshToken"]

    def test_each_login_opens_a_new_session(self, client, register):
        registered = register()
        creds = {"email": "test@example.com", "password": "password123"}

        first = client.post("/auth/login", json=creds).get_json()["refreshToken"]
        second = client.post("/auth/login", json=creds).get_json()["refreshToken"]

        assert len({registered["refreshToken"], first, second}) == 3
        assert _stored_tokens(registered["_id"]) == [registered["refreshToken"], first, second]

    def test_wrong_password(self, client, register):
        register()

        res = client.post("/auth/login", json={"email": "test@example.com", "password": "wrongpassword"})

        assert res.status_code == 400
        assert res.get_json()["message"] == "Invalid credentials"

    def test_unknown_email(self, client):
        res = client.post("/auth/login", json={"email": "nonexistent@example.com", "password": "password123"})

        assert res.status_code == 400
        assert res.get_json()["message"] == "Invalid credentials"

    def test_oldest_sessions_are_evicted(self, app, client, register):
        registered = register()
        limit = app.config["MAX_REFRESH_TOKENS"]
        creds = {"email": "test@example.com", "password": "password123"}

        issued = [client.post("/auth/login", json=creds).get_json()["refreshToken"] for _ in range(limit)]

        assert _stored_tokens(registered["_id"]) == issued
        res = client.post("/auth/refresh", json={"refreshToken": registered["refreshToken"]})
        assert res.status_code == 403


class TestLogout:

    def test_logout_revokes_refresh_token(self, client, register):
        registered = register()

        res = client.post("/auth/logout", json={"refreshToken": registered["refreshToken"]})

        assert res.status_code == 200
        assert res.get_json()["message"] == "Logged out successfully"
        assert _stored_tokens(registered["_id"]) == []
        assert client.post("/auth/refresh", json={"refreshToken": registered["refreshToken"]}).status_code == 403

    def test_logout_only_closes_one_session(self, client, register):
        registered = register()
        other = client.post(
            "/auth/login", json={"email": "test@example.com", "password": "password123"}
        ).get_json()["refreshToken"]

        client.post("/auth/logout", json={"refreshToken": registered["refreshToken"]})

        assert _stored_tokens(registered["_id"]) == [other]

    def test_unknown_token_still_succeeds(self, client):
        res = client.post("/auth/logout", json={"refreshToken": "not-a-real-token"})

        assert res.status_code == 200
        assert res.get_json()["message"] == "Logged out successfully"

    def test_missing_token(self, client):
        res = client.post("/auth/logout", json={})

        assert res.status_code == 400


class TestRefresh:

    def test_refresh_rotates_tokens(self, client, register):
        registered = register()

        res = client.post("/auth/refresh", json={"refreshToken": registered["refreshToken"]})

        assert res.status_code == 200
        body = res.get_json()
        assert set(body) == {"accessToken", "refreshToken"}
        assert body["refreshToken"] != registered["refreshToken"]
        assert _stored_tokens(registered["_id"]) == [body["refreshToken"]]

    def test_used_refresh_token_is_rejected(self, client, register):
        registered = register()
        rotated = client.post("/auth/refresh", json={"refreshToken": registered["refreshToken"]}).get_json()

        reuse = client.post("/auth/refresh", json={"refreshToken": registered["refreshToken"]})

        assert reuse.status_code == 403
        assert reuse.get_json()["message"] == "Invalid refresh token"
        # the token it was rotated into keeps working
        assert client.post("/auth/refresh", json={"refreshToken": rotated["refreshToken"]}).status_code == 200

    def test_new_access_token_is_usable(self, client, register):
        registered = register()
        rotated = client.post("/auth/refresh", json={"refreshToken": registered["refreshToken"]}).get_json()

        res = client.post(
            "/posts",
            json={"title": "t", "content": "c"},
            headers={"Authorization": f"Bearer {rotated['accessToken']}"},
        )

        assert res.status_code == 201

    def test_invalid_refresh_token(self, client):
        res = client.post("/auth/refresh", json={"refreshToken": "invalid-token"})

        assert res.status_code == 403

    def test_access_token_cannot_refresh(self, client, register):
        registered = register()

        res = client.post("/auth/refresh", json={"refreshToken": registered["accessToken"]})

        assert res.status_code == 403

    def test_missing_refresh_token(self, client):
        res = client.post("/auth/refresh", json={})

        assert res.status_code == 401

    def test_deleted_user_cannot_refresh(self, client, register):
        registered = register()
        client.delete(f"/users/{registered['_id']}")

        res = client.post("/auth/refresh", json={"refreshToken": registered["refreshToken"]})

        assert res.status_code == 403
