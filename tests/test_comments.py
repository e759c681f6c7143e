"""Comment endpoints."""

import pytest


@pytest.fixture
def owner(register):
    return register(username="owner", email="owner@example.com")


@pytest.fixture
def stranger(register):
    return register(username="stranger", email="stranger@example.com")


@pytest.fixture
def post(client, owner, auth_header):
    res = client.post("/posts", json={"title": "Test Post", "content": "Test content"}, headers=auth_header(owner))
    return res.get_json()


@pytest.fixture
def comment(client, post, owner, auth_header):
    res = client.post(f"/comments/{post['_id']}", json={"content": "Nice post"}, headers=auth_header(owner))
    assert res.status_code == 201
    return res.get_json()


class TestComments:

    def test_create_with_authentication(self, client, post, stranger, auth_header):
        res = client.post(f"/comments/{post['_id']}", json={"content": "Hi"}, headers=auth_header(stranger))

        assert res.status_code == 201
        body = res.get_json()
        assert body["post"] == post["_id"]
        assert body["owner"]["username"] == "stranger"

    def test_create_without_authentication(self, client, post):
        res = client.post(f"/comments/{post['_id']}", json={"content": "Hi"})

        assert res.status_code == 401

    def test_create_requires_content(self, client, post, owner, auth_header):
        res = client.post(f"/comments/{post['_id']}", json={}, headers=auth_header(owner))

        assert res.status_code == 400

    def test_create_on_unknown_post(self, client, owner, auth_header):
        res = client.post("/comments/507f1f77bcf86cd799439011", json={"content": "Hi"}, headers=auth_header(owner))

        assert res.status_code == 404

    def test_list_comments_for_post(self, client, post, comment):
        res = client.get(f"/comments/post/{post['_id']}")

        assert res.status_code == 200
        body = res.get_json()
        assert [c["_id"] for c in body] == [comment["_id"]]

    def test_list_comments_for_post_without_comments(self, client):
        res = client.get("/comments/post/507f1f77bcf86cd799439011")

        assert res.status_code == 200
        assert res.get_json() == []

    def test_get_comment(self, client, comment):
        res = client.get(f"/comments/{comment['_id']}")

        assert res.status_code == 200
        assert res.get_json()["content"] == "Nice post"

    def test_get_unknown_comment(self, client):
        assert client.get("/comments/507f1f77bcf86cd799439011").status_code == 404

    def test_owner_can_update(self, client, comment, owner, auth_header):
        res = client.put(f"/comments/{comment['_id']}", json={"content": "Edited"}, headers=auth_header(owner))

        assert res.status_code == 200
        assert res.get_json()["content"] == "Edited"

    def test_update_requires_content(self, client, comment, owner, auth_header):
        res = client.put(f"/comments/{comment['_id']}", json={"content": ""}, headers=auth_header(owner))

        assert res.status_code == 400

    def test_stranger_cannot_update(self, client, comment, stranger, auth_header):
        res = client.put(f"/comments/{comment['_id']}", json={"content": "Hacked"}, headers=auth_header(stranger))

        assert res.status_code == 403

    def test_owner_can_delete(self, client, comment, owner, auth_header):
        res = client.delete(f"/comments/{comment['_id']}", headers=auth_header(owner))

        assert res.status_code == 200
        assert res.get_json()["message"] == "Comment deleted successfully"
        assert client.get(f"/comments/{comment['_id']}").status_code == 404

    def test_stranger_cannot_delete(self, client, comment, stranger, auth_header):
        res = client.delete(f"/comments/{comment['_id']}", headers=auth_header(stranger))

        assert res.status_code == 403

    def test_deleted_user_cannot_comment(self, client, post, stranger, auth_header):
        client.delete(f"/users/{stranger['_id']}")

        res = client.post(f"/comments/{post['_id']}", json={"content": "Hi"}, headers=auth_header(stranger))

        assert res.status_code == 401
        assert client.get(f"/comments/post/{post['_id']}").get_json() == []

    def test_list_embeds_owners_without_per_comment_lookups(self, client, post, comment, stranger, auth_header, monkeypatch):
        from models import storage

        client.post(f"/comments/{post['_id']}", json={"content": "Hi"}, headers=auth_header(stranger))

        def no_single_lookups(cls, id):
            raise AssertionError("owner fetched one by one")

        monkeypatch.setattr(storage, "get", no_single_lookups)
        res = client.get(f"/comments/post/{post['_id']}")

        assert res.status_code == 200
        assert {c["owner"]["username"] for c in res.get_json()} == {"owner", "stranger"}
