"""Tests for chat endpoints."""

import pytest


@pytest.fixture
def ben_id(api, other_headers):
    return api.get("/api/auth/me", headers=other_headers).json()["id"]


@pytest.fixture
def conversation(api, auth_headers):
    response = api.post("/api/chat/conversations", headers=auth_headers, json={"name": "Book club"})
    assert response.status_code == 201
    return response.json()


@pytest.fixture
def shared(api, auth_headers, ben_id, conversation):
    """Ana's conversation with Ben added as a member."""
    response = api.post(
        f"/api/chat/conversations/{conversation['id']}/participants",
        headers=auth_headers,
        json={"user_id": ben_id},
    )
    assert response.status_code == 201
    return conversation


def _send(api, headers, conversation_id, content):
    return api.post(
        f"/api/chat/conversations/{conversation_id}/messages",
        headers=headers,
        json={"content": content},
    )


class TestConversations:
    def test_create(self, api, auth_headers, conversation):
        assert conversation["type"] == "group"
        assert conversation["unread_count"] == 0
        assert conversation["last_message"] is None
        listed = api.get("/api/chat/conversations", headers=auth_headers).json()
        assert [c["name"] for c in listed["conversations"]] == ["Book club"]

    def test_invalid_input(self, api, auth_headers):
        assert api.post("/api/chat/conversations", headers=auth_headers, json={"name": " "}).status_code == 400
        response = api.post("/api/chat/conversations", headers=auth_headers, json={"name": "x", "type": "forum"})
        assert response.status_code == 400

    def test_not_visible_to_non_members(self, api, other_headers, conversation):
        assert api.get("/api/chat/conversations", headers=other_headers).json()["count"] == 0
        url = f"/api/chat/conversations/{conversation['id']}/messages"
        assert api.get(url, headers=other_headers).status_code == 404

    def test_most_recent_activity_first(self, api, auth_headers, conversation):
        api.post("/api/chat/conversations", headers=auth_headers, json={"name": "Later"})
        _send(api, auth_headers, conversation["id"], "bump")
        listed = api.get("/api/chat/conversations", headers=auth_headers).json()["conversations"]
        assert [c["name"] for c in listed] == ["Book club", "Later"]
        assert listed[0]["last_message"]["content"] == "bump"


class TestParticipants:
    def test_list(self, api, auth_headers, shared):
        people = api.get(f"/api/chat/conversations/{shared['id']}/participants", headers=auth_headers).json()
        assert [(p["users"]["username"], p["role"]) for p in people] == [("ana", "admin"), ("ben", "member")]

    def test_duplicate(self, api, auth_headers, ben_id, shared):
        response = api.post(
            f"/api/chat/conversations/{shared['id']}/participants",
            headers=auth_headers,
            json={"user_id": ben_id},
        )
        assert response.status_code == 409

    def test_bad_role(self, api, auth_headers, ben_id, conversation):
        response = api.post(
            f"/api/chat/conversations/{conversation['id']}/participants",
            headers=auth_headers,
            json={"user_id": ben_id, "role": "owner"},
        )
        assert response.status_code == 400


class TestMessages:
    """Tests for sending, reading, editing and deleting messages."""

    def test_unread_until_opened(self, api, auth_headers, other_headers, shared):
        assert _send(api, auth_headers, shared["id"], "Chapter 3 tonight?").status_code == 201

        theirs = api.get("/api/chat/conversations", headers=other_headers).json()["conversations"][0]
        assert theirs["unread_count"] == 1
        mine = api.get("/api/chat/conversations", headers=auth_headers).json()["conversations"][0]
        assert mine["unread_count"] == 0

        messages = api.get(f"/api/chat/conversations/{shared['id']}/messages", headers=other_headers).json()
        assert [m["content"] for m in messages] == ["Chapter 3 tonight?"]
        assert messages[0]["users"]["username"] == "ana"

        theirs = api.get("/api/chat/conversations", headers=other_headers).json()["conversations"][0]
        assert theirs["unread_count"] == 0

    def test_empty_message(self, api, auth_headers, conversation):
        assert _send(api, auth_headers, conversation["id"], "  ").status_code == 400

    def test_unknown_conversation(self, api, auth_headers):
        assert _send(api, auth_headers, "nope", "hi").status_code == 404

    def test_edit_own_message(self, api, auth_headers, other_headers, shared):
        message = _send(api, auth_headers, shared["id"], "helo").json()
        edited = api.patch(f"/api/chat/messages/{message['id']}", headers=auth_headers, json={"content": "hello"})
        assert edited.status_code == 200
        assert edited.json()["content"] == "hello"
        assert edited.json()["is_edited"] is True

        response = api.patch(f"/api/chat/messages/{message['id']}", headers=other_headers, json={"content": "x"})
        assert response.status_code == 404

    def test_soft_delete(self, api, auth_headers, shared):
        message = _send(api, auth_headers, shared["id"], "oops").json()
        deleted = api.delete(f"/api/chat/messages/{message['id']}", headers=auth_headers).json()
        assert deleted["is_deleted"] is True
        assert deleted["content"] is None

        messages = api.get(f"/api/chat/conversations/{shared['id']}/messages", headers=auth_headers).json()
        assert [m["id"] for m in messages] == [message["id"]]

    def test_edit_after_delete(self, api, auth_headers, shared):
        message = _send(api, auth_headers, shared["id"], "oops").json()
        api.delete(f"/api/chat/messages/{message['id']}", headers=auth_headers)
        response = api.patch(f"/api/chat/messages/{message['id']}", headers=auth_headers, json={"content": "undo"})
        assert response.status_code == 404

    def test_delete_unknown(self, api, auth_headers):
        assert api.delete("/api/chat/messages/nope", headers=auth_headers).status_code == 404
