import pytest

from alumni_connect.core.errors import FetchFailed
from alumni_connect.services import conversation_service, thread_service
from tests.conftest import auth_headers


@pytest.fixture
def users_(add_user):
    return {
        "student": add_user("Sam Student", "student", email="sam@campus.edu"),
        "admin": add_user("Ada Admin", "admin", email="ada@campus.edu"),
        "alumni": add_user("Al Alumni", "alumni", email="al@alumni.org"),
    }


def test_requires_token(client):
    assert client.get("/api/messages/contacts").status_code in (401, 403)


def test_rejects_bad_token(client):
    resp = client.get("/api/messages/contacts", headers={"Authorization": "Bearer nope"})
    assert resp.status_code == 401


def test_inactive_user_is_refused(client, add_user):
    ghost = add_user("Gone Student", "student", is_active=False)
    assert client.get("/api/messages/contacts", headers=auth_headers(ghost)).status_code == 403


def test_contacts(client, users_):
    resp = client.get("/api/messages/contacts", headers=auth_headers(users_["student"]))
    assert resp.status_code == 200
    assert [c["email"] for c in resp.json()] == ["ada@campus.edu"]


def test_send_read_flow(client, users_):
    student, admin = users_["student"], users_["admin"]

    resp = client.post(f"/api/messages/threads/{admin.id}", json={"body": " hello "},
                       headers=auth_headers(student))
    assert resp.status_code == 201
    assert resp.json()["body"] == "hello"
    assert resp.json()["is_read"] is False

    assert client.get("/api/messages/unread-count", headers=auth_headers(admin)).json() == {"unread_count": 1}

    convs = client.get("/api/messages/conversations", headers=auth_headers(admin)).json()
    first = convs["conversations"][0]
    assert first["contact"]["id"] == student.id
    assert first["unread_count"] == 1
    assert first["last_message"]["body"] == "hello"
    assert convs["total_unread"] == 1

    thread = client.get(f"/api/messages/threads/{student.id}", headers=auth_headers(admin)).json()
    assert thread["contact_id"] == student.id
    assert [m["body"] for m in thread["messages"]] == ["hello"]
    assert thread["marked_read"] == 1

    assert client.get("/api/messages/unread-count", headers=auth_headers(admin)).json() == {"unread_count": 0}


def test_peek_thread_without_marking(client, users_, add_message):
    add_message(users_["admin"], users_["student"])
    headers = auth_headers(users_["student"])

    thread = client.get(f"/api/messages/threads/{users_['admin'].id}?mark_read=false", headers=headers).json()
    assert thread["marked_read"] == 0
    assert thread["messages"][0]["is_read"] is False

    resp = client.post(f"/api/messages/threads/{users_['admin'].id}/read", headers=headers)
    assert resp.json() == {"contact_id": users_["admin"].id, "marked_read": 1}


def test_blank_message_is_tagged_validation_error(client, users_):
    resp = client.post(f"/api/messages/threads/{users_['admin'].id}", json={"body": "   "},
                       headers=auth_headers(users_["student"]))
    assert resp.status_code == 422
    assert resp.json()["error"] == "validation_error"


def test_student_cannot_message_alumni(client, users_):
    resp = client.post(f"/api/messages/threads/{users_['alumni'].id}", json={"body": "hi"},
                       headers=auth_headers(users_["student"]))
    assert resp.status_code == 404
    assert resp.json()["error"] == "contact_not_found"


def test_conversation_search(client, users_):
    resp = client.get("/api/messages/conversations?search=SAM", headers=auth_headers(users_["alumni"]))
    assert [c["contact"]["full_name"] for c in resp.json()["conversations"]] == ["Sam Student"]


def test_store_failure_is_tagged(client, users_, monkeypatch):
    async def down(*args):
        raise FetchFailed("store unreachable")

    monkeypatch.setattr(conversation_service, "fetch_conversation", down)
    resp = client.get("/api/messages/conversations", headers=auth_headers(users_["alumni"]))
    assert resp.status_code == 503
    assert resp.json() == {"error": "fetch_failed", "detail": "Could not load any of 2 conversations"}


def test_health(client):
    assert client.get("/health").json() == {"status": "healthy", "database": "connected"}


def test_search_total_unread_counts_only_matches(client, users_, add_message):
    alumni = users_["alumni"]
    add_message(users_["student"], alumni)
    add_message(users_["admin"], alumni)
    add_message(users_["admin"], alumni)

    body = client.get("/api/messages/conversations?search=ada", headers=auth_headers(alumni)).json()
    assert [c["contact"]["id"] for c in body["conversations"]] == [users_["admin"].id]
    assert body["total_unread"] == 2


def test_thread_still_returned_when_mark_read_fails(client, users_, add_message, monkeypatch):
    add_message(users_["admin"], users_["student"], "welcome")

    async def down(*args):
        raise FetchFailed("store unreachable")

    monkeypatch.setattr(thread_service, "mark_incoming_read", down)
    resp = client.get(f"/api/messages/threads/{users_['admin'].id}", headers=auth_headers(users_["student"]))
    assert resp.status_code == 200
    assert [m["body"] for m in resp.json()["messages"]] == ["welcome"]
    assert resp.json()["marked_read"] == 0
