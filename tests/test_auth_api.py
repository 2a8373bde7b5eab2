def register(client, email="nia@campus.edu", role="student", password="s3cret-pass"):
    return client.post("/api/auth/register", json={
        "full_name": "Nia Student", "email": email, "password": password, "role": role,
    })


def test_register_login_me(client):
    assert register(client).status_code == 201

    resp = client.post("/api/auth/login", json={"email": "nia@campus.edu", "password": "s3cret-pass"})
    assert resp.status_code == 200
    body = resp.json()
    assert body["role"] == "student"

    me = client.get("/api/auth/me", headers={"Authorization": f"Bearer {body['access_token']}"}).json()
    assert me["email"] == "nia@campus.edu"
    assert me["id"] == body["user_id"]
    assert "password_hash" not in me


def test_duplicate_email(client):
    register(client)
    resp = register(client)
    assert resp.status_code == 400


def test_wrong_password(client):
    register(client)
    resp = client.post("/api/auth/login", json={"email": "nia@campus.edu", "password": "wrong-pass"})
    assert resp.status_code == 401


def test_unknown_role_rejected(client):
    assert register(client, role="company").status_code == 422
