import pytest

from api.auth.utils import create_tokens, decode_token, hash_password, verify_password
from conftest import auth, register
from core.models import User


@pytest.mark.parametrize("extra", [{}, {"firstName": "Ann", "lastName": "Lee"}, {"first_name": "Ann"}])
def test_register_never_returns_password(client, extra):
    body = {"email": "ann@example.com", "username": "ann", "password": "longenough", **extra}
    resp = client.post("/api/auth/register", json=body)

    assert resp.status_code == 201
    payload = resp.json()
    assert payload["success"] is True
    user = payload["data"]["user"]
    assert "password" not in user
    assert "passwordHash" not in user
    assert "longenough" not in resp.text
    assert user["isVerified"] is False
    assert user["subscriptionTier"] == "free"


def test_register_validation_lists_fields(client):
    resp = client.post("/api/auth/register", json={"email": "not-an-email", "password": "short"})

    assert resp.status_code == 400
    body = resp.json()
    assert body["success"] is False
    assert body["error"] == "Validation failed"
    fields = [d.split(":")[0] for d in body["details"]]
    assert {"email", "username", "password"} <= set(fields)


def test_register_duplicate_is_conflict(client, alice):
    resp = client.post(
        "/api/auth/register",
        json={"email": "other@example.com", "username": "alice", "password": "s3cretpass"},
    )
    assert resp.status_code == 409
    assert resp.json() == {"success": False, "error": "User already exists with this email or username"}


def test_login_token_decodes_to_user_id(client, alice):
    resp = client.post("/api/auth/login", json={"email": "alice@example.com", "password": "s3cretpass"})

    assert resp.status_code == 200
    data = resp.json()["data"]
    claims = decode_token(data["tokens"]["accessToken"])
    assert claims["id"] == alice["user"]["id"] == data["user"]["id"]
    assert claims["username"] == "alice"
    assert data["user"]["lastLoginAt"] is not None


def test_demo_user_can_log_in(client):
    resp = client.post("/api/auth/login", json={"email": "demo@chatlingo.com", "password": "password123"})
    assert resp.status_code == 200
    assert decode_token(resp.json()["data"]["tokens"]["accessToken"])["id"] == "1"


def test_wrong_password_never_locks_out(client, alice):
    for _ in range(12):
        resp = client.post("/api/auth/login", json={"email": "alice@example.com", "password": "wrong-password"})
        assert resp.status_code == 401
        assert resp.json()["error"] == "Invalid credentials"

    ok = client.post("/api/auth/login", json={"email": "alice@example.com", "password": "s3cretpass"})
    assert ok.status_code == 200


def test_mixed_case_email_can_log_in(client):
    register(client, email="Carol@Example.COM", username="carol", password="s3cretpass")

    for email in ("Carol@Example.COM", "carol@example.com"):
        resp = client.post("/api/auth/login", json={"email": email, "password": "s3cretpass"})
        assert resp.status_code == 200
        assert resp.json()["data"]["user"]["username"] == "carol"

    dup = client.post(
        "/api/auth/register",
        json={"email": "CAROL@example.com", "username": "carol2", "password": "s3cretpass"},
    )
    assert dup.status_code == 409


def test_unknown_email_is_unauthorized(client):
    resp = client.post("/api/auth/login", json={"email": "ghost@example.com", "password": "whatever1"})
    assert resp.status_code == 401


def test_login_requires_fields(client):
    resp = client.post("/api/auth/login", json={"email": "alice@example.com"})
    assert resp.status_code == 400


def test_deactivated_account(client, alice):
    client.app.state.users.get_by_id(alice["user"]["id"]).is_active = False
    resp = client.post("/api/auth/login", json={"email": "alice@example.com", "password": "s3cretpass"})
    assert resp.status_code == 401
    assert resp.json()["error"] == "Account is deactivated"


def test_profile_roundtrip(client, alice, alice_headers):
    resp = client.get("/api/auth/profile", headers=alice_headers)
    assert resp.status_code == 200
    assert resp.json()["data"]["email"] == "alice@example.com"

    resp = client.put(
        "/api/auth/profile",
        headers=alice_headers,
        json={"firstName": "Alice", "learningGoal": "IELTS 7"},
    )
    assert resp.status_code == 200
    data = resp.json()["data"]
    assert data["firstName"] == "Alice"
    assert data["learningGoal"] == "IELTS 7"
    assert data["lastName"] == ""
    assert "password" not in data


def test_profile_can_clear_optional_fields(client, alice, alice_headers):
    client.put("/api/auth/profile", headers=alice_headers, json={"bio": "Learner", "learningGoal": "IELTS 7"})

    resp = client.put("/api/auth/profile", headers=alice_headers, json={"learningGoal": None, "firstName": None})
    data = resp.json()["data"]
    assert data["learningGoal"] is None
    assert data["bio"] == "Learner"
    assert data["firstName"] == ""


def test_profile_requires_bearer_token(client):
    assert client.get("/api/auth/profile").json()["error"] == "Authorization header missing"
    assert client.get("/api/auth/profile", headers={"Authorization": "Bearer"}).json()["error"] == "Token missing"
    resp = client.get("/api/auth/profile", headers=auth("garbage"))
    assert resp.status_code == 401
    assert resp.json()["error"] == "Invalid token"


def test_refresh_token_is_not_an_access_token(client, alice):
    resp = client.get("/api/auth/profile", headers=auth(alice["tokens"]["refreshToken"]))
    assert resp.status_code == 401


def test_refresh_issues_new_pair(client, alice):
    resp = client.post("/api/auth/refresh", json={"refreshToken": alice["tokens"]["refreshToken"]})
    assert resp.status_code == 200
    tokens = resp.json()["data"]["tokens"]
    assert decode_token(tokens["accessToken"])["id"] == alice["user"]["id"]

    bad = client.post("/api/auth/refresh", json={"refreshToken": alice["tokens"]["accessToken"]})
    assert bad.status_code == 401


def test_token_signed_with_other_secret_is_rejected(client, alice):
    user = client.app.state.users.get_by_id(alice["user"]["id"])
    forged = create_tokens(user, secret="someone-else-entirely-with-a-long-secret-key")["accessToken"]
    assert client.get("/api/auth/profile", headers=auth(forged)).status_code == 401


def test_password_hashing():
    hashed = hash_password("correct horse")
    assert hashed != "correct horse"
    assert verify_password("correct horse", hashed)
    assert not verify_password("wrong horse", hashed)
    assert not verify_password("anything", "not-a-bcrypt-hash")


def test_user_public_view_has_no_hash():
    user = User(id="9", email="x@example.com", username="x", password_hash="$2b$10$abc")
    assert "$2b$10$abc" not in str(user.public())


def test_second_user_gets_next_id(client, alice):
    bob = register(client, email="bob@example.com", username="bob")
    assert int(bob["user"]["id"]) == int(alice["user"]["id"]) + 1
