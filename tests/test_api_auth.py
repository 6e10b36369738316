from conftest import PASSWORD, auth_headers, login, register


def test_first_account_becomes_director_then_pending(client):
    first = register(client, "first@ledger.test")
    second = register(client, "second@ledger.test")

    assert first["role"] == "director"
    assert second["role"] == "pending"
    assert "password_hash" not in second


def test_duplicate_email_is_rejected(client):
    register(client, "dup@ledger.test")
    resp = client.post(
        "/api/v1/auth/register",
        json={"name": "Again", "email": "DUP@ledger.test", "password": PASSWORD},
    )
    assert resp.status_code == 409


def test_wrong_password_is_unauthorized(client):
    register(client, "someone@ledger.test")
    resp = client.post("/api/v1/auth/login", data={"email": "someone@ledger.test", "password": "nope-nope"})
    assert resp.status_code == 401
    assert resp.headers["www-authenticate"] == "Bearer"


def test_refresh_token_issues_access_token(client):
    register(client, "someone@ledger.test")
    tokens = login(client, "someone@ledger.test")

    resp = client.post("/api/v1/auth/refresh", json={"refresh_token": tokens["refresh_token"]})
    assert resp.status_code == 200
    access = resp.json()["data"]["access_token"]

    me = client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {access}"})
    assert me.json()["data"]["email"] == "someone@ledger.test"


def test_tokens_are_not_interchangeable(client):
    register(client, "someone@ledger.test")
    tokens = login(client, "someone@ledger.test")

    resp = client.post("/api/v1/auth/refresh", json={"refresh_token": tokens["access_token"]})
    assert resp.status_code == 401

    resp = client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {tokens['refresh_token']}"})
    assert resp.status_code == 401


def test_garbage_token_is_unauthorized(client):
    resp = client.get("/api/v1/auth/me", headers={"Authorization": "Bearer not-a-jwt"})
    assert resp.status_code == 401


def test_pending_user_can_log_in_but_do_nothing(client, director):
    register(client, "waiting@ledger.test")
    headers = auth_headers(client, "waiting@ledger.test")

    assert client.get("/api/v1/auth/me", headers=headers).json()["data"]["role"] == "pending"
    assert client.get("/api/v1/inventory/", headers=headers).status_code == 403
    assert client.get("/api/v1/users/", headers=headers).status_code == 403


def test_director_assigns_roles(client, director):
    user = register(client, "new@ledger.test")

    resp = client.put(f"/api/v1/users/{user['id']}", json={"role": "operator"}, headers=director)
    assert resp.status_code == 200
    assert resp.json()["data"]["role"] == "operator"

    headers = auth_headers(client, "new@ledger.test")
    assert client.get("/api/v1/inventory/", headers=headers).status_code == 200
    assert client.get("/api/v1/users/", headers=headers).status_code == 403


def test_deactivated_user_cannot_log_in(client, make_user):
    make_user("operator", "gone@ledger.test", active=False)

    resp = client.post("/api/v1/auth/login", data={"email": "gone@ledger.test", "password": PASSWORD})
    assert resp.status_code == 401


def test_director_cannot_lock_themselves_out(client, director):
    me = client.get("/api/v1/auth/me", headers=director).json()["data"]

    resp = client.put(f"/api/v1/users/{me['id']}", json={"active": False}, headers=director)
    assert resp.status_code == 400
    resp = client.put(f"/api/v1/users/{me['id']}", json={"role": "operator"}, headers=director)
    assert resp.status_code == 400


def test_linking_unknown_partner_is_not_found(client, director):
    user = register(client, "investor@ledger.test")

    resp = client.put(
        f"/api/v1/users/{user['id']}",
        json={"role": "investor", "partner_id": "P-MISSING"},
        headers=director,
    )
    assert resp.status_code == 404
