from auth_utils import password_hash, verify_password


def test_password_hash_round_trip():
    hashed = password_hash("secret123")
    assert hashed != "secret123"
    assert verify_password("secret123", hashed)
    assert not verify_password("falsch", hashed)
    assert not verify_password("secret123", "kein-hash")


def test_register_login_logout(client):
    response = client.post(
        "/auth/register",
        json={"username": "bob", "email": "Bob@Example.com", "password": "secret123"},
    )
    assert response.status_code == 201
    assert response.json()["email"] == "bob@example.com"
    assert client.get("/auth/me").json()["username"] == "bob"

    assert client.post("/auth/logout").json() == {"ok": True}
    assert client.get("/auth/me").status_code == 401

    bad = client.post("/auth/login", json={"login": "bob", "password": "falsch"})
    assert bad.status_code == 401

    ok = client.post("/auth/login", json={"login": "bob@example.com", "password": "secret123"})
    assert ok.status_code == 200
    assert client.get("/auth/me").json()["id"] == response.json()["id"]


def test_duplicate_registration(client):
    body = {"username": "carol", "email": "carol@example.com", "password": "secret123"}
    assert client.post("/auth/register", json=body).status_code == 201
    assert client.post("/auth/register", json=body).status_code == 409
