import pytest

from app import services
from app.errors import Unauthorized

from payloads import STRONG_PASSWORD


def test_signup_sets_cookie_and_hides_password(client):
    resp = client.post("/users/signup", json={"username": "ab", "password": STRONG_PASSWORD})
    assert resp.status_code == 200
    body = resp.json()
    assert body["status"] == "success"
    assert body["data"]["user"]["username"] == "ab"
    assert body["data"]["jwt"]
    assert "password" not in resp.text
    assert "hashedPassword" not in body["data"]["user"]

    cookie = resp.headers["set-cookie"]
    assert cookie.startswith("jwt=")
    assert "HttpOnly" in cookie
    assert "samesite=lax" in cookie.lower()
    assert "Path=/" in cookie


def test_signup_rejects_duplicate_username(client, signup):
    signup("ab")
    resp = client.post("/users/signup", json={"username": "ab", "password": STRONG_PASSWORD})
    assert resp.status_code == 409
    assert resp.json() == {
        "status": "fail",
        "message": "Duplicate value for field(s): username",
    }


def test_signup_rejects_weak_password(client):
    resp = client.post("/users/signup", json={"username": "ab", "password": "password"})
    assert resp.status_code == 400
    body = resp.json()
    assert body["status"] == "fail"
    assert body["errors"][0]["field"] == "password"


def test_signin(client, signup):
    signup("ab")
    resp = client.post("/users/signin", json={"username": "ab", "password": STRONG_PASSWORD})
    assert resp.status_code == 200
    assert resp.json()["data"]["jwt"]
    assert resp.headers["set-cookie"].startswith("jwt=")


def test_signin_wrong_password(client, signup):
    signup("ab")
    resp = client.post("/users/signin", json={"username": "ab", "password": "Wr0ng!pw"})
    assert resp.status_code == 401
    assert resp.json()["message"] == "Wrong username or password"


def test_signin_missing_fields(client):
    resp = client.post("/users/signin", json={"username": "ab"})
    assert resp.status_code == 400
    assert resp.json()["message"] == "Username or password missing"


def test_current_user(client, signup):
    account = signup("ab")
    resp = client.get("/users/curr", headers=account["headers"])
    assert resp.status_code == 200
    user = resp.json()["data"]["user"]
    assert user["id"] == account["user"]["id"]
    assert user["avatar"] == ""


def test_current_user_requires_token(client):
    resp = client.get("/users/curr")
    assert resp.status_code == 401
    assert resp.json() == {"status": "fail", "message": "missing or invalid token"}


def test_get_user_for_unknown_id(session):
    with pytest.raises(Unauthorized):
        services.get_user(session, 999)
