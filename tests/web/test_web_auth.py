"""Tests for auth endpoints."""

PASSWORD = "secret123"


class TestSignUp:
    """Tests for POST /api/auth/signup."""

    def test_signup_returns_token_and_profile(self, api):
        response = api.post(
            "/api/auth/signup",
            json={"email": "ana@example.com", "password": PASSWORD, "username": "ana", "full_name": "Ana"},
        )
        assert response.status_code == 201
        data = response.json()
        assert data["token"]
        assert data["token_type"] == "bearer"
        assert data["user"]["username"] == "ana"
        assert data["user"]["full_name"] == "Ana"

    def test_duplicate_is_conflict(self, api, auth_headers):
        response = api.post(
            "/api/auth/signup",
            json={"email": "ana@example.com", "password": PASSWORD, "username": "ana2"},
        )
        assert response.status_code == 409

    def test_weak_password_is_bad_request(self, api):
        response = api.post(
            "/api/auth/signup",
            json={"email": "ana@example.com", "password": "123", "username": "ana"},
        )
        assert response.status_code == 400
        assert "Password" in response.json()["detail"]


class TestLogin:
    """Tests for login and logout."""

    def test_login(self, api, auth_headers):
        response = api.post("/api/auth/login", json={"email": "ana@example.com", "password": PASSWORD})
        assert response.status_code == 200
        token = response.json()["token"]
        me = api.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
        assert me.json()["username"] == "ana"

    def test_wrong_password(self, api, auth_headers):
        response = api.post("/api/auth/login", json={"email": "ana@example.com", "password": "nope-nope"})
        assert response.status_code == 401

    def test_logout_revokes_token(self, api, auth_headers):
        assert api.post("/api/auth/logout", headers=auth_headers).status_code == 204
        assert api.get("/api/auth/me", headers=auth_headers).status_code == 401


class TestProfile:
    """Tests for GET/PATCH /api/auth/me."""

    def test_requires_token(self, api):
        response = api.get("/api/auth/me")
        assert response.status_code == 401
        assert response.headers["www-authenticate"] == "Bearer"

    def test_bad_scheme(self, api, auth_headers):
        token = auth_headers["Authorization"].split()[1]
        assert api.get("/api/auth/me", headers={"Authorization": f"Basic {token}"}).status_code == 401

    def test_unknown_token(self, api):
        assert api.get("/api/auth/me", headers={"Authorization": "Bearer nope"}).status_code == 401

    def test_update_profile(self, api, auth_headers):
        response = api.patch("/api/auth/me", headers=auth_headers, json={"bio": "Reader", "location": "Lima"})
        assert response.status_code == 200
        assert response.json()["bio"] == "Reader"
        assert api.get("/api/auth/me", headers=auth_headers).json()["location"] == "Lima"
