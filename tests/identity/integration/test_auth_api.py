"""Integration tests for the /api/auth endpoints."""

from datetime import UTC, datetime, timedelta

from jose import jwt
from protean import current_domain

from storefront.config import get_settings
from storefront.identity.tokens import COOKIE_NAME, create_access_token
from storefront.identity.user import User


class TestRegisterEndpoint:
    def test_register_returns_token_and_user(self, client):
        response = client.post(
            "/api/auth/register",
            json={"name": "Ayesha Khan", "email": "Ayesha@Example.com", "password": "secret123"},
        )

        assert response.status_code == 201
        body = response.json()
        assert body["success"] is True
        assert body["token"]
        assert body["user"]["email"] == "ayesha@example.com"
        assert body["user"]["is_verified"] is False
        assert "password_hash" not in body["user"]

    def test_register_sets_session_cookie(self, client):
        response = client.post(
            "/api/auth/register",
            json={"name": "Ayesha Khan", "email": "ayesha@example.com", "password": "secret123"},
        )

        assert COOKIE_NAME in response.cookies
        cookie_header = response.headers["set-cookie"].lower()
        assert "httponly" in cookie_header
        assert "samesite=strict" in cookie_header

    def test_duplicate_email_is_a_bad_request(self, client, signup):
        signup(email="ayesha@example.com")

        response = client.post(
            "/api/auth/register",
            json={"name": "Other", "email": "ayesha@example.com", "password": "secret123"},
        )

        assert response.status_code == 400

    def test_short_password_is_a_bad_request(self, client):
        response = client.post(
            "/api/auth/register",
            json={"name": "Ayesha", "email": "ayesha@example.com", "password": "123"},
        )
        assert response.status_code == 400

    def test_missing_fields_are_unprocessable(self, client):
        response = client.post("/api/auth/register", json={"email": "ayesha@example.com"})
        assert response.status_code == 422


class TestLoginEndpoint:
    def test_login(self, client, signup):
        signup()

        response = client.post("/api/auth/login", json={"email": "ayesha@example.com", "password": "secret123"})

        assert response.status_code == 200
        assert response.json()["user"]["last_login"] is not None

    def test_wrong_password(self, client, signup):
        signup()

        response = client.post("/api/auth/login", json={"email": "ayesha@example.com", "password": "nope-nope"})

        assert response.status_code == 401
        assert response.json()["detail"] == "Invalid email or password"

    def test_lockout_after_five_failures(self, client, signup):
        signup()
        for _ in range(5):
            assert (
                client.post("/api/auth/login", json={"email": "ayesha@example.com", "password": "nope-nope"}).status_code
                == 401
            )

        response = client.post("/api/auth/login", json={"email": "ayesha@example.com", "password": "secret123"})

        assert response.status_code == 401
        assert "locked" in response.json()["detail"]

    def test_deactivated_account_cannot_log_in(self, client, signup):
        headers, _ = signup()
        client.delete("/api/auth/deleteaccount", headers=headers)

        response = client.post("/api/auth/login", json={"email": "ayesha@example.com", "password": "secret123"})

        assert response.status_code == 401
        assert response.json()["detail"] == "Account has been deactivated"


class TestSessionResolution:
    def test_me_with_bearer_token(self, client, signup):
        headers, body = signup()

        response = client.get("/api/auth/me", headers=headers)

        assert response.status_code == 200
        assert response.json()["id"] == body["user"]["id"]

    def test_me_with_cookie(self, client, signup):
        _, body = signup()
        client.cookies.set(COOKIE_NAME, body["token"])

        response = client.get("/api/auth/me")

        assert response.status_code == 200

    def test_me_without_token(self, client):
        response = client.get("/api/auth/me")

        assert response.status_code == 401
        assert response.json()["detail"] == "Not authorized, no token"

    def test_me_with_garbage_token(self, client):
        response = client.get("/api/auth/me", headers={"Authorization": "Bearer not-a-jwt"})
        assert response.status_code == 401

    def test_expired_token(self, client, signup):
        _, body = signup()
        stale = create_access_token(body["user"]["id"], now=datetime.now(UTC) - timedelta(days=30))

        response = client.get("/api/auth/me", headers={"Authorization": f"Bearer {stale}"})

        assert response.status_code == 401

    def test_token_for_deleted_user(self, client):
        settings = get_settings()
        token = jwt.encode(
            {"sub": "no-such-user", "exp": datetime.now(UTC) + timedelta(days=1)},
            settings.jwt_secret,
            algorithm=settings.jwt_algorithm,
        )

        response = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 401
        assert response.json()["detail"] == "User not found"

    def test_cookie_close_to_expiry_is_refreshed(self, client, signup):
        _, body = signup()
        settings = get_settings()
        aging = create_access_token(
            body["user"]["id"],
            now=datetime.now(UTC) - timedelta(days=settings.jwt_expire_days) + timedelta(hours=2),
        )
        client.cookies.set(COOKIE_NAME, aging)

        response = client.get("/api/auth/me")

        assert response.status_code == 200
        assert COOKIE_NAME in response.cookies
        assert response.cookies[COOKIE_NAME] != aging

    def test_logout_clears_cookie(self, client):
        response = client.post("/api/auth/logout")

        assert response.status_code == 200
        assert f"{COOKIE_NAME}=" in response.headers["set-cookie"]


class TestAccountEndpoints:
    def test_update_details(self, client, signup):
        headers, _ = signup()

        response = client.put("/api/auth/updatedetails", json={"name": "Ayesha K."}, headers=headers)

        assert response.status_code == 200
        assert response.json()["name"] == "Ayesha K."

    def test_update_password_returns_new_session(self, client, signup):
        headers, _ = signup()

        response = client.put(
            "/api/auth/updatepassword",
            json={"current_password": "secret123", "new_password": "newer-pass"},
            headers=headers,
        )

        assert response.status_code == 200
        assert response.json()["token"]
        login = client.post("/api/auth/login", json={"email": "ayesha@example.com", "password": "newer-pass"})
        assert login.status_code == 200

    def test_update_password_with_wrong_current(self, client, signup):
        headers, _ = signup()

        response = client.put(
            "/api/auth/updatepassword",
            json={"current_password": "wrong-one", "new_password": "newer-pass"},
            headers=headers,
        )

        assert response.status_code == 400

    def test_check_email(self, client, signup):
        signup()

        taken = client.post("/api/auth/check-email", json={"email": "AYESHA@example.com"}).json()
        free = client.post("/api/auth/check-email", json={"email": "free@example.com"}).json()

        assert taken["available"] is False
        assert free["available"] is True

    def test_deleted_account_token_stops_working(self, client, signup):
        headers, _ = signup()

        assert client.delete("/api/auth/deleteaccount", headers=headers).status_code == 200

        response = client.get("/api/auth/me", headers=headers)
        assert response.status_code == 401


class TestPasswordRecoveryEndpoints:
    def test_forgot_and_reset(self, client, signup):
        signup()

        forgot = client.post("/api/auth/forgot-password", json={"email": "ayesha@example.com"})
        assert forgot.status_code == 200
        token = forgot.json()["reset_url"].rsplit("/", 1)[-1]

        reset = client.put(f"/api/auth/reset-password/{token}", json={"password": "fresh-pass"})
        assert reset.status_code == 200
        assert reset.json()["token"]

        again = client.put(f"/api/auth/reset-password/{token}", json={"password": "other-pass"})
        assert again.status_code == 400

    def test_forgot_for_unknown_email(self, client):
        response = client.post("/api/auth/forgot-password", json={"email": "nobody@example.com"})
        assert response.status_code == 404

    def test_reset_unlocks_account(self, client, signup):
        signup()
        for _ in range(5):
            client.post("/api/auth/login", json={"email": "ayesha@example.com", "password": "nope-nope"})

        token = client.post("/api/auth/forgot-password", json={"email": "ayesha@example.com"}).json()["reset_url"]
        client.put(f"/api/auth/reset-password/{token.rsplit('/', 1)[-1]}", json={"password": "fresh-pass"})
        client.cookies.clear()

        response = client.post("/api/auth/login", json={"email": "ayesha@example.com", "password": "fresh-pass"})
        assert response.status_code == 200


class TestEmailVerificationEndpoints:
    def test_verify_email_link_from_mail(self, client, signup, mailer):
        _, body = signup()
        link = mailer.sent_to("ayesha@example.com")[0]["body"]
        token = link.split("/verify-email/")[1].split()[0]

        response = client.get(f"/api/auth/verify-email/{token}")

        assert response.status_code == 200
        assert current_domain.repository_for(User).get(body["user"]["id"]).is_verified is True

    def test_verify_with_bad_token(self, client):
        response = client.get("/api/auth/verify-email/deadbeef")
        assert response.status_code == 400

    def test_resend_verification(self, client, signup, mailer):
        headers, _ = signup()

        response = client.post("/api/auth/resend-verification", headers=headers)

        assert response.status_code == 200
        assert len(mailer.sent_to("ayesha@example.com")) == 2
