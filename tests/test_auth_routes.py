import unittest
from datetime import datetime, timedelta, timezone

import jwt

from clubcms.controller.token_handler import TokenClaim, mint, verify
from clubcms.cryptography import hash_secret

from tests.support import ADMIN_EMAIL, ADMIN_SECRET, JWT_SECRET, ApiTestCase, RecordingMailer


class AuthRouteTests(ApiTestCase):
    def generate(self, email=ADMIN_EMAIL, secret=ADMIN_SECRET):
        return self.client.post("/api/auth/generate-otp", json={"email": email, "adminSecret": secret})

    def current_code(self):
        return self.app.state.otp_service.store.get(ADMIN_EMAIL).code

    def test_login_flow(self):
        response = self.generate()
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"message": "OTP sent to admin email."})
        self.assertEqual(len(self.mailer.sent), 1)

        code = self.current_code()
        self.assertIn(code, self.mailer.sent[0]["html"])

        response = self.client.post("/api/auth/verify-otp", json={"email": ADMIN_EMAIL, "otp": code})
        self.assertEqual(response.status_code, 200)
        payload = response.json()
        self.assertEqual(payload["message"], "Logged in successfully!")

        claim = verify(payload["token"], secret=JWT_SECRET)
        self.assertEqual(claim.role, "admin")
        # The admin row is provisioned at start-up, so the id is a real one.
        self.assertEqual(claim.identity_id, "1")

        probe = self.client.get(
            "/api/auth/test-protected",
            headers={"Authorization": f"Bearer {payload['token']}"},
        )
        self.assertEqual(probe.status_code, 200)
        self.assertEqual(probe.json()["user"], {"id": "1", "role": "admin"})

    def test_otp_is_single_use(self):
        self.generate()
        code = self.current_code()
        first = self.client.post("/api/auth/verify-otp", json={"email": ADMIN_EMAIL, "otp": code})
        second = self.client.post("/api/auth/verify-otp", json={"email": ADMIN_EMAIL, "otp": code})
        self.assertEqual(first.status_code, 200)
        self.assertEqual(second.status_code, 400)
        self.assertEqual(second.json(), {"message": "Invalid or expired OTP."})

    def test_expired_otp(self):
        self.generate()
        code = self.current_code()
        self.clock.advance(minutes=10, seconds=1)
        response = self.client.post("/api/auth/verify-otp", json={"email": ADMIN_EMAIL, "otp": code})
        self.assertEqual(response.status_code, 400)

    def test_generate_rejects_wrong_email(self):
        response = self.generate(email="intruder@club.test")
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json(), {"message": "Invalid admin email."})
        self.assertEqual(self.mailer.sent, [])

    def test_generate_rejects_wrong_secret(self):
        response = self.generate(secret="guess")
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json(), {"message": "Invalid Admin Secret Key."})

    def test_generate_reports_delivery_failure(self):
        self.app.state.otp_service.mailer = RecordingMailer(fail=True)
        response = self.generate()
        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.json(), {"message": "Failed to send OTP. Please check server logs."})

    def test_verify_rejects_wrong_email(self):
        response = self.client.post("/api/auth/verify-otp", json={"email": "intruder@club.test", "otp": "abcdef"})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json(), {"message": "Invalid admin email."})

    def test_empty_body(self):
        response = self.client.post("/api/auth/generate-otp", json={})
        self.assertEqual(response.status_code, 400)


class ProtectedRouteTests(ApiTestCase):
    url = "/api/auth/test-protected"

    def test_missing_token(self):
        response = self.client.get(self.url)
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json(), {"message": "No token, authorization denied"})

    def test_malformed_header(self):
        response = self.client.get(self.url, headers={"Authorization": "Token abc"})
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json(), {"message": "Token format invalid, authorization denied"})

    def test_invalid_token(self):
        response = self.client.get(self.url, headers={"Authorization": "Bearer not.a.token"})
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json(), {"message": "Token is not valid or expired"})

    def test_expired_token(self):
        issued = datetime.now(timezone.utc) - timedelta(hours=2)
        token = mint(TokenClaim("1", "admin"), secret=JWT_SECRET, now=issued)
        response = self.client.get(self.url, headers={"Authorization": f"Bearer {token}"})
        self.assertEqual(response.status_code, 401)

    def test_member_role_forbidden(self):
        response = self.client.get(self.url, headers=self.auth_headers(role="member"))
        self.assertEqual(response.status_code, 403)

    def test_missing_role_forbidden(self):
        response = self.client.get(self.url, headers=self.auth_headers(role=None))
        self.assertEqual(response.status_code, 403)
        self.assertEqual(
            response.json(),
            {"message": "Access denied: No user or role information found in token."},
        )

    def test_signed_token_without_user_forbidden(self):
        now = datetime.now(timezone.utc)
        token = jwt.encode(
            {"iat": int(now.timestamp()), "exp": int((now + timedelta(hours=1)).timestamp())},
            JWT_SECRET,
            algorithm="HS256",
        )
        response = self.client.get(self.url, headers={"Authorization": f"Bearer {token}"})
        self.assertEqual(response.status_code, 403)
        self.assertEqual(
            response.json(),
            {"message": "Access denied: No user or role information found in token."},
        )


class MiscRouteTests(ApiTestCase):
    def test_unknown_route(self):
        response = self.client.get("/api/nothing-here")
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json(), {"message": "API Route not found"})

    def test_unrouted_method_answers_not_found(self):
        response = self.client.patch("/api/events")
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json(), {"message": "API Route not found"})

    def test_liveness(self):
        response = self.client.get("/test")
        self.assertEqual(response.status_code, 200)


class SecretHashSettingsTests(ApiTestCase):
    """ADMIN_SECRET_HASH alone is enough to log in."""

    def setUp(self):
        self.settings_overrides = {"admin_secret": None, "admin_secret_hash": hash_secret(ADMIN_SECRET)}
        super().setUp()

    def test_generate_with_hashed_secret(self):
        response = self.client.post(
            "/api/auth/generate-otp", json={"email": ADMIN_EMAIL, "adminSecret": ADMIN_SECRET}
        )
        self.assertEqual(response.status_code, 200)


class MissingSigningSecretTests(ApiTestCase):
    settings_overrides = {"jwt_secret": None}

    def test_login_fails_without_consuming_otp(self):
        self.client.post("/api/auth/generate-otp", json={"email": ADMIN_EMAIL, "adminSecret": ADMIN_SECRET})
        code = self.app.state.otp_service.store.get(ADMIN_EMAIL).code

        for _ in range(2):
            response = self.client.post("/api/auth/verify-otp", json={"email": ADMIN_EMAIL, "otp": code})
            self.assertEqual(response.status_code, 500)
            self.assertEqual(response.json(), {"message": "Server error during login."})
        self.assertIsNotNone(self.app.state.otp_service.store.get(ADMIN_EMAIL))


if __name__ == "__main__":
    unittest.main()
