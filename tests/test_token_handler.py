import unittest
from datetime import datetime, timedelta, timezone

import jwt

from clubcms.controller.auth_controller import authorize
from clubcms.controller.token_handler import TokenClaim, mint, read_bearer, verify
from clubcms.exceptions import InvalidOrExpiredToken, MalformedToken, MissingToken, NoIdentityContext

SECRET = "unit-test-secret"


class TokenHandlerTests(unittest.TestCase):
    def test_roundtrip_claim(self):
        token = mint(TokenClaim(identity_id="42", role="admin"), secret=SECRET)
        claim = verify(token, secret=SECRET)
        self.assertEqual(claim, TokenClaim(identity_id="42", role="admin"))

    def test_payload_expires_after_one_hour(self):
        now = datetime.now(timezone.utc)
        token = mint(TokenClaim("1", "admin"), secret=SECRET, now=now)
        payload = jwt.decode(token, SECRET, algorithms=["HS256"])
        self.assertEqual(payload["exp"] - payload["iat"], 3600)
        self.assertEqual(payload["user"], {"id": "1", "role": "admin"})

    def test_expired_token_rejected(self):
        issued = datetime.now(timezone.utc) - timedelta(hours=1, seconds=1)
        token = mint(TokenClaim("1", "admin"), secret=SECRET, now=issued)
        with self.assertRaises(InvalidOrExpiredToken):
            verify(token, secret=SECRET)

    def test_token_still_valid_just_before_expiry(self):
        issued = datetime.now(timezone.utc) - timedelta(minutes=59)
        token = mint(TokenClaim("1", "admin"), secret=SECRET, now=issued)
        self.assertEqual(verify(token, secret=SECRET).role, "admin")

    def test_wrong_secret_rejected(self):
        token = mint(TokenClaim("1", "admin"), secret=SECRET)
        with self.assertRaises(InvalidOrExpiredToken):
            verify(token, secret="another-secret")

    def test_tampered_token_rejected(self):
        token = mint(TokenClaim("1", "admin"), secret=SECRET)
        header, payload, signature = token.split(".")
        for index in (0, len(signature) // 2, len(signature) - 2):
            replacement = "A" if signature[index] != "A" else "B"
            forged_sig = signature[:index] + replacement + signature[index + 1:]
            with self.assertRaises(InvalidOrExpiredToken):
                verify(".".join([header, payload, forged_sig]), secret=SECRET)

        forged_payload = jwt.encode(
            {"user": {"id": "1", "role": "admin"}, "iat": 0, "exp": 9999999999},
            "guessed",
            algorithm="HS256",
        ).split(".")[1]
        with self.assertRaises(InvalidOrExpiredToken):
            verify(".".join([header, forged_payload, signature]), secret=SECRET)

    def test_token_without_user_has_no_identity(self):
        now = datetime.now(timezone.utc)
        token = jwt.encode(
            {"sub": "1", "iat": int(now.timestamp()), "exp": int((now + timedelta(hours=1)).timestamp())},
            SECRET,
            algorithm="HS256",
        )
        claim = verify(token, secret=SECRET)
        self.assertEqual(claim, TokenClaim(identity_id=None, role=None))
        with self.assertRaises(NoIdentityContext):
            authorize(claim, ["admin"])

    def test_garbage_rejected(self):
        with self.assertRaises(InvalidOrExpiredToken):
            verify("not-a-jwt", secret=SECRET)

    def test_empty_token_is_missing(self):
        with self.assertRaises(MissingToken):
            verify("", secret=SECRET)

    def test_mint_requires_secret(self):
        with self.assertRaises(ValueError):
            mint(TokenClaim("1", "admin"), secret="")


class ReadBearerTests(unittest.TestCase):
    def test_extracts_token(self):
        self.assertEqual(read_bearer("Bearer abc.def.ghi"), "abc.def.ghi")
        self.assertEqual(read_bearer("bearer abc"), "abc")

    def test_missing_header(self):
        with self.assertRaises(MissingToken):
            read_bearer(None)
        with self.assertRaises(MissingToken):
            read_bearer("")

    def test_malformed_header(self):
        for value in ("Bearer", "abc.def.ghi", "Basic dXNlcjpwYXNz", "Bearer a b"):
            with self.assertRaises(MalformedToken, msg=value):
                read_bearer(value)


if __name__ == "__main__":
    unittest.main()
