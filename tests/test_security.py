import time
import unittest

from api_testcase import ApiTestCase

from video_hub_api.app.core.config import Settings, settings
from video_hub_api.app.core.security import TokenManager, hash_password, verify_password


def make_settings(secret="s3cret"):
    config = Settings()
    config.secret_key = secret
    return config


class TokenManagerTests(unittest.TestCase):
    def setUp(self):
        self.tokens = TokenManager(make_settings())

    def test_round_trip_keeps_claims(self):
        token = self.tokens.create_access_token({"sub": "a1", "channel_name": "Ana"})
        payload = self.tokens.decode_access_token(token)
        self.assertEqual(payload["sub"], "a1")
        self.assertEqual(payload["channel_name"], "Ana")
        self.assertIn("exp", payload)

    def test_default_lifetime_is_a_year(self):
        token = self.tokens.create_access_token({"sub": "a1"})
        payload = self.tokens.decode_access_token(token)
        self.assertEqual(make_settings().access_token_expire_minutes, 365 * 24 * 60)
        self.assertGreater(payload["exp"] - time.time(), 364 * 24 * 60 * 60)

    def test_expired_token_rejected(self):
        token = self.tokens.create_access_token({"sub": "a1"}, expires_delta=-10)
        self.assertIsNone(self.tokens.decode_access_token(token))

    def test_tampered_payload_rejected(self):
        token = self.tokens.create_access_token({"sub": "a1"})
        other = self.tokens.create_access_token({"sub": "b1"})
        header, _, signature = token.split(".")
        forged = ".".join([header, other.split(".")[1], signature])
        self.assertIsNone(self.tokens.decode_access_token(forged))

    def test_other_secret_rejected(self):
        token = TokenManager(make_settings("another")).create_access_token({"sub": "a1"})
        self.assertIsNone(self.tokens.decode_access_token(token))

    def test_garbage_rejected(self):
        for value in ("", "abc", "a.b", "a.b.c", "!!!.###.$$$"):
            self.assertIsNone(self.tokens.decode_access_token(value))


class PasswordHashTests(unittest.TestCase):
    def test_hash_and_verify(self):
        stored = hash_password("hunter2")
        self.assertNotIn("hunter2", stored)
        self.assertTrue(verify_password("hunter2", stored))
        self.assertFalse(verify_password("hunter3", stored))

    def test_malformed_hash_never_matches(self):
        self.assertFalse(verify_password("x", "not-a-hash"))
        self.assertFalse(verify_password("x", "zz$zz"))


class BearerDependencyTests(ApiTestCase):
    def setUp(self):
        super().setUp()
        self.create_channel("a1")
        self.create_channel("b1")

    def test_missing_header_is_401(self):
        response = self.client.put("/api/v1/user/subscribe/b1")
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json(), {"error": "Not authenticated"})

    def test_invalid_token_is_401(self):
        response = self.client.put(
            "/api/v1/user/subscribe/b1",
            headers={"Authorization": "Bearer not.a.token"},
        )
        self.assertEqual(response.status_code, 401)
        self.assertIn("error", response.json())

    def test_token_without_subject_is_401(self):
        token = TokenManager(settings).create_access_token({"channel_name": "nobody"})
        response = self.client.put(
            "/api/v1/user/subscribe/b1",
            headers={"Authorization": f"Bearer {token}"},
        )
        self.assertEqual(response.status_code, 401)

    def test_view_counter_needs_no_token(self):
        self.create_video("v1", "b1")
        response = self.client.put("/api/v1/video/views/v1")
        self.assertEqual(response.status_code, 200)


if __name__ == "__main__":
    unittest.main()
