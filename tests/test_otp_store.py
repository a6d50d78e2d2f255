import os
import shutil
import tempfile
import unittest
from datetime import datetime, timedelta, timezone

from clubcms.controller.otp_store import DatabaseOtpStore, InMemoryOtpStore, OtpEntry, RedisOtpStore
from clubcms.database import build_engine, build_session_factory, create_tables

EMAIL = "admin@club.test"


class FakeRedis:
    def __init__(self):
        self.values = {}
        self.ttls = {}

    def set(self, key, value, ex=None):
        self.values[key] = value.encode("utf-8")
        self.ttls[key] = ex

    def get(self, key):
        return self.values.get(key)

    def delete(self, key):
        self.values.pop(key, None)


class OtpStoreContract:
    """Behaviour every backing must share."""

    def make_store(self):
        raise NotImplementedError

    def entry(self, code="a1b2c3", minutes=10):
        expires = datetime.now(timezone.utc).replace(microsecond=0) + timedelta(minutes=minutes)
        return OtpEntry(email=EMAIL, code=code, expires_at=expires)

    def test_put_then_get(self):
        store = self.make_store()
        entry = self.entry()
        store.put(entry)
        fetched = store.get(EMAIL)
        self.assertEqual(fetched.code, "a1b2c3")
        self.assertEqual(fetched.expires_at, entry.expires_at)

    def test_put_overwrites(self):
        store = self.make_store()
        store.put(self.entry(code="aaaaaa"))
        store.put(self.entry(code="bbbbbb"))
        self.assertEqual(store.get(EMAIL).code, "bbbbbb")

    def test_delete_consumes(self):
        store = self.make_store()
        store.put(self.entry())
        store.delete(EMAIL)
        self.assertIsNone(store.get(EMAIL))
        # Deleting twice is harmless.
        store.delete(EMAIL)

    def test_get_unknown(self):
        self.assertIsNone(self.make_store().get("nobody@club.test"))


class InMemoryOtpStoreTests(OtpStoreContract, unittest.TestCase):
    def make_store(self):
        return InMemoryOtpStore()


class DatabaseOtpStoreTests(OtpStoreContract, unittest.TestCase):
    def setUp(self):
        self.tmpdir = tempfile.mkdtemp()
        self.engine = build_engine(f"sqlite:///{os.path.join(self.tmpdir, 'otp.db')}")
        create_tables(self.engine)

    def tearDown(self):
        self.engine.dispose()
        shutil.rmtree(self.tmpdir, ignore_errors=True)

    def make_store(self):
        return DatabaseOtpStore(build_session_factory(self.engine))


class RedisOtpStoreTests(OtpStoreContract, unittest.TestCase):
    def make_store(self):
        self.redis = FakeRedis()
        return RedisOtpStore(client=self.redis)

    def test_key_expires_after_entry(self):
        store = self.make_store()
        store.put(self.entry(minutes=10))
        ttl = self.redis.ttls["clubcms:otp:" + EMAIL]
        self.assertGreaterEqual(ttl, 600)

    def test_ttl_follows_injected_clock(self):
        now = datetime(2025, 1, 15, 12, 0, tzinfo=timezone.utc)
        redis_client = FakeRedis()
        store = RedisOtpStore(client=redis_client, clock=lambda: now)
        store.put(OtpEntry(email=EMAIL, code="a1b2c3", expires_at=now + timedelta(minutes=10)))
        self.assertEqual(redis_client.ttls["clubcms:otp:" + EMAIL], 600 + 60)


if __name__ == "__main__":
    unittest.main()
